# Import all models so SQLModel.metadata registers them for Alembic autogenerate.
from pitchwright.models.base import BaseUUIDModel  # noqa: F401
from pitchwright.models.pitch_deck import PitchDeckRecord  # noqa: F401
