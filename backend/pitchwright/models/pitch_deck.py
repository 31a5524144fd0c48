from enum import Enum

from sqlalchemy import Column, JSON, Text
from sqlmodel import Field

from pitchwright.models.base import BaseUUIDModel


class DeckKind(str, Enum):
    generated = "generated"  # pipeline output, carries a CompletePitchDeck
    standard = "standard"  # template deck, free-form content


class DeckStatus(str, Enum):
    draft = "draft"
    generating = "generating"
    completed = "completed"
    failed = "failed"


class PitchDeckRecord(BaseUUIDModel, table=True):
    __tablename__ = "pitch_decks"

    kind: str = Field(default=DeckKind.generated.value, max_length=20, index=True)
    title: str = Field(max_length=255)
    company_name: str = Field(max_length=255, index=True)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    status: str = Field(default=DeckStatus.draft.value, max_length=20)
    theme: str = Field(default="modern", max_length=20)
    slide_count: int = Field(default=0)
    quality_degraded: bool = Field(default=False)

    # Opaque payloads: the serialized CompletePitchDeck, or a standard deck's content
    deck: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    content: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
