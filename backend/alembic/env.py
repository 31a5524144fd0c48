import asyncio
import pathlib
import ssl
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from pitchwright.core.config import ModeEnum, settings
from pitchwright.models import PitchDeckRecord  # noqa: F401  (pitch_decks: standard and generated decks)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

db_url = str(settings.ASYNC_DATABASE_URI)

# deck and content are JSON columns; autogenerate compares column types
MIGRATION_OPTIONS = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "render_as_batch": False,
}


def migration_connect_args() -> dict:
    """asyncpg needs an explicit SSL context outside development."""
    if settings.MODE == ModeEnum.development:
        return {}
    ssl_context = ssl.create_default_context()
    ssl_context.check_hostname = False
    ssl_context.verify_mode = ssl.CERT_NONE
    return {"ssl": ssl_context}


def run_migrations_offline() -> None:
    """Emit the pitch deck schema as SQL without a database connection."""
    context.configure(
        url=db_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )

    with context.begin_transaction():
        context.run_migrations()


def apply_migrations(connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connectable = create_async_engine(
        db_url,
        echo=settings.MODE == ModeEnum.development,
        connect_args=migration_connect_args(),
    )

    async with connectable.connect() as connection:
        await connection.run_sync(apply_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
