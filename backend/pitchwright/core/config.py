from enum import Enum
from typing import Any

from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModeEnum(str, Enum):
    development = "development"
    production = "production"
    testing = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file="../.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── App ───────────────────────────────────────────────────
    MODE: ModeEnum = ModeEnum.production
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "PITCHWRIGHT"

    # ── Database ──────────────────────────────────────────────
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_NAME: str = "pitchwright"

    ASYNC_DATABASE_URI: PostgresDsn | str = ""

    @field_validator("ASYNC_DATABASE_URI", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str | None, info) -> Any:
        if isinstance(v, str) and v == "":
            data = info.data
            # Skip SSL for local dev
            mode = data.get("MODE", ModeEnum.development)
            query = "ssl=require" if mode != ModeEnum.development else None
            return PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=data.get("DATABASE_USER"),
                password=data.get("DATABASE_PASSWORD"),
                host=data.get("DATABASE_HOST"),
                port=data.get("DATABASE_PORT"),
                path=data.get("DATABASE_NAME"),
                query=query,
            )
        return v

    # ── LLM collaborators ─────────────────────────────────────
    OPENAI_API_KEY: str = ""
    LLM_MODEL: str = "openai:gpt-4o-mini"
    LLM_ENABLED: bool = False

    # ── Research / asset providers ────────────────────────────
    GOOGLE_SEARCH_API_KEY: str = ""
    GOOGLE_SEARCH_ENGINE_ID: str = ""
    GOOGLE_SEARCH_ENDPOINT: str = "https://www.googleapis.com/customsearch/v1"
    PEXELS_API_KEY: str = ""
    PEXELS_API_URL: str = "https://api.pexels.com/v1/search"
    HTTP_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    # ── Pipeline limits ───────────────────────────────────────
    RESEARCH_FETCH_CONCURRENCY: int = 4
    RESEARCH_FETCH_TIMEOUT_SECONDS: float = 15.0
    ASSET_RESOLUTION_CONCURRENCY: int = 4
    ASSET_RESOLUTION_TIMEOUT_SECONDS: float = 10.0
    GENERATION_TIMEOUT_SECONDS: float = 90.0
    OUTLINE_RESERVE_SECONDS: float = 5.0
    READING_SPEED_CHARS_PER_SECOND: int = 15

settings = Settings()
