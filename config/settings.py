"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    API_BASE_URL: str = Field(default="http://localhost:4000/api")
    API_TOKEN: Optional[str] = None
    REQUEST_TIMEOUT_S: float = Field(default=120.0, ge=0.1)

    MENTEE_NAME: str = "Alex"
    MENTEE_PERSONA: Literal["Open Mentee", "Guarded Mentee"] = "Open Mentee"
    MAX_MESSAGE_CHARS: int = Field(default=500, ge=1)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
