"""
Configuration for the Timesense API.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from timesense.constraints import Thresholds
from timesense.render import DisplayConfig


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # CORS
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173")

    # Request limits
    MAX_CODE_LENGTH: int = Field(default=200_000)

    # Annotations
    VIRTUAL_TEXT_ICON: str = Field(default="🧠")
    HIGHLIGHT_GROUP: str = Field(default="Comment")

    # Constraint warnings
    TIME_WARNING_OPS: float = Field(default=1e8)  # operations per second
    BYTES_PER_ELEMENT: int = Field(default=4)

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if "*" in origins:
            return ["*"]
        return origins

    @property
    def display(self) -> DisplayConfig:
        return DisplayConfig(icon=self.VIRTUAL_TEXT_ICON, highlight_group=self.HIGHLIGHT_GROUP)

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(
            time_warning_ops=self.TIME_WARNING_OPS,
            bytes_per_element=self.BYTES_PER_ELEMENT,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger("timesense")
