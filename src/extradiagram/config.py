"""Codec configuration using pydantic-settings.

Settings come from environment variables prefixed with EXTRADIAGRAM_
(or a local .env file). Every setting has a safe default, so the codec
works without any configuration.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class CodecSettings(BaseSettings):
    """Codec settings loaded from environment variables.

    Environment variables:
    - EXTRADIAGRAM_ENCODE_DEFAULTS: write fields equal to their defaults
    - EXTRADIAGRAM_ALLOW_EVAL: evaluate expressions in style sheet entries
    - EXTRADIAGRAM_INCLUDE_BASE_PATH: base directory for <include> hrefs
    - EXTRADIAGRAM_LOG_LEVEL / EXTRADIAGRAM_JSON_LOGS: logging output
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRADIAGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    encode_defaults: bool = False

    # Never enable for untrusted documents
    allow_eval: bool = False

    include_base_path: Path | None = None

    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    def resolve_include(self, href: str) -> Path:
        """Resolve an include href against the configured base path."""
        path = Path(href)
        if path.is_absolute() or self.include_base_path is None:
            return path
        return self.include_base_path / path


@lru_cache
def get_settings() -> CodecSettings:
    """Get cached settings instance."""
    return CodecSettings()
