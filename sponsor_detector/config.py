# sponsor_detector/config.py
"""
Process-wide configuration, read once from the environment at startup.

A .env file is honoured but never overrides variables already set.
The resulting AppConfig is immutable and passed explicitly to the app factory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from sponsor_detector.llm.gemini import DEFAULT_MODEL


EXTENSION_ORIGIN = "chrome-extension://macaocobdbbeebfpdgiippbpamfnlhee"


def _split_csv(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""
    gemini_api_key: str = ""
    model_name: str = DEFAULT_MODEL
    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "development"
    cors_origins: Tuple[str, ...] = ("*",)
    transcript_languages: Tuple[str, ...] = ("en",)
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_credentials(self) -> bool:
        # Credentials cannot be combined with a wildcard origin
        return "*" not in self.cors_origins

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, load_dotenv_file: bool = True) -> "AppConfig":
        """Build configuration from environment variables (or an explicit mapping)."""
        if env is None:
            if load_dotenv_file:
                load_dotenv(override=False)
            env = os.environ

        config = cls(
            gemini_api_key=env.get("GEMINI_API_KEY", ""),
            model_name=env.get("GEMINI_MODEL", DEFAULT_MODEL),
            host=env.get("HOST", "127.0.0.1"),
            port=int(env.get("PORT", "3000")),
            environment=env.get("APP_ENV", "development"),
            transcript_languages=_split_csv(env.get("TRANSCRIPT_LANGUAGES", "en")) or ("en",),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
        default_origins = (EXTENSION_ORIGIN,) if config.is_production else ("*",)
        return replace(config, cors_origins=_split_csv(env.get("CORS_ORIGINS", "")) or default_origins)

    def validate(self) -> None:
        """Validate that required configuration is present."""
        if not self.gemini_api_key:
            raise ValueError(
                "GEMINI_API_KEY is required. Please set it in your .env file or environment variables."
            )
