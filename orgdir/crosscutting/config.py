"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Translate limits into the domain ValidationPolicy

Collaborators:
  - container.py: reads settings to build repositories and use cases
  - crosscutting/logger.py: reads log level and format

Constraints:
  - Lives in the crosscutting layer, NOT in domain/application
  - Holds no directory rules; values reach the domain via ValidationPolicy

Notes:
  - Environment variables use the ORGDIR_ prefix (ORGDIR_LOG_LEVEL, ...)
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.value_objects import ValidationPolicy


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        log_level: Logging level name (default: INFO)
        log_json: Emit JSON log lines (default: True)
        email_allow_smtputf8: Accept internationalized local parts (default: True)
        max_name_chars: Maximum length of a user name (default: 200)
        max_email_chars: Maximum length of an email address (default: 320)
        seed_file: Optional JSON export loaded into the in-memory directory
    """

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    # Field constraints
    email_allow_smtputf8: bool = True
    max_name_chars: int = 200
    max_email_chars: int = 320

    # Local tooling
    seed_file: str = ""

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return level

    @field_validator("max_name_chars", "max_email_chars")
    @classmethod
    def limits_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("length limits must be greater than 0")
        return v

    def validation_policy(self) -> ValidationPolicy:
        """Limits handed to the domain rules."""
        return ValidationPolicy(
            max_name_chars=self.max_name_chars,
            max_email_chars=self.max_email_chars,
            allow_smtputf8=self.email_allow_smtputf8,
        )

    model_config = SettingsConfigDict(
        env_prefix="ORGDIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
