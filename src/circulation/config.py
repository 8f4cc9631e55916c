"""Configuration management for circulation.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_LOAN_DAYS = 14
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Application configuration."""

    # Lending
    loan_days: int

    # Logging
    log_level: str

    # Reports
    recent_limit: int

    # CLI
    sample_data: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            loan_days=int(os.environ.get("CIRCULATION_LOAN_DAYS", str(DEFAULT_LOAN_DAYS))),
            log_level=os.environ.get("CIRCULATION_LOG_LEVEL", "WARNING").upper(),
            recent_limit=int(os.environ.get("CIRCULATION_RECENT_LIMIT", "10")),
            sample_data=_env_bool("CIRCULATION_SAMPLE_DATA", True),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.loan_days <= 0:
            errors.append(f"Loan period must be positive, got {self.loan_days}")
        if self.recent_limit <= 0:
            errors.append(f"Recent transaction limit must be positive, got {self.recent_limit}")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")

        return errors

    @property
    def numeric_log_level(self) -> int:
        """Log level as a logging module constant."""
        return getattr(logging, self.log_level, logging.WARNING)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
