"""Configuration management for libraryconsole.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

MIN_LOAN_DAYS = 1
MAX_LOAN_DAYS = 365


@dataclass
class Config:
    """Application configuration."""

    # Backend
    api_url: str
    api_timeout: float  # seconds

    # Auth session token file
    session_path: Path

    # Lending
    default_loan_days: int

    # Concurrent fetches
    fetch_workers: int

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        session_path_str = os.environ.get(
            "LIBRARY_SESSION_PATH",
            str(Path.home() / ".libraryconsole" / "session.json"),
        )

        return cls(
            api_url=os.environ.get("LIBRARY_API_URL", "http://localhost:5000/api").rstrip("/"),
            api_timeout=float(os.environ.get("LIBRARY_API_TIMEOUT", "10")),
            session_path=Path(session_path_str).expanduser(),
            default_loan_days=int(os.environ.get("LIBRARY_DEFAULT_LOAN_DAYS", "14")),
            fetch_workers=int(os.environ.get("LIBRARY_FETCH_WORKERS", "4")),
            log_level=os.environ.get("LIBRARY_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        parsed = urlparse(self.api_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(f"Invalid API URL: {self.api_url}")

        if not MIN_LOAN_DAYS <= self.default_loan_days <= MAX_LOAN_DAYS:
            errors.append(
                f"Default loan days must be between {MIN_LOAN_DAYS} and {MAX_LOAN_DAYS}"
            )

        if self.fetch_workers < 1:
            errors.append("Fetch workers must be at least 1")

        if self.api_timeout <= 0:
            errors.append("API timeout must be positive")

        return errors


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
