"""Configuration and environment handling for contactdb."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class SendGridConfig:
    """SendGrid API configuration."""

    def __init__(self):
        self.api_key: str = os.getenv("SENDGRID_API_KEY", "")
        self.base_url: str = os.getenv("SENDGRID_BASE_URL", "https://api.sendgrid.com")
        self.timeout_s: float = float(os.getenv("SENDGRID_TIMEOUT_S", "30"))
        self.max_retries: int = int(os.getenv("SENDGRID_MAX_RETRIES", "3"))


class Config:
    """Central configuration object."""

    def __init__(self, env_path: Optional[Path] = None):
        # Load .env file if it exists; real environment variables win
        self.project_root = Path(__file__).parent.parent.parent
        env_path = env_path or self.project_root / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        # Logging
        self.log_level: str = os.getenv("CONTACTDB_LOG_LEVEL", "INFO")

        self.sendgrid = SendGridConfig()


def configure_logging(level: Optional[str] = None) -> None:
    """Set the level of the package logger (handlers are the application's)."""
    logging.getLogger("contactdb").setLevel((level or config.log_level).upper())


# Global config instance
config = Config()
