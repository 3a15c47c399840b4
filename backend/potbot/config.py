"""
Configuration
=============

Application configuration loaded from environment variables.

A `.env` file next to where the server is started is read first
(python-dotenv), so local development only needs that file.

Author: Potbot Team
"""

import logging
import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "potbot-dev-secret-change-me"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}, using {default}")
        return default


@dataclass
class Config:
    """
    Application configuration.

    Environment Variables:
        DATABASE_URL: SQLAlchemy database URL (default: local SQLite file)
        POTBOT_SECRET_KEY: Key used to sign user session cookies
        POTBOT_COOKIE_SECURE: Set the Secure flag on the session cookie
        POTBOT_SESSION_MAX_AGE: Session lifetime in seconds (default: 86400)
        POTBOT_ADMIN_TOKEN: Token required to provision new plants
        POTBOT_MAX_COMMANDS_PER_PLANT: Mailbox cap, 0 means unbounded
        FRONTEND_URL: URL of the frontend for CORS
        POTBOT_FRONTEND_DIR: Directory of the built frontend to serve at /
        LOG_LEVEL: Root log level (default: INFO)
        POTBOT_EMAIL_ADDRESS / POTBOT_EMAIL_PASSWORD: SMTP login
        POTBOT_MAIL_SERVER / POTBOT_MAIL_PORT: SMTP server

    Defaults are set for local development.
    """

    database_url: str = "sqlite:///./potbot.db"
    secret_key: str = DEV_SECRET_KEY
    cookie_secure: bool = False
    session_max_age: int = 86400
    admin_token: str = ""
    max_commands_per_plant: int = 0
    bcrypt_rounds: int = 12
    frontend_url: str = "http://localhost:3000"
    frontend_dir: str = "../frontend/build"
    log_level: str = "INFO"

    email_address: str = ""
    email_password: str = ""
    mail_server: str = ""
    mail_port: int = 587

    cors_origins: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.cors_origins:
            self.cors_origins = [
                self.frontend_url,
                "http://localhost:3000",    # Create React App
                "http://127.0.0.1:3000",
            ]

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from the current environment."""
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./potbot.db"),
            secret_key=os.getenv("POTBOT_SECRET_KEY", DEV_SECRET_KEY),
            cookie_secure=_env_bool("POTBOT_COOKIE_SECURE"),
            session_max_age=_env_int("POTBOT_SESSION_MAX_AGE", 86400),
            admin_token=os.getenv("POTBOT_ADMIN_TOKEN", ""),
            max_commands_per_plant=_env_int("POTBOT_MAX_COMMANDS_PER_PLANT", 0),
            bcrypt_rounds=_env_int("POTBOT_BCRYPT_ROUNDS", 12),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
            frontend_dir=os.getenv("POTBOT_FRONTEND_DIR", "../frontend/build"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            email_address=os.getenv("POTBOT_EMAIL_ADDRESS", ""),
            email_password=os.getenv("POTBOT_EMAIL_PASSWORD", ""),
            mail_server=os.getenv("POTBOT_MAIL_SERVER", ""),
            mail_port=_env_int("POTBOT_MAIL_PORT", 587),
        )


def configure_logging(level: str = "INFO"):
    """Send log records to stderr with a timestamped format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
