from pydantic_settings import BaseSettings
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv
import logging
import os

from app.models.enums import PracticeDirection

_logger = logging.getLogger(__name__)

# Look for .env in api directory (parent of app directory)
api_dir = Path(__file__).parent.parent.parent
env_path = api_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=False)
    _logger.info(f"Loaded .env file from: {env_path}")
else:
    # Fallback to current directory
    current_env = Path(".env")
    if current_env.exists():
        load_dotenv(current_env, override=False)
        _logger.info(f"Loaded .env file from: {current_env.absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - hosting platforms usually provide DATABASE_URL (uppercase)
    database_url: str = ""

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # "development" enables error details in 500 responses
    environment: str = "production"

    # Password reset tokens lifetime
    password_reset_token_hours: int = 24

    # Practice defaults (shared by every user of this process)
    practice_default_count: int = 10
    practice_random_order: bool = True
    practice_default_direction: Optional[PracticeDirection] = PracticeDirection.FRONT_TO_BACK

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Ensure we read DATABASE_URL from environment
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


@dataclass(frozen=True)
class PracticeSettings:
    """
    Default practice configuration handed to the practice session service.

    Built once from Settings and passed explicitly, so nothing in the practice
    flow reads process-wide mutable state.
    """
    default_count: int = 10
    default_random_order: bool = True
    default_direction: Optional[PracticeDirection] = PracticeDirection.FRONT_TO_BACK

    def __post_init__(self):
        if self.default_count < 1:
            object.__setattr__(self, "default_count", 1)

    @classmethod
    def from_settings(cls, app_settings: "Settings") -> "PracticeSettings":
        return cls(
            default_count=app_settings.practice_default_count,
            default_random_order=app_settings.practice_random_order,
            default_direction=app_settings.practice_default_direction,
        )

    def get_default_count(self) -> int:
        return self.default_count

    def is_default_random_order(self) -> bool:
        return self.default_random_order

    def get_default_direction(self) -> Optional[PracticeDirection]:
        return self.default_direction


# Create settings instance
settings = Settings()

# Validate required DATABASE_URL
if not settings.database_url:
    raise ValueError("DATABASE_URL environment variable is required")
