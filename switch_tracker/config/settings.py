from pathlib import Path
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings with validation"""

    # Session Configuration
    TICK_INTERVAL_MS: int = Field(default=100, ge=10, le=1000)
    REFRESH_INTERVAL_SECONDS: float = Field(default=0.25, gt=0, le=5.0)
    NOTIFIER: Literal["bell", "none"] = "bell"

    # Path Configuration
    BASE_DIR: Path = Path(__file__).parent.parent.parent
    LOG_DIR: Path = BASE_DIR / "logs"

    # Web Configuration
    WEB_HOST: str = "localhost"
    WEB_PORT: int = Field(default=8000, ge=1, le=65535)
    WEB_POLL_INTERVAL_MS: int = Field(default=500, ge=50, le=10000)

    # Development Configuration
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def validate_paths(self) -> None:
        """Ensure all required paths exist"""
        self.LOG_DIR.mkdir(parents=True, exist_ok=True)

settings = Settings()
