# config/appconfig.py
"""
Application Configuration
Database, security, note signature and logging settings for the consult backend
"""
from pathlib import Path
from typing import Any, Dict

from pydantic_settings import BaseSettings

# Calculate the project root
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Core settings for the Hematoinfectology consult service"""

    APP_NAME: str = "Hematoinfecto Consult"

    # ============================================================================
    # DATABASE
    # ============================================================================
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'hematoinfecto.db'}"
    SQL_ECHO: bool = False

    # ============================================================================
    # SECURITY (JWT)
    # ============================================================================
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRY: int = 60 * 12     # minutes (one shift)
    REFRESH_TOKEN_EXPIRY: int = 7          # days

    # ============================================================================
    # CLINICAL NOTE
    # ============================================================================
    NOTE_SIGNATURE: str = (
        "Avaliado por Ricardo Razera - R3 Infectologia\n"
        "Instituto de Infectologia Emílio Ribas"
    )
    # Ward calendar used for "due today" and note dates
    TIMEZONE: str = "America/Sao_Paulo"

    # ============================================================================
    # LOGGING
    # ============================================================================
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def LOGGING_CONFIG(self) -> Dict[str, Any]:
        """dictConfig payload applied once at startup."""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "app": {"level": self.LOG_LEVEL, "handlers": ["console"], "propagate": False},
                "config": {"level": self.LOG_LEVEL, "handlers": ["console"], "propagate": False},
                "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }


settings = Settings()
