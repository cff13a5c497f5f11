"""Configuration models for the database layer and logging."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import InvalidConfigError, MissingConfigError
from .paths import DATABASE_PATH

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DatabaseConfig(BaseModel):
    """Pydantic model for database settings."""

    database_path: str = str(DATABASE_PATH)
    timeout: float = Field(default=5.0, gt=0)  # seconds, sqlite busy timeout
    foreign_keys: bool = False


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"
    console_level: str = "WARNING"
    log_dir: Optional[str] = None
    max_file_size: int = 5_242_880  # 5 MB
    backup_count: int = 5

    @field_validator("log_level", "console_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return value


class AppConfig(BaseModel):
    """Pydantic model for overall configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Path) -> AppConfig:
    """Load configuration from a JSON file.

    Raises:
        MissingConfigError: If the file does not exist
        InvalidConfigError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise MissingConfigError(
            f"Configuration file not found: {path}", details={"path": str(path)}
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppConfig.model_validate(data)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(
            f"Configuration file is not valid JSON: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e
    except ValidationError as e:
        raise InvalidConfigError(
            f"Configuration file failed validation: {path}",
            details={"path": str(path), "errors": e.errors()},
        ) from e


# Singleton instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the configuration singleton."""
    global _config
    if _config is None:
        _config = AppConfig()

    return _config


def set_config(config: AppConfig) -> None:
    """Replace the configuration singleton."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global _config
    _config = None
