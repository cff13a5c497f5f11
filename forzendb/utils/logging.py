"""Logging utility for forzendb"""

import json
import logging
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, MutableMapping, Optional

from rich.logging import RichHandler

from .config import LoggingConfig
from .errors import ConfigurationError

ROOT_LOGGER_NAME = "forzendb"


## Custom JSON Formatter


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for log records."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        return json.dumps(log_entry, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter to add contextual information."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"].setdefault("context", {}).update(self.extra)
        return msg, kwargs


## Main Log Manager


class LogManager:
    """Configures the forzendb logger and provides logger instances."""

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()
        self.log_level = getattr(logging, self.config.log_level)
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.root_logger.setLevel(self.log_level)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup console and optional file handlers."""
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

        console_handler = RichHandler(
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(getattr(logging, self.config.console_level))
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        self.root_logger.addHandler(console_handler)

        if self.config.log_dir:
            log_dir = Path(self.config.log_dir)
            try:
                log_dir.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    log_dir / "forzendb.log",
                    maxBytes=self.config.max_file_size,
                    backupCount=self.config.backup_count,
                    encoding="utf-8",
                )
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to create log file handler: {e}",
                    details={"log_dir": str(log_dir)},
                ) from e

            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(JSONFormatter())
            self.root_logger.addHandler(file_handler)

    def get_logger(
        self, name: Optional[str] = None, **context
    ) -> logging.Logger | ContextAdapter:
        """Get a logger under the forzendb namespace, optionally with context."""
        if not name or name == ROOT_LOGGER_NAME:
            logger = self.root_logger
        elif name.startswith(ROOT_LOGGER_NAME + "."):
            logger = logging.getLogger(name)
        else:
            logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

        if context:
            return ContextAdapter(logger, context)

        return logger

    def set_level(self, level: str) -> None:
        """Set logging level at runtime"""
        try:
            self.log_level = getattr(logging, level.upper())
        except AttributeError as e:
            raise ValueError(f"Invalid logging level: {level}") from e

        self.root_logger.setLevel(self.log_level)


## Decorators for Logging


def async_log_call(func):
    """Async decorator to log coroutine entry, exit and duration."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        func_name = f"{func.__module__}.{func.__qualname__}"
        logger.debug(f"-> Entering {func_name} (async)")
        start_time = datetime.now()

        try:
            result = await func(*args, **kwargs)
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Exiting {func_name} (Duration: {duration:.3f}s)")
            return result

        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Error in {func_name} after {duration:.3f}s: {e}")
            raise

    return wrapper


## Module-level LogManager Instance and Helper Functions

_log_manager: Optional[LogManager] = None


def init_logging(config: Optional[LoggingConfig] = None) -> LogManager:
    """Initialize logging, replacing any earlier setup when a config is given."""
    global _log_manager

    if _log_manager is None or config is not None:
        _log_manager = LogManager(config)

    return _log_manager


def get_logger(
    name: Optional[str] = None, **context
) -> logging.Logger | ContextAdapter:
    """Get a logger instance with optional context."""
    return init_logging().get_logger(name, **context)
