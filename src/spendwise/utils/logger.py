"""Logging infrastructure with user context."""
import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

# Scoped to the current task or thread
_current_user: ContextVar[Optional[str]] = ContextVar("spendwise_user", default=None)


class UserContextFilter(logging.Filter):
    """Add user context to log records."""

    def filter(self, record):
        """Add user_id to record."""
        record.user_id = _current_user.get() or "system"
        return True


class SpendwiseLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[str] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 30
    ):
        self.user_filter = UserContextFilter()

        self.logger = logging.getLogger("spendwise")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [user:%(user_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(self.user_filter)
        self.logger.addHandler(console_handler)

        # File logging only when a directory is configured
        log_dir = log_dir or os.getenv("SPENDWISE_LOG_DIR")
        self.log_file: Optional[Path] = None
        if log_dir:
            log_path = Path(log_dir).expanduser()
            log_path.mkdir(parents=True, exist_ok=True)
            self.log_file = log_path / "spendwise.log"

            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(self.user_filter)
            self.logger.addHandler(file_handler)

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[SpendwiseLogger] = None


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """(Re)build the global logger from explicit settings."""
    global _logger_instance
    _logger_instance = SpendwiseLogger(log_level, log_dir, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = SpendwiseLogger(log_level)
    return _logger_instance.get_logger()


def set_user_context(user_id: Optional[str]):
    """Set user context for logging in the current task."""
    _current_user.set(user_id)
