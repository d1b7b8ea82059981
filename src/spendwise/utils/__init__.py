"""Utility modules."""
from .logger import get_logger, configure_logging, set_user_context
from .exceptions import (
    SpendwiseError,
    ConfigError,
    AuthenticationError,
    DataSourceError,
    CompletionError,
    ReplyFormatError,
    RetryableError,
    RetryableCompletionError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_user_context",
    "SpendwiseError",
    "ConfigError",
    "AuthenticationError",
    "DataSourceError",
    "CompletionError",
    "ReplyFormatError",
    "RetryableError",
    "RetryableCompletionError"
]
