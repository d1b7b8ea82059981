"""Custom exception classes for Spendwise."""


class SpendwiseError(Exception):
    """Base exception for Spendwise."""
    pass


class ConfigError(SpendwiseError):
    """Configuration-related errors."""
    pass


class AuthenticationError(SpendwiseError):
    """The caller could not be identified."""
    pass


class DataSourceError(SpendwiseError):
    """Record store errors."""
    pass


class CompletionError(SpendwiseError):
    """Completion service errors."""
    pass


class ReplyFormatError(CompletionError):
    """Completion reply could not be parsed into the expected shape."""
    pass


# Retryable errors
class RetryableError(SpendwiseError):
    """Base class for errors a caller may safely retry."""
    pass


class RetryableCompletionError(RetryableError, CompletionError):
    """Transport or quota failures from the completion service."""
    pass
