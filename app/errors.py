# app/errors.py
class TypingError(Exception):
    """Base class for errors raised by the typing engine."""


class ConfigError(TypingError):
    pass


class StorageError(TypingError):
    """Raised when the score store cannot be read or written."""
