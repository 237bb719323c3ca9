"""Exceptions raised by the dispatch engine."""


class LogException(Exception):
    """
    Logger configuration error.

    Raised when a registered logger cannot be instantiated, typically because
    its `logger` type is not in the type table. Instantiation is lazy, so this
    surfaces at the first dispatch that needs the logger.
    """

    def __init__(self, message: str, logger_type: str | None = None):
        super().__init__(message)
        self.logger_type = logger_type


class LogEntryError(ValueError):
    """A log entry could not be constructed (e.g. empty message)."""
