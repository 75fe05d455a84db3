"""Custom exceptions for the ldjson_stream library."""

from typing import Optional


class LDJSONStreamError(Exception):
    """Base exception for all ldjson_stream errors."""

    pass


class ConfigurationError(LDJSONStreamError):
    """Raised when invalid configuration is provided."""

    pass


class LimitExceededError(LDJSONStreamError):
    """Raised when a configured resource limit is breached. Always fatal."""

    def __init__(self, message: str, limit: int, received: int):
        """
        Initialize LimitExceededError.

        Args:
            message: Error message
            limit: The configured limit that was breached
            received: The number of bytes that breached it
        """
        self.limit = limit
        self.received = received
        super().__init__(message)


class ByteLimitExceededError(LimitExceededError):
    """Raised when more than maxBytes have been received."""

    def __init__(self, limit: int, received: int):
        super().__init__("more than maxBytes received", limit, received)


class DocLengthExceededError(LimitExceededError):
    """Raised when a single document is longer than maxDocLength."""

    def __init__(self, limit: int, received: int):
        super().__init__("document exceeds configured maximum length", limit, received)


class DecodeError(LDJSONStreamError):
    """Raised when a completed line is not valid JSON. Never fatal."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize DecodeError.

        Args:
            message: Message of the underlying JSON decoder
            line_number: Line number of the offending line (if known)
            original_error: The original exception that caused this error
        """
        self.line_number = line_number
        self.original_error = original_error
        super().__init__(message)


class DecoderClosedError(LDJSONStreamError):
    """Raised when input is fed to a decoder that has already terminated."""

    pass


class FileHandlingError(LDJSONStreamError):
    """Raised when file operations fail."""

    pass
