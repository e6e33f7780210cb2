"""Custom exceptions for safelink-unwrap."""


class UnwrapError(Exception):
    """Base exception class for safelink-unwrap."""

    def __init__(self, message, original_error=None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {str(self.original_error)})"
        return base_msg


class ClipboardError(UnwrapError):
    """Base class for clipboard-related errors."""
    pass


class ClipboardEmptyError(ClipboardError):
    """The clipboard currently holds no text. Expected, not a failure."""
    pass


class ClipboardAccessError(ClipboardError):
    """Reading from or writing to the clipboard failed."""
    pass


class ConfigurationError(UnwrapError):
    """Error in application configuration."""
    pass
