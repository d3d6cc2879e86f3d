"""
Centralized exception classes for the eventlite library.

All eventlite-specific exceptions inherit from EventliteError for easy catching.
"""


class EventliteError(Exception):
    """Base exception for all eventlite errors."""


class ConfigurationError(EventliteError):
    """Raised when a listener's event type cannot be inferred from its callback."""


class TypeMismatchError(EventliteError):
    """Raised when an emitted value is not an instance of the expected event type."""


class InvalidArgumentError(EventliteError):
    """Raised when an explicitly supplied event type is not an `Event` subclass."""
