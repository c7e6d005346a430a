"""
Custom exceptions for the API builder.
"""
from typing import Any, Optional


class ApiBuilderError(Exception):
    """Base exception for API builder errors."""

    pass


class ConfigurationError(ApiBuilderError):
    """Raised when a route or gateway response is configured incorrectly.

    Configuration errors are always raised at registration time, never while
    a request is being answered.
    """

    def __init__(self, message: str = "Invalid configuration", original_exception: Optional[BaseException] = None):
        self.message = message
        self.original_exception = original_exception
        super().__init__(self.message)


class SerializationError(ApiBuilderError):
    """Raised when a value cannot be represented in the resolved content type."""

    def __init__(self, message: str = "Response cannot be serialized", value: Any = None):
        self.message = message
        self.value = value
        super().__init__(self.message)


class RouteNotFoundError(ApiBuilderError):
    """Raised when no route matches the request."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"No handler for {method} {path}")
