"""
Custom exceptions for the resource framework.
"""
from typing import Optional


class RestResourceError(Exception):
    """Base exception for resource framework errors."""

    pass


class DomainError(RestResourceError):
    """Raised when a controller is dispatched without a valid configuration."""

    pass


class ResourceError(RestResourceError):
    """Raised by a backend when an operation fails.

    The status code is used when the failure is turned into a problem
    document; subclasses narrow the failure to one operation.
    """

    status_code = 500

    def __init__(self, message: str = "Operation failed", status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class CreationError(ResourceError):
    """Raised when an item cannot be created."""

    pass


class PatchError(ResourceError):
    """Raised when an item cannot be patched."""

    pass


class UpdateError(ResourceError):
    """Raised when an item or a collection cannot be replaced."""

    pass


class OperationNotImplementedError(ResourceError):
    """Raised when a backend has no hook for the requested operation."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not implemented by this resource")


class RouteNotFoundError(RestResourceError):
    """Raised when a route name or path cannot be resolved."""

    pass


class BodyParsingError(RestResourceError):
    """Raised when the request body cannot be parsed."""

    def __init__(self, message="Failed to parse request body", original_exception=None):
        self.message = message
        self.original_exception = original_exception
        super().__init__(self.message)
