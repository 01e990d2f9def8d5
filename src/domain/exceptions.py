"""
Domain exceptions - Semantic error types for the account service.

This module defines domain-specific exceptions. Everything except
ValidationRejected ends up in the error pipeline as a Failure.
"""

from .records import FieldError


class ServiceError(Exception):
    """Base class for account service errors."""

    pass


class NotFoundError(ServiceError):
    """No route or resource matches the request."""

    pass


class StoreError(ServiceError):
    """Base class for record store failures."""

    pass


class StoreReadError(StoreError):
    """The record store could not be read (I/O failure)."""

    pass


class StoreParseError(StoreError):
    """The record store was read but its content is malformed."""

    pass


class ValidationRejected(Exception):
    """
    Request rejected by a validator.

    Carries the ordered field errors. Handled locally with a 422
    response and never routed through the error pipeline.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


class MalformedRequestError(ServiceError):
    """The request body could not be decoded."""

    pass
