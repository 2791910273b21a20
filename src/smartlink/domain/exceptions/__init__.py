"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so handlers can log it without parsing
    # str(exception). Don't raise this directly - use a specific subclass so callers can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when input or entity validation fails.

    Note: the listen flow never raises this for visitor input. A bad forced
    provider, link id or candidate URL is normalized or dropped instead.
    """

    pass


class ConfigurationError(DomainException):
    """Raised when application configuration is invalid.

    HTTP Status: 500
    """

    pass


class CandidateSourceError(DomainException):
    """Raised when a candidate source cannot read discography entries.

    The resolver treats this like a missing entry: if the profile columns still
    yield candidates the visitor is redirected, otherwise the request is a 404.
    """

    def __init__(self, source_name: str, message: str) -> None:
        super().__init__(f"{source_name}: {message}")
        self.source_name = source_name


__all__ = [
    "CandidateSourceError",
    "ConfigurationError",
    "DomainException",
    "EntityNotFoundException",
    "ValidationException",
]
