"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are the stable contract between repositories, ownership policies
and callers of the services; a request handler maps them to responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from services and ownership policies.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class UnauthenticatedError(ServiceError):
    """Raised when an operation is invoked without an authenticated subject."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Exercise").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class NotFoundOrUnauthorizedError(NotFoundError):
    """
    Raised when an owned entity is missing *or* belongs to another subject.

    Both cases share one signal so callers cannot probe for foreign ids.
    """

    def __str__(self) -> str:
        return f"{self.entity} not found or access denied: {self.key}"


@dataclass(slots=True)
class ValidationFailedError(ServiceError):
    """
    Raised when a payload fails boundary validation.

    :param messages: Field → error messages mapping (marshmallow layout).
    :type messages: dict[str, Any]
    """

    messages: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Validation failed: {self.messages}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Exercise").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class TransactionFailedError(ServiceError):
    """
    Raised when an atomic multi-step operation fails at the storage layer.

    The unit of work has already rolled back when this is raised.

    :param operation: Name of the failed operation (e.g., "duplicate_workout").
    :type operation: str
    """

    operation: str

    def __str__(self) -> str:
        return f"Transaction failed: {self.operation}"
