"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP or
SQLAlchemy. They form a closed taxonomy: every error carries an
:class:`ErrorKind` member, and the API layer maps kinds to HTTP responses in
``posts_api/core/errors.py`` by inspecting ``kind``, never the message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Closed enumeration of service failure kinds."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    IDENTITY_MISMATCH = "identity_mismatch"
    VALIDATION = "validation"
    INVALID_TOKEN = "invalid_token"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    PERSISTENCE = "persistence"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be raised from stores, adapters or the services themselves.
    - Subclasses set ``kind``; the base class is never raised directly.
    """

    kind: ErrorKind


# --------------------------------------------------------------------------- #
# Post errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the store.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    kind = ErrorKind.NOT_FOUND

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class UnauthorizedError(ServiceError):
    """Raised when the caller does not own the post it tries to mutate."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Only the author can modify this post") -> None:
        super().__init__(message)


@dataclass(slots=True, eq=False)
class IdentityMismatchError(ServiceError):
    """
    Raised when the token's resolved identity differs from the asserted caller.

    :param asserted_id: Caller id attached by the authentication step.
    :type asserted_id: int
    :param resolved_id: Id the identity authority resolved for the token.
    :type resolved_id: int
    """

    asserted_id: int
    resolved_id: int

    kind = ErrorKind.IDENTITY_MISMATCH

    def __str__(self) -> str:
        return "Token user ID does not match provided author ID"


@dataclass(slots=True, eq=False)
class PostValidationError(ServiceError):
    """
    Raised when a post field violates its constraints.

    :param field: Offending field name.
    :type field: str
    :param message: Human-readable constraint description.
    :type message: str
    """

    field: str
    message: str

    kind = ErrorKind.VALIDATION

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class PersistenceError(ServiceError):
    """Opaque store failure (connection loss, constraint, driver error)."""

    kind = ErrorKind.PERSISTENCE

    def __init__(self, message: str = "Store operation failed") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Identity resolution errors
# --------------------------------------------------------------------------- #


class AuthError(ServiceError):
    """Base class for failures while resolving a bearer token."""


class InvalidTokenError(AuthError):
    """The identity authority rejected the token (invalid or expired)."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


@dataclass(slots=True, eq=False)
class UpstreamError(AuthError):
    """
    The identity authority answered with an unexpected status.

    :param status: HTTP status returned by the authority.
    :type status: int
    :param body: Raw response body, kept for diagnostics.
    :type body: str
    """

    status: int
    body: str

    kind = ErrorKind.UPSTREAM_ERROR

    def __str__(self) -> str:
        return f"Users API returned status {self.status}"


class UpstreamUnavailableError(AuthError):
    """The identity authority could not be reached (connection or timeout)."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE

    def __init__(self, message: str = "Users API is unavailable") -> None:
        super().__init__(message)


class MalformedResponseError(AuthError):
    """The identity authority's body could not be parsed into an identity."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, message: str = "Malformed Users API response") -> None:
        super().__init__(message)


__all__ = [
    "AuthError",
    "ErrorKind",
    "IdentityMismatchError",
    "InvalidTokenError",
    "MalformedResponseError",
    "NotFoundError",
    "PersistenceError",
    "PostValidationError",
    "ServiceError",
    "UnauthorizedError",
    "UpstreamError",
    "UpstreamUnavailableError",
]
