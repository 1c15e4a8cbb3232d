"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from posts_api.core.errors import BadRequest, Unauthorized
from posts_api.core.extensions import IDENTITY_RESOLVER_KEY, db
from posts_api.infra.sqlalchemy.post_store import SQLAlchemyPostStore
from posts_api.schemas.common import PaginationQuerySchema
from posts_api.services._shared.errors import AuthError
from posts_api.services._shared.ports import IdentityResolver
from posts_api.services.identity.dto import ResolvedIdentity
from posts_api.services.posts.service import PostService

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


@dataclass(slots=True)
class Pagination:
    """Container holding pagination arguments parsed from the request."""

    page: int
    page_size: int


def parse_pagination() -> Pagination:
    """Parse ``page`` / ``page_size`` from ``request.args``; never fails."""

    schema = PaginationQuerySchema(
        default_page_size=current_app.config.get("DEFAULT_PAGE_SIZE", 10),
        max_page_size=current_app.config.get("MAX_PAGE_SIZE", 100),
    )
    data = schema.load(request.args)
    return Pagination(page=data["page"], page_size=data["page_size"])


def load_json_body() -> Any:
    """Return the decoded JSON body or raise ``INVALID_JSON``."""

    payload = request.get_json(force=True, silent=True)
    if payload is None:
        raise BadRequest(
            "Invalid request body",
            code="INVALID_JSON",
            details="Request body must be a valid JSON document",
        )
    return payload


# --------------------------------------------------------------------------- #
# Collaborators
# --------------------------------------------------------------------------- #


def get_identity_resolver() -> IdentityResolver:
    """Return the identity resolver registered on the current application."""

    return current_app.extensions[IDENTITY_RESOLVER_KEY]


def get_post_service() -> PostService:
    """Build a :class:`PostService` bound to the request-scoped session."""

    return PostService(store=SQLAlchemyPostStore(db.session), identity=get_identity_resolver())


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def extract_bearer_token(header: str | None) -> str:
    """
    Extract the token from an ``Authorization`` header value.

    :raises Unauthorized: ``MISSING_TOKEN``, ``INVALID_TOKEN_FORMAT`` or
        ``EMPTY_TOKEN`` depending on what is wrong with the header.
    """
    if not header:
        raise Unauthorized(
            "Authorization header required",
            code="MISSING_TOKEN",
            details="Authorization header with Bearer token is required",
        )
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise Unauthorized(
            "Invalid authorization header format",
            code="INVALID_TOKEN_FORMAT",
            details="Authorization header must be in format: Bearer <token>",
        )
    token = parts[1]
    if not token:
        raise Unauthorized("Token is required", code="EMPTY_TOKEN", details="Bearer token cannot be empty")
    return token


def current_caller() -> ResolvedIdentity | None:
    """Identity resolved for this request, ``None`` when anonymous."""

    return g.get("caller")


def require_auth(func: F) -> F:
    """Resolve the bearer token and store ``g.caller`` / ``g.token``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer_token(request.headers.get("Authorization"))
        try:
            identity = get_identity_resolver().resolve(token)
        except AuthError as exc:
            raise Unauthorized("Invalid token", code="INVALID_TOKEN", details=str(exc)) from exc
        g.caller = identity
        g.token = token
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Resolve a bearer token when one is sent; fall back to anonymous."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.caller = None
        g.token = None
        header = request.headers.get("Authorization")
        if header:
            try:
                token = extract_bearer_token(header)
                g.caller = get_identity_resolver().resolve(token)
                g.token = token
            except (Unauthorized, AuthError) as exc:
                log.warning("auth.optional_token_rejected: %s", exc)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success_response(message: str, data: Any = None, *, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope; ``data`` is omitted when ``None``."""

    envelope: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        envelope["data"] = data
    return json_response(envelope, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
