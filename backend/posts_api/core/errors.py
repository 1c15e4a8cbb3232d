"""Centralized JSON error handling for the API.

Every failure leaves the service as the same envelope::

    {"success": false, "message": ..., "error": {"code", "message", "details"?}}

Validation failures additionally carry ``data.validation_errors``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from posts_api.core.logger import ensure_request_id
from posts_api.services._shared.errors import (
    ErrorKind,
    NotFoundError,
    PostValidationError,
    ServiceError,
)

log = logging.getLogger(__name__)

# ErrorKind -> (HTTP status, envelope code, client message)
SERVICE_ERROR_MAP: dict[ErrorKind, tuple[int, str, str]] = {
    ErrorKind.NOT_FOUND: (HTTPStatus.NOT_FOUND, "NOT_FOUND", "Post not found"),
    ErrorKind.UNAUTHORIZED: (HTTPStatus.FORBIDDEN, "FORBIDDEN", "Access denied"),
    ErrorKind.IDENTITY_MISMATCH: (HTTPStatus.UNAUTHORIZED, "IDENTITY_MISMATCH", "Identity mismatch"),
    ErrorKind.VALIDATION: (HTTPStatus.BAD_REQUEST, "VALIDATION_ERROR", "Validation failed"),
    ErrorKind.INVALID_TOKEN: (HTTPStatus.UNAUTHORIZED, "INVALID_TOKEN", "Invalid token"),
    ErrorKind.UPSTREAM_ERROR: (HTTPStatus.UNAUTHORIZED, "UPSTREAM_ERROR", "Invalid token"),
    ErrorKind.UPSTREAM_UNAVAILABLE: (HTTPStatus.UNAUTHORIZED, "UPSTREAM_UNAVAILABLE", "Invalid token"),
    ErrorKind.MALFORMED_RESPONSE: (HTTPStatus.UNAUTHORIZED, "MALFORMED_RESPONSE", "Invalid token"),
    ErrorKind.PERSISTENCE: (HTTPStatus.INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"),
}


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        500: "INTERNAL_ERROR",
        503: "SERVICE_UNAVAILABLE",
    }
    return mapping.get(status_code, "ERROR")


def error_envelope(
    *,
    message: str,
    code: str,
    details: str | None = None,
    data: Any = None,
) -> dict[str, Any]:
    """
    Build the failure envelope.

    :param message: Human-readable summary, repeated in ``error.message``.
    :param code: Stable machine-consumable error code.
    :param details: Optional safe explanation for clients.
    :param data: Optional structured payload (validation errors).
    :returns: Envelope dictionary.
    :rtype: dict
    """
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    envelope: dict[str, Any] = {"success": False, "message": message, "error": error}
    if data is not None:
        envelope["data"] = data
    return envelope


def validation_envelope(errors: list[dict[str, str]]) -> dict[str, Any]:
    """Failure envelope for field-level validation problems."""
    envelope = error_envelope(message="Validation failed", code="VALIDATION_ERROR", data={"validation_errors": errors})
    envelope["error"]["message"] = "Request validation failed"
    return envelope


def flatten_messages(messages: Any, prefix: str = "") -> list[dict[str, str]]:
    """
    Flatten marshmallow's nested ``messages`` into ``[{field, message}]``.

    ``_schema`` level errors are reported under the ``body`` field.
    """
    if isinstance(messages, str):
        return [{"field": prefix or "body", "message": messages}]
    if isinstance(messages, list):
        out: list[dict[str, str]] = []
        for item in messages:
            out.extend(flatten_messages(item, prefix))
        return out
    if isinstance(messages, dict):
        out = []
        for key, value in messages.items():
            name = "body" if key == "_schema" else str(key)
            out.extend(flatten_messages(value, f"{prefix}.{name}" if prefix else name))
        return out
    return [{"field": prefix or "body", "message": str(messages)}]


def _json(envelope: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(envelope), int(status)


class APIError(Exception):
    """
    Represent a JSON-serializable API error raised by the HTTP layer itself.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"BAD_REQUEST"``.
    details : str | None, optional
        Optional longer explanation included under ``error.details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "BAD_REQUEST",
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details

    def to_envelope(self) -> dict[str, Any]:
        return error_envelope(message=self.message, code=self.code, details=self.details)


class BadRequest(APIError):
    """400 for malformed or empty requests."""

    def __init__(self, message: str, *, code: str = "BAD_REQUEST", details: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code=code, details=details)


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str, *, code: str = "UNAUTHORIZED", details: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code, details=details)


def service_error_response(err: ServiceError) -> tuple[dict[str, Any], int]:
    """
    Translate a :class:`ServiceError` into ``(envelope, status)`` by its kind.

    :param err: Error raised by the service layer or one of its adapters.
    :returns: Envelope and HTTP status.
    """
    status, code, message = SERVICE_ERROR_MAP[err.kind]
    if isinstance(err, PostValidationError):
        return validation_envelope([{"field": err.field, "message": err.message}]), status
    if isinstance(err, NotFoundError):
        entity = err.entity
        return (
            error_envelope(
                message=f"{entity} not found",
                code=code,
                details=f"The requested {entity} does not exist",
            ),
            status,
        )
    if err.kind is ErrorKind.PERSISTENCE:
        return error_envelope(message=message, code=code), status
    return error_envelope(message=message, code=code, details=str(err)), status


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings, 5xx as errors with ``exc_info``.
    - Internal details of unexpected failures never reach the client.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _json(err.to_envelope(), err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        envelope, status = service_error_response(err)
        if status >= 500:
            log.error(
                "ServiceError: kind=%s status=%s request_id=%s",
                err.kind.value,
                status,
                ensure_request_id(),
                exc_info=err,
            )
        else:
            log.warning(
                "ServiceError: kind=%s status=%s msg=%s request_id=%s",
                err.kind.value,
                status,
                err,
                ensure_request_id(),
            )
        return _json(envelope, status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        errors = flatten_messages(err.messages)
        log.warning("ValidationError: fields=%s request_id=%s", [e["field"] for e in errors], ensure_request_id())
        return _json(validation_envelope(errors), HTTPStatus.BAD_REQUEST)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _http_status_to_code(status)
        message = (err.description or code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s request_id=%s",
            code,
            status,
            message,
            ensure_request_id(),
        )
        response, status = _json(error_envelope(message=message, code=code), status)
        for header, value in err.get_headers():
            if header.lower() == "allow":
                response.headers["Allow"] = value
        return response, status

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error(
            "Unhandled exception: request_id=%s",
            ensure_request_id(),
            exc_info=True,
        )
        return _json(
            error_envelope(message="Internal server error", code="INTERNAL_ERROR"),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )


__all__ = [
    "APIError",
    "BadRequest",
    "SERVICE_ERROR_MAP",
    "Unauthorized",
    "error_envelope",
    "flatten_messages",
    "init_app",
    "service_error_response",
    "validation_envelope",
]
