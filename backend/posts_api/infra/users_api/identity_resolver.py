"""HTTP adapter resolving bearer tokens through the Users API."""

from __future__ import annotations

import logging

import requests
from marshmallow import ValidationError

from posts_api.core.config import MAX_USERS_API_TIMEOUT
from posts_api.schemas.identity import WhoAmISchema
from posts_api.services._shared.errors import (
    InvalidTokenError,
    MalformedResponseError,
    UpstreamError,
    UpstreamUnavailableError,
)
from posts_api.services._shared.ports import IdentityResolver
from posts_api.services.identity.dto import ResolvedIdentity

log = logging.getLogger(__name__)

WHOAMI_PATH = "/auth/me"


class UsersApiIdentityResolver(IdentityResolver):
    """
    Resolve caller identity with ``GET <base_url>/auth/me``.

    One :class:`requests.Session` is shared by every call so connections are
    pooled; it carries no per-request state. Results are never cached and
    failed calls are not retried.

    :param base_url: Users API root, e.g. ``http://users-api:8081``.
    :type base_url: str
    :param timeout: Per-call timeout in seconds, capped at 30.
    :type timeout: float
    :param http: Optional pre-built session (tests, custom adapters).
    :type http: requests.Session | None
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = MAX_USERS_API_TIMEOUT,
        http: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = min(float(timeout), MAX_USERS_API_TIMEOUT)
        self._http = http or requests.Session()
        self._schema = WhoAmISchema()

    @property
    def whoami_url(self) -> str:
        return f"{self.base_url}{WHOAMI_PATH}"

    def resolve(self, token: str) -> ResolvedIdentity:
        """
        Return the identity owning ``token``.

        :param token: Bearer token taken from the ``Authorization`` header.
        :type token: str
        :returns: Identity reported by the Users API.
        :rtype: ResolvedIdentity
        :raises InvalidTokenError: Empty token or 401 from the Users API.
        :raises UpstreamError: Any other non-200 status.
        :raises UpstreamUnavailableError: Connection failure or timeout.
        :raises MalformedResponseError: Body is not the expected JSON shape.
        """
        if not token or not token.strip():
            raise InvalidTokenError("Token is required")

        try:
            response = self._http.get(
                self.whoami_url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamUnavailableError(f"Users API request failed: {exc}") from exc

        log.debug("users_api.auth_me", extra={"status": response.status_code})

        if response.status_code == requests.codes.unauthorized:
            raise InvalidTokenError("Invalid token - Users API returned 401")
        if response.status_code != requests.codes.ok:
            raise UpstreamError(status=response.status_code, body=response.text)

        try:
            data = self._schema.load(response.json())
        except (ValueError, ValidationError) as exc:
            raise MalformedResponseError(f"Failed to decode Users API response: {exc}") from exc

        return ResolvedIdentity(
            id=data["user_id"],
            name=data["name"],
            email=data["email"],
            role=data["role"],
        )
