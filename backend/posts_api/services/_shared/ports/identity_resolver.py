from __future__ import annotations

from typing import Protocol

from posts_api.services._shared.errors import InvalidTokenError
from posts_api.services.identity.dto import ResolvedIdentity


class IdentityResolver(Protocol):
    """Port resolving a bearer token into the caller's identity.

    Failures raise a subclass of :class:`~posts_api.services._shared.errors.AuthError`.
    """

    def resolve(self, token: str) -> ResolvedIdentity: ...


class StubIdentityResolver(IdentityResolver):
    """Deterministic resolver used in tests and local development.

    Tokens are looked up in a fixed mapping; unknown tokens are rejected the
    same way the Users API rejects them.
    """

    def __init__(self, identities: dict[str, ResolvedIdentity] | None = None) -> None:
        self._identities: dict[str, ResolvedIdentity] = dict(identities or {})
        self.calls: list[str] = []

    def register(self, token: str, identity: ResolvedIdentity) -> None:
        self._identities[token] = identity

    def resolve(self, token: str) -> ResolvedIdentity:
        self.calls.append(token)
        identity = self._identities.get(token)
        if identity is None:
            raise InvalidTokenError()
        return identity
