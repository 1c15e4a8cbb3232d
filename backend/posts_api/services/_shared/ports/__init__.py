"""
posts_api.services._shared.ports
================================

*Ports* (hexagonal interfaces) the post service depends on.

Modules
-------
- :mod:`post_store`:
    Defines :class:`~.PostStore`, the persistence contract for posts.

- :mod:`identity_resolver`:
    Defines :class:`~.IdentityResolver`, mapping a bearer token to the caller identity,
    plus :class:`~.StubIdentityResolver` for tests.

Concrete adapters (SQLAlchemy, HTTP) live under ``posts_api.infra``.
"""

from __future__ import annotations

from .identity_resolver import IdentityResolver, StubIdentityResolver
from .post_store import PostStore

__all__ = ["IdentityResolver", "PostStore", "StubIdentityResolver"]
