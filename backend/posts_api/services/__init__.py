"""Service layer public API.

Callers can import from :mod:`posts_api.services` without knowing the
internal structure.

Re-exports
----------
- Base primitives (from ``posts_api.services._shared.base``)
    * :class:`BaseService`
- Post service (from ``posts_api.services.posts``)
    * :class:`PostService`
    * DTOs: :class:`PostCreateIn`, :class:`PostUpdateIn`, :class:`PostOut`,
      :class:`AuthorOut`, :class:`PostPageOut`
- Identity (from ``posts_api.services.identity``)
    * :class:`ResolvedIdentity`
"""

from __future__ import annotations

from posts_api.services._shared.base import BaseService
from posts_api.services.identity import ResolvedIdentity
from posts_api.services.posts import (
    AuthorOut,
    PostCreateIn,
    PostOut,
    PostPageOut,
    PostService,
    PostUpdateIn,
)

__all__ = [
    "AuthorOut",
    "BaseService",
    "PostCreateIn",
    "PostOut",
    "PostPageOut",
    "PostService",
    "PostUpdateIn",
    "ResolvedIdentity",
]
