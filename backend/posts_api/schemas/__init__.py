"""Convenience exports for application schemas."""

from __future__ import annotations

from .common import PaginationQuerySchema
from .identity import WhoAmISchema
from .post import AuthorSchema, PostCreateSchema, PostPageSchema, PostSchema, PostUpdateSchema

__all__ = [
    "AuthorSchema",
    "PaginationQuerySchema",
    "PostCreateSchema",
    "PostPageSchema",
    "PostSchema",
    "PostUpdateSchema",
    "WhoAmISchema",
]
