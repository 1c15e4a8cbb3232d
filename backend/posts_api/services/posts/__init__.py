"""Post use cases: service, DTOs and response assembly."""

from __future__ import annotations

from .assembler import attach_author, attach_author_to_page, to_post_out
from .dto import AuthorOut, PostCreateIn, PostOut, PostPageOut, PostUpdateIn
from .service import PostService

__all__ = [
    "AuthorOut",
    "PostCreateIn",
    "PostOut",
    "PostPageOut",
    "PostService",
    "PostUpdateIn",
    "attach_author",
    "attach_author_to_page",
    "to_post_out",
]
