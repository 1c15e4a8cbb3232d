"""
DTOs for PostService.

Data Transfer Objects isolate the service layer from ORM models, giving the
API layer stable input/output contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    Input DTO for creating a post.

    :param title: Headline, 1-255 characters.
    :type title: str
    :param content: Body, 1-10000 characters.
    :type content: str
    """

    title: str
    content: str


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """
    Input DTO for a partial post update.

    Fields left as ``None`` are not touched.

    :param title: Optional new headline.
    :type title: str | None
    :param content: Optional new body.
    :type content: str | None
    """

    title: str | None = None
    content: str | None = None

    @property
    def has_changes(self) -> bool:
        return self.title is not None or self.content is not None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorOut:
    """Author block embedded in a post when the caller wrote it."""

    id: int
    username: str
    email: str


@dataclass(frozen=True, slots=True)
class PostOut:
    """
    Outward representation of a post.

    ``author_name`` and ``author_email`` hold the creation-time snapshot; they
    feed :func:`~posts_api.services.posts.assembler.attach_author` and are not
    serialized on their own.
    """

    id: int
    title: str
    content: str
    author_id: int
    created_at: datetime
    updated_at: datetime
    author: AuthorOut | None = None
    author_name: str = ""
    author_email: str = ""


@dataclass(frozen=True, slots=True)
class PostPageOut:
    """
    One page of posts plus pagination metadata.

    ``total_pages == ceil(total_count / page_size)``.
    """

    posts: list[PostOut] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10
    total_pages: int = 0
