"""Post model definition."""

from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from posts_api.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 10000


class Post(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A user-authored post.

    Fields
    ------
    title : str
        Non-empty headline, at most 255 characters.
    content : str
        Non-empty body, at most 10000 characters.
    author_id : int
        Identifier of the author in the Users API. Set at creation, never
        changed afterwards.
    author_name : str
        Author display name copied from the Users API at creation time.
    author_email : str
        Author email copied from the Users API at creation time.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Last mutation timestamp (from mixin).
    """

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    author_email: Mapped[str] = mapped_column(String(254), nullable=False, default="")

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="title_not_empty"),
        CheckConstraint("length(content) > 0", name="content_not_empty"),
        Index("ix_posts_author_id", "author_id"),
    )

    @validates("author_id")
    def _freeze_author(self, key: str, value: int) -> int:
        """Reject re-assignment of ``author_id`` once it has been set."""
        current = self.__dict__.get(key)
        if current is not None and current != value:
            raise ValueError("author_id is immutable")
        return value
