"""Post repository."""

from __future__ import annotations

from posts_api.models.post import Post
from posts_api.repositories.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`."""

    model = Post

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {"author_id": Post.author_id}

    def list_by_author(self, author_id: int) -> list[Post]:
        """Return every post written by ``author_id`` in id order.

        :param author_id: Author identifier from the Users API.
        :type author_id: int
        :returns: Possibly empty list of posts.
        :rtype: list[Post]
        """
        return self.list(filters={"author_id": author_id})
