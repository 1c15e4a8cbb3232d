from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from posts_api.models.post import Post


class PostStore(Protocol):
    """Port for persisting :class:`Post` rows.

    Implementations raise :class:`~posts_api.services._shared.errors.NotFoundError`
    for missing ids and :class:`~posts_api.services._shared.errors.PersistenceError`
    for any other failure. Each mutating call is atomic.
    """

    def create(self, post: Post) -> Post: ...

    def get_by_id(self, post_id: int) -> Post: ...

    def list_all(self) -> Sequence[Post]: ...

    def list_by_author(self, author_id: int) -> Sequence[Post]: ...

    def update(self, post: Post) -> Post: ...

    def delete(self, post_id: int) -> None: ...

    def count(self) -> int: ...
