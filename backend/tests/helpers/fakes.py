"""In-memory doubles for service-level tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from posts_api.models.post import Post
from posts_api.services._shared.errors import NotFoundError, PersistenceError


class InMemoryPostStore:
    """Dict-backed :class:`PostStore` that assigns ids like a sequence.

    Set ``fail_with`` to make every call raise it, simulating a broken
    backend.
    """

    def __init__(self) -> None:
        self.posts: dict[int, Post] = {}
        self._next_id = 1
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def create(self, post: Post) -> Post:
        self._check()
        post.id = self._next_id
        self._next_id += 1
        self.posts[post.id] = post
        return post

    def get_by_id(self, post_id: int) -> Post:
        self._check()
        try:
            return self.posts[post_id]
        except KeyError:
            raise NotFoundError("Post", post_id) from None

    def list_all(self) -> list[Post]:
        self._check()
        return [self.posts[key] for key in sorted(self.posts)]

    def list_by_author(self, author_id: int) -> list[Post]:
        return [post for post in self.list_all() if post.author_id == author_id]

    def update(self, post: Post) -> Post:
        self._check()
        if post.id not in self.posts:
            raise NotFoundError("Post", post.id)
        self.posts[post.id] = post
        return post

    def delete(self, post_id: int) -> None:
        self._check()
        if self.posts.pop(post_id, None) is None:
            raise NotFoundError("Post", post_id)

    def count(self) -> int:
        self._check()
        return len(self.posts)


def broken_store() -> InMemoryPostStore:
    store = InMemoryPostStore()
    store.fail_with = PersistenceError("connection lost")
    return store


@dataclass
class SteppingClock:
    """Clock returning ``start`` and advancing by ``step`` on every call."""

    start: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))
    step: timedelta = timedelta(seconds=1)
    calls: int = 0

    def __call__(self) -> datetime:
        value = self.start + self.step * self.calls
        self.calls += 1
        return value
