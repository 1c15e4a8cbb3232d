"""SQLAlchemy adapter for the :class:`PostStore` port."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from posts_api.models.post import Post
from posts_api.repositories import PostRepository
from posts_api.services._shared.errors import NotFoundError, PersistenceError
from posts_api.services._shared.ports import PostStore
from posts_api.uow import SQLAlchemyUnitOfWork


class SQLAlchemyPostStore(PostStore):
    """
    Post store backed by a SQLAlchemy session.

    Every mutation runs inside its own :class:`SQLAlchemyUnitOfWork`, so it is
    committed on success and rolled back on failure. Driver and ORM errors are
    re-raised as :class:`PersistenceError`; the original exception is kept as
    ``__cause__``.

    :param session: Session owned by the caller (request-scoped in Flask).
    :type session: :class:`sqlalchemy.orm.Session`
    :param uow_factory: Builds a unit of work for the session; overridable in tests.
    """

    def __init__(
        self,
        session: Session,
        *,
        uow_factory: Callable[[Session], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
    ) -> None:
        self._session = session
        self._uow_factory = uow_factory
        self._posts = PostRepository(session)

    @contextmanager
    def _translate(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PersistenceError(f"Failed to {action}") from exc

    # ------------------------------- Commands ---------------------------------

    def create(self, post: Post) -> Post:
        with self._translate("create post"), self._uow_factory(self._session) as uow:
            uow.posts.add(post)
        return post

    def update(self, post: Post) -> Post:
        with self._translate("update post"), self._uow_factory(self._session) as uow:
            stored = uow.posts.merge(post)
        return stored

    def delete(self, post_id: int) -> None:
        with self._translate("delete post"), self._uow_factory(self._session) as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            uow.posts.delete(post)

    # -------------------------------- Queries ---------------------------------

    def get_by_id(self, post_id: int) -> Post:
        with self._translate("get post"):
            post = self._posts.get(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    def list_all(self) -> list[Post]:
        with self._translate("get posts"):
            return self._posts.list()

    def list_by_author(self, author_id: int) -> list[Post]:
        with self._translate("get posts by author"):
            return self._posts.list_by_author(author_id)

    def count(self) -> int:
        with self._translate("get total posts count"):
            return self._posts.count()
