"""
SQLAlchemy implementation of UnitOfWork.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from posts_api.repositories import PostRepository
from posts_api.uow.base import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy-backed UoW over an explicitly provided session.

    The same session is shared across all repositories for a consistent
    transaction. Leaving the context without an exception commits; any
    exception rolls back and propagates.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.posts = PostRepository(session=self.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
