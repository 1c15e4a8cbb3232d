# posts_api/services/_shared/base.py
from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from posts_api.services._shared.errors import UnauthorizedError
from posts_api.services._shared.policies.common import is_owner

T = TypeVar("T")


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Offer shared pagination arithmetic.
    * Centralize the ownership policy.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services never log and never translate errors to HTTP; they raise
      :class:`~posts_api.services._shared.errors.ServiceError` subclasses.
    - Collaborators are injected by the caller; services never reach for
      global handles.
    """

    # ----------------------- Pagination utilities ---------------------------

    def ensure_pagination(self, *, page: int, page_size: int) -> tuple[int, int]:
        """
        Floor ``page`` and ``page_size`` at 1.

        No upper bound is applied here; the API layer caps ``page_size``.

        :param page: 1-based page number.
        :type page: int
        :param page_size: Requested page size.
        :type page_size: int
        :returns: ``(page, page_size)`` after clamping.
        :rtype: tuple[int, int]
        """
        return max(1, int(page)), max(1, int(page_size))

    @staticmethod
    def slice_page(items: Sequence[T], *, page: int, page_size: int) -> list[T]:
        """
        Return the items that fall on ``page``.

        An offset past the end yields an empty list, never an error.
        """
        offset = (page - 1) * page_size
        if offset >= len(items):
            return []
        return list(items[offset : min(offset + page_size, len(items))])

    @staticmethod
    def total_pages(total_count: int, page_size: int) -> int:
        """Ceiling of ``total_count / page_size`` (0 when there are no items)."""
        return (int(total_count) + page_size - 1) // page_size

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(self, actor_id: int | None, owner_id: int, *, msg: str | None = None) -> None:
        """
        Ensure the current actor is the resource owner.

        :param actor_id: Caller id.
        :type actor_id: int | None
        :param owner_id: Expected owner id.
        :type owner_id: int
        :param msg: Optional custom error message.
        :type msg: str | None
        :raises UnauthorizedError: If actor is not the owner.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise UnauthorizedError(msg or "Only the author can modify this post")
