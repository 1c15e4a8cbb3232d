"""
PostService
===========

Application service for the ``Post`` aggregate:
- Create posts on behalf of a caller whose token resolves to the same id.
- Read single posts and paginated listings (all posts or one author's).
- Update and delete posts, restricted to their author.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from posts_api.models.base import as_utc, utcnow
from posts_api.models.post import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, Post
from posts_api.services._shared.base import BaseService
from posts_api.services._shared.errors import IdentityMismatchError, PostValidationError
from posts_api.services._shared.ports import IdentityResolver, PostStore
from posts_api.services.posts.assembler import to_post_out
from posts_api.services.posts.dto import PostCreateIn, PostOut, PostPageOut, PostUpdateIn


def _check_length(field: str, value: str, maximum: int) -> None:
    if not isinstance(value, str) or len(value) < 1:
        raise PostValidationError(field, f"{field} is required")
    if len(value) > maximum:
        raise PostValidationError(field, f"{field} must be at most {maximum} characters")


class PostService(BaseService):
    """
    Orchestrates the post store and the identity resolver.

    Responsibilities
    ----------------
    - Validate post fields.
    - Verify that the token owner is the asserted caller before creating.
    - Enforce authorship on update and delete.
    - Paginate listings in memory over the store's full result set.

    :param store: Post persistence port.
    :type store: PostStore
    :param identity: Bearer token resolver.
    :type identity: IdentityResolver
    :param clock: Returns the current aware UTC time.
    :type clock: Callable[[], datetime]
    """

    def __init__(
        self,
        *,
        store: PostStore,
        identity: IdentityResolver,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.identity = identity
        self.clock = clock

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create(self, dto: PostCreateIn, caller_id: int, token: str) -> PostOut:
        """
        Create a post authored by ``caller_id``.

        The token is resolved afresh and must belong to ``caller_id``; the
        author's name and email are copied onto the post from that identity.

        :param dto: Post fields.
        :type dto: PostCreateIn
        :param caller_id: Caller id asserted by the authentication step.
        :type caller_id: int
        :param token: Bearer token of the request.
        :type token: str
        :returns: Created post, without ``author`` block.
        :rtype: PostOut
        :raises PostValidationError: When a field violates its constraints.
        :raises AuthError: When the token cannot be resolved.
        :raises IdentityMismatchError: When the token belongs to someone else.
        :raises PersistenceError: When the store fails.
        """
        _check_length("title", dto.title, TITLE_MAX_LENGTH)
        _check_length("content", dto.content, CONTENT_MAX_LENGTH)

        identity = self.identity.resolve(token)
        if identity.id != caller_id:
            raise IdentityMismatchError(asserted_id=caller_id, resolved_id=identity.id)

        now = self.clock()
        post = Post(
            title=dto.title,
            content=dto.content,
            author_id=caller_id,
            author_name=identity.name,
            author_email=identity.email,
            created_at=now,
            updated_at=now,
        )
        return to_post_out(self.store.create(post))

    def update(self, post_id: int, dto: PostUpdateIn, caller_id: int) -> PostOut:
        """
        Apply a partial update to a post owned by ``caller_id``.

        Only fields set on ``dto`` change; ``updated_at`` always moves forward.

        :raises NotFoundError: When the post does not exist.
        :raises UnauthorizedError: When the caller is not the author.
        :raises PostValidationError: When a provided field is invalid.
        :raises PersistenceError: When the store fails.
        """
        if dto.title is not None:
            _check_length("title", dto.title, TITLE_MAX_LENGTH)
        if dto.content is not None:
            _check_length("content", dto.content, CONTENT_MAX_LENGTH)

        existing = self.store.get_by_id(post_id)
        self.ensure_owner(caller_id, existing.author_id, msg="Only the author can update this post")

        if dto.title is not None:
            existing.title = dto.title
        if dto.content is not None:
            existing.content = dto.content
        existing.updated_at = self._next_timestamp(existing.updated_at)

        return to_post_out(self.store.update(existing))

    def delete(self, post_id: int, caller_id: int) -> None:
        """
        Delete a post owned by ``caller_id``.

        :raises NotFoundError: When the post does not exist.
        :raises UnauthorizedError: When the caller is not the author.
        :raises PersistenceError: When the store fails.
        """
        existing = self.store.get_by_id(post_id)
        self.ensure_owner(caller_id, existing.author_id, msg="Only the author can delete this post")
        self.store.delete(post_id)

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get(self, post_id: int) -> PostOut:
        """
        Retrieve a post by id, without ``author`` block.

        :raises NotFoundError: When the post does not exist.
        :raises PersistenceError: When the store fails.
        """
        return to_post_out(self.store.get_by_id(post_id))

    def list_all(self, page: int, page_size: int) -> PostPageOut:
        """
        Return one page of all posts.

        ``page`` and ``page_size`` are floored at 1; a page past the end is
        empty, not an error.
        """
        page, page_size = self.ensure_pagination(page=page, page_size=page_size)
        posts = self.store.list_all()
        total = self.store.count()
        return self._build_page(posts, total, page, page_size)

    def list_by_author(self, author_id: int, page: int, page_size: int) -> PostPageOut:
        """
        Return one page of the posts written by ``author_id``.

        The author is not looked up: an unknown author simply has no posts.
        """
        page, page_size = self.ensure_pagination(page=page, page_size=page_size)
        posts = self.store.list_by_author(author_id)
        return self._build_page(posts, len(posts), page, page_size)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _build_page(
        self, posts: Sequence[Post], total: int, page: int, page_size: int
    ) -> PostPageOut:
        return PostPageOut(
            posts=[to_post_out(post) for post in self.slice_page(posts, page=page, page_size=page_size)],
            total_count=int(total),
            page=page,
            page_size=page_size,
            total_pages=self.total_pages(total, page_size),
        )

    def _next_timestamp(self, previous: datetime | None) -> datetime:
        now = self.clock()
        if previous is not None and now <= as_utc(previous):
            return as_utc(previous) + timedelta(microseconds=1)
        return now
