"""Shape stored posts into outward DTOs and embed author details.

Author embedding is applied by the API layer after a service call returns:
only the post's own author, identified by the caller identity the API layer
resolved, ever sees the ``author`` block.
"""

from __future__ import annotations

from dataclasses import replace

from posts_api.models.base import as_utc
from posts_api.models.post import Post
from posts_api.services.identity.dto import ResolvedIdentity
from posts_api.services.posts.dto import AuthorOut, PostOut, PostPageOut


def to_post_out(post: Post) -> PostOut:
    """Convert a stored post into a :class:`PostOut` without ``author``."""
    return PostOut(
        id=post.id,
        title=post.title,
        content=post.content,
        author_id=post.author_id,
        created_at=as_utc(post.created_at),
        updated_at=as_utc(post.updated_at),
        author_name=post.author_name or "",
        author_email=post.author_email or "",
    )


def author_from_snapshot(out: PostOut) -> AuthorOut | None:
    """Build the author block from the creation-time snapshot, if any."""
    if not (out.author_name or out.author_email):
        return None
    return AuthorOut(id=out.author_id, username=out.author_name, email=out.author_email)


def attach_author(out: PostOut, caller: ResolvedIdentity | None) -> PostOut:
    """
    Embed ``author`` when ``caller`` wrote the post.

    The caller's fresh identity wins; blank name or email fall back to the
    snapshot stored on the post. Anonymous callers and non-authors get the
    representation back unchanged.

    :param out: Post representation returned by the service.
    :type out: PostOut
    :param caller: Identity resolved for the current request, if any.
    :type caller: ResolvedIdentity | None
    :returns: Possibly enriched representation.
    :rtype: PostOut
    """
    if caller is None or caller.id != out.author_id:
        return out
    snapshot = author_from_snapshot(out)
    author = AuthorOut(
        id=caller.id,
        username=caller.name or (snapshot.username if snapshot else ""),
        email=caller.email or (snapshot.email if snapshot else ""),
    )
    return replace(out, author=author)


def attach_author_to_page(page: PostPageOut, caller: ResolvedIdentity | None) -> PostPageOut:
    """Apply :func:`attach_author` to every post of ``page``."""
    if caller is None:
        return page
    return replace(page, posts=[attach_author(post, caller) for post in page.posts])
