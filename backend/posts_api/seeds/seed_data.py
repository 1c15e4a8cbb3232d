"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from posts_api.models.base import utcnow
from posts_api.models.post import Post

LOGGER = logging.getLogger(__name__)

POST_FIXTURES: list[dict[str, str | int]] = [
    {
        "author_id": 1,
        "author_name": "Alex Martinez",
        "author_email": "alex.martinez@example.com",
        "title": "Hello from the posts service",
        "content": "First post seeded for local development.",
    },
    {
        "author_id": 1,
        "author_name": "Alex Martinez",
        "author_email": "alex.martinez@example.com",
        "title": "Pagination notes",
        "content": "Listings default to ten posts per page and accept up to one hundred.",
    },
    {
        "author_id": 2,
        "author_name": "Jamie Lee",
        "author_email": "jamie.lee@example.com",
        "title": "Only authors can edit",
        "content": "Updating or deleting someone else's post answers 403.",
    },
    {
        "author_id": 3,
        "author_name": "Sara Kim",
        "author_email": "sara.kim@example.com",
        "title": "Tokens are checked upstream",
        "content": "Every write resolves the bearer token against the Users API.",
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_posts(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the fixture posts that do not exist yet.

    A post is identified by ``(author_id, title)``; existing rows are left
    untouched so running the seeder twice changes nothing.
    """
    if verbose:
        LOGGER.info("Seeding posts...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in POST_FIXTURES:
        author_id = int(fixture["author_id"])
        title = str(fixture["title"])
        post = session.execute(
            select(Post).filter_by(author_id=author_id, title=title)
        ).scalar_one_or_none()
        created = post is None
        if post is None:
            now = utcnow()
            session.add(
                Post(
                    title=title,
                    content=str(fixture["content"]),
                    author_id=author_id,
                    author_name=str(fixture["author_name"]),
                    author_email=str(fixture["author_email"]),
                    created_at=now,
                    updated_at=now,
                )
            )
            session.flush()
        _touch(summary, "posts", created)

    session.commit()
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_posts(database, verbose=verbose)


__all__ = ["POST_FIXTURES", "run_all", "seed_posts"]
