"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from posts_api.repositories.base import BaseRepository
from posts_api.repositories.post import PostRepository

__all__ = ["BaseRepository", "PostRepository"]
