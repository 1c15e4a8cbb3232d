"""Caller identity as resolved from the external Users API."""

from __future__ import annotations

from .dto import ResolvedIdentity

__all__ = ["ResolvedIdentity"]
