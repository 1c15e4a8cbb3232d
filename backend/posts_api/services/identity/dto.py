"""
DTOs for caller identity.

Identities are transient: resolved once per request from the bearer token
and never persisted or cached.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResolvedIdentity:
    """
    Identity returned by the Users API ``/auth/me`` endpoint.

    :param id: Numeric user identifier.
    :type id: int
    :param name: Display name (may be blank when the authority omits it).
    :type name: str
    :param email: Email address.
    :type email: str
    :param role: Role label assigned by the authority.
    :type role: str
    """

    id: int
    name: str = ""
    email: str = ""
    role: str = ""
