"""Schemas for payloads exchanged with the external Users API."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class WhoAmISchema(Schema):
    """Body of a successful ``GET /auth/me`` answer.

    Only ``userId`` is mandatory; the descriptive fields default to empty
    strings so a sparse answer still yields a usable identity.
    """

    class Meta:
        unknown = EXCLUDE

    user_id = fields.Integer(required=True, strict=True, data_key="userId")
    name = fields.String(load_default="", allow_none=False)
    email = fields.String(load_default="", allow_none=False)
    role = fields.String(load_default="", allow_none=False)
