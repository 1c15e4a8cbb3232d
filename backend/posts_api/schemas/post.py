"""Post resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_dump, post_load, validate

from posts_api.models.post import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH


class PostCreateSchema(Schema):
    """Payload for creating a new post."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=1, max=TITLE_MAX_LENGTH))
    content = fields.String(required=True, validate=validate.Length(min=1, max=CONTENT_MAX_LENGTH))


class PostUpdateSchema(Schema):
    """Payload for a partial update; absent or ``null`` fields stay untouched."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(allow_none=True, validate=validate.Length(min=1, max=TITLE_MAX_LENGTH))
    content = fields.String(allow_none=True, validate=validate.Length(min=1, max=CONTENT_MAX_LENGTH))

    @post_load
    def drop_nulls(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        return {key: value for key, value in data.items() if value is not None}


class AuthorSchema(Schema):
    """Author block embedded in the caller's own posts."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)


class PostSchema(Schema):
    """Representation of the post entity."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    author_id = fields.Integer(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
    author = fields.Nested(AuthorSchema, allow_none=True)

    @post_dump
    def drop_empty_author(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if data.get("author") is None:
            data.pop("author", None)
        return data


class PostPageSchema(Schema):
    """One page of posts with pagination metadata."""

    posts = fields.List(fields.Nested(PostSchema), required=True)
    total_count = fields.Integer(required=True)
    page = fields.Integer(required=True)
    page_size = fields.Integer(required=True)
    total_pages = fields.Integer(required=True)
