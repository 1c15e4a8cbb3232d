"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, pre_load, validate

# Largest page number a signed 64-bit integer can hold.
MAX_PAGE = 2**63 - 1


class PaginationQuerySchema(Schema):
    """Parse ``page`` / ``page_size`` query parameters.

    Listings never reject a request over pagination: a value that is not an
    integer, or falls outside its range, is dropped before validation and the
    default takes its place.
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_page_size: int = 10, max_page_size: int = 100, **kwargs: Any) -> None:
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        super().__init__(**kwargs)

    page = fields.Integer(validate=validate.Range(min=1, max=MAX_PAGE))
    page_size = fields.Integer()

    @pre_load
    def drop_invalid(self, data: Any, **_: Any) -> dict[str, Any]:
        bounds = {"page": (1, MAX_PAGE), "page_size": (1, self._max_page_size)}
        cleaned: dict[str, Any] = {}
        for key, (low, high) in bounds.items():
            raw = data.get(key) if hasattr(data, "get") else None
            try:
                value = int(str(raw).strip())
            except (TypeError, ValueError):
                continue
            if not low <= value <= high:
                continue
            cleaned[key] = value
        return cleaned

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data.setdefault("page", 1)
        data.setdefault("page_size", self._default_page_size)
        return data
