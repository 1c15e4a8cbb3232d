"""Post endpoints."""

from __future__ import annotations

import logging

from flask import Blueprint, g

from posts_api.api.deps import (
    current_caller,
    get_post_service,
    load_json_body,
    optional_auth,
    parse_pagination,
    require_auth,
    success_response,
    timing,
)
from posts_api.core.errors import BadRequest
from posts_api.schemas import PostCreateSchema, PostPageSchema, PostSchema, PostUpdateSchema
from posts_api.services.posts import (
    PostCreateIn,
    PostUpdateIn,
    attach_author,
    attach_author_to_page,
)

bp = Blueprint("posts", __name__)

log = logging.getLogger(__name__)

post_schema = PostSchema()
post_page_schema = PostPageSchema()
post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()


@bp.get("")
@optional_auth
@timing
def list_posts():
    """Return one page of all posts."""

    pagination = parse_pagination()
    page = get_post_service().list_all(pagination.page, pagination.page_size)
    page = attach_author_to_page(page, current_caller())
    return success_response("Posts retrieved successfully", post_page_schema.dump(page))


@bp.get("/<int:post_id>")
@optional_auth
@timing
def get_post(post_id: int):
    """Return a single post."""

    post = attach_author(get_post_service().get(post_id), current_caller())
    return success_response("Post retrieved successfully", post_schema.dump(post))


@bp.get("/author/<int:author_id>")
@optional_auth
@timing
def list_author_posts(author_id: int):
    """Return one page of the posts written by ``author_id``."""

    pagination = parse_pagination()
    page = get_post_service().list_by_author(author_id, pagination.page, pagination.page_size)
    page = attach_author_to_page(page, current_caller())
    return success_response("Author posts retrieved successfully", post_page_schema.dump(page))


@bp.post("")
@require_auth
@timing
def create_post():
    """Create a post authored by the caller."""

    payload = post_create_schema.load(load_json_body())
    post = get_post_service().create(PostCreateIn(**payload), caller_id=g.caller.id, token=g.token)
    log.info("posts.created", extra={"post_id": post.id, "author_id": post.author_id})
    return success_response("Post created successfully", post_schema.dump(post), status=201)


@bp.put("/<int:post_id>")
@require_auth
@timing
def update_post(post_id: int):
    """Partially update a post; only its author may do so."""

    payload = post_update_schema.load(load_json_body())
    dto = PostUpdateIn(**payload)
    if not dto.has_changes:
        raise BadRequest(
            "No changes provided",
            code="NO_CHANGES",
            details="At least one field must be provided for update",
        )
    post = get_post_service().update(post_id, dto, caller_id=g.caller.id)
    post = attach_author(post, current_caller())
    log.info("posts.updated", extra={"post_id": post.id, "author_id": post.author_id})
    return success_response("Post updated successfully", post_schema.dump(post))


@bp.delete("/<int:post_id>")
@require_auth
@timing
def delete_post(post_id: int):
    """Delete a post; only its author may do so."""

    get_post_service().delete(post_id, caller_id=g.caller.id)
    log.info("posts.deleted", extra={"post_id": post_id, "author_id": g.caller.id})
    return success_response("Post deleted successfully")
