from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from posts_api.services._shared.errors import (
    IdentityMismatchError,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    PostValidationError,
    UnauthorizedError,
    UpstreamUnavailableError,
)
from posts_api.services._shared.ports import StubIdentityResolver
from posts_api.services.identity import ResolvedIdentity
from posts_api.services.posts.dto import PostCreateIn, PostUpdateIn
from posts_api.services.posts.service import PostService

from tests.helpers.fakes import InMemoryPostStore, SteppingClock, broken_store

ALICE = ResolvedIdentity(id=42, name="Alice", email="a@x.com", role="user")
BOB = ResolvedIdentity(id=7, name="Bob", email="bob@x.com", role="user")


class _RaisingResolver:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def resolve(self, token: str) -> ResolvedIdentity:
        raise self.exc


class TestPostService:
    """Validate PostService behaviours over an in-memory store."""

    # -------------------------- Fixtures ---------------------------------- #

    @pytest.fixture()
    def store(self) -> InMemoryPostStore:
        return InMemoryPostStore()

    @pytest.fixture()
    def resolver(self) -> StubIdentityResolver:
        return StubIdentityResolver({"alice-token": ALICE, "bob-token": BOB})

    @pytest.fixture()
    def clock(self) -> SteppingClock:
        return SteppingClock()

    @pytest.fixture()
    def service(self, store, resolver, clock) -> PostService:
        return PostService(store=store, identity=resolver, clock=clock)

    def _seed(self, service: PostService, count: int, *, token: str = "alice-token", caller_id: int = 42):
        return [
            service.create(PostCreateIn(title=f"Post {i}", content=f"Body {i}"), caller_id, token)
            for i in range(count)
        ]

    # -------------------------- Creation ---------------------------------- #

    def test_create_round_trip(self, service, resolver):
        """Caller 42 creates a post and reads back the same data."""
        created = service.create(PostCreateIn(title="Hello", content="World"), 42, "alice-token")

        assert created.id > 0
        assert created.author_id == 42
        assert created.title == "Hello"
        assert created.content == "World"
        assert created.created_at == created.updated_at
        assert created.author is None
        assert resolver.calls == ["alice-token"]

        fetched = service.get(created.id)
        assert fetched == created

    def test_create_snapshots_author_details(self, service, store):
        created = service.create(PostCreateIn(title="Hello", content="World"), 42, "alice-token")

        stored = store.posts[created.id]
        assert stored.author_name == "Alice"
        assert stored.author_email == "a@x.com"

    def test_create_identity_mismatch(self, service, store):
        """Token resolving to someone else than the asserted caller is rejected."""
        with pytest.raises(IdentityMismatchError) as info:
            service.create(PostCreateIn(title="Hello", content="World"), 42, "bob-token")

        assert info.value.asserted_id == 42
        assert info.value.resolved_id == 7
        assert store.posts == {}

    def test_create_unknown_token_propagates_auth_error(self, service, store):
        with pytest.raises(InvalidTokenError):
            service.create(PostCreateIn(title="Hello", content="World"), 42, "nope")
        assert store.posts == {}

    def test_create_upstream_unavailable_propagates(self, store, clock):
        service = PostService(store=store, identity=_RaisingResolver(UpstreamUnavailableError()), clock=clock)

        with pytest.raises(UpstreamUnavailableError):
            service.create(PostCreateIn(title="Hello", content="World"), 42, "alice-token")

    @pytest.mark.parametrize(
        ("title", "content", "field"),
        [
            ("", "World", "title"),
            ("x" * 256, "World", "title"),
            ("Hello", "", "content"),
            ("Hello", "y" * 10001, "content"),
        ],
    )
    def test_create_rejects_invalid_fields(self, service, resolver, title, content, field):
        with pytest.raises(PostValidationError) as info:
            service.create(PostCreateIn(title=title, content=content), 42, "alice-token")

        assert info.value.field == field
        assert resolver.calls == []

    def test_create_accepts_boundary_lengths(self, service):
        created = service.create(PostCreateIn(title="x" * 255, content="y" * 10000), 42, "alice-token")
        assert len(created.title) == 255
        assert len(created.content) == 10000

    def test_create_store_failure_is_persistence_error(self, resolver, clock):
        service = PostService(store=broken_store(), identity=resolver, clock=clock)

        with pytest.raises(PersistenceError):
            service.create(PostCreateIn(title="Hello", content="World"), 42, "alice-token")

    # -------------------------- Reads -------------------------------------- #

    def test_get_missing_post(self, service):
        with pytest.raises(NotFoundError) as info:
            service.get(999)
        assert info.value.entity == "Post"
        assert info.value.key == 999

    def test_get_store_failure(self, resolver):
        service = PostService(store=broken_store(), identity=resolver)
        with pytest.raises(PersistenceError):
            service.get(1)

    def test_list_all_slices_in_id_order(self, service):
        posts = self._seed(service, 25)

        page = service.list_all(page=2, page_size=10)

        assert [p.id for p in page.posts] == [p.id for p in posts[10:20]]
        assert page.total_count == 25
        assert page.page == 2
        assert page.page_size == 10
        assert page.total_pages == 3

    def test_list_all_last_partial_page(self, service):
        self._seed(service, 25)

        page = service.list_all(page=3, page_size=10)

        assert len(page.posts) == 5
        assert page.total_pages == 3

    def test_list_all_page_beyond_last_is_empty(self, service):
        self._seed(service, 3)

        page = service.list_all(page=5, page_size=10)

        assert page.posts == []
        assert page.total_count == 3
        assert page.total_pages == 1

    def test_list_all_floors_page_and_size(self, service):
        self._seed(service, 3)

        page = service.list_all(page=0, page_size=0)

        assert page.page == 1
        assert page.page_size == 1
        assert len(page.posts) == 1
        assert page.total_pages == 3

    def test_list_all_empty(self, service):
        page = service.list_all(page=1, page_size=10)
        assert page.posts == []
        assert page.total_count == 0
        assert page.total_pages == 0

    def test_list_by_author_scopes_posts(self, service):
        self._seed(service, 3)
        self._seed(service, 2, token="bob-token", caller_id=7)

        page = service.list_by_author(7, page=1, page_size=10)

        assert page.total_count == 2
        assert all(p.author_id == 7 for p in page.posts)

    def test_list_by_author_without_posts(self, service):
        self._seed(service, 2)

        page = service.list_by_author(12345, page=1, page_size=10)

        assert page.posts == []
        assert page.total_count == 0
        assert page.total_pages == 0

    def test_list_by_author_floors_page_size(self, service):
        self._seed(service, 2)

        page = service.list_by_author(42, page=-3, page_size=-1)

        assert page.page == 1
        assert page.page_size == 1
        assert page.total_pages == 2

    # -------------------------- Update ------------------------------------- #

    def test_update_title_only(self, service):
        created = self._seed(service, 1)[0]

        updated = service.update(created.id, PostUpdateIn(title="New title"), 42)

        assert updated.title == "New title"
        assert updated.content == created.content
        assert updated.author_id == created.author_id
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    def test_update_content_only(self, service):
        created = self._seed(service, 1)[0]

        updated = service.update(created.id, PostUpdateIn(content="New body"), 42)

        assert updated.title == created.title
        assert updated.content == "New body"

    def test_update_timestamp_strictly_increases_with_frozen_clock(self, store, resolver):
        frozen = datetime(2024, 1, 1, tzinfo=UTC)
        service = PostService(store=store, identity=resolver, clock=lambda: frozen)
        created = service.create(PostCreateIn(title="Hello", content="World"), 42, "alice-token")

        first = service.update(created.id, PostUpdateIn(title="A"), 42)
        second = service.update(created.id, PostUpdateIn(title="B"), 42)

        assert first.updated_at == frozen + timedelta(microseconds=1)
        assert second.updated_at > first.updated_at

    def test_update_by_non_author(self, service, store):
        created = self._seed(service, 1)[0]

        with pytest.raises(UnauthorizedError):
            service.update(created.id, PostUpdateIn(title="Hijack"), 7)

        assert store.posts[created.id].title == created.title

    def test_update_missing_post(self, service):
        with pytest.raises(NotFoundError):
            service.update(404, PostUpdateIn(title="x"), 42)

    def test_update_rejects_invalid_title(self, service):
        created = self._seed(service, 1)[0]
        with pytest.raises(PostValidationError):
            service.update(created.id, PostUpdateIn(title=""), 42)

    # -------------------------- Delete ------------------------------------- #

    def test_delete_by_author(self, service, store):
        created = self._seed(service, 1)[0]

        service.delete(created.id, 42)

        assert created.id not in store.posts
        with pytest.raises(NotFoundError):
            service.get(created.id)

    def test_delete_by_non_author(self, service, store):
        created = self._seed(service, 1)[0]

        with pytest.raises(UnauthorizedError):
            service.delete(created.id, 7)

        assert created.id in store.posts

    def test_delete_missing_post(self, service):
        with pytest.raises(NotFoundError):
            service.delete(404, 42)

    def test_update_keeps_author_id(self, service, store):
        created = self._seed(service, 1)[0]
        service.update(created.id, PostUpdateIn(title="x", content="y"), 42)
        assert store.posts[created.id].author_id == 42
