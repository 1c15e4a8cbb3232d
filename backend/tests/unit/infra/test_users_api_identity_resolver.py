"""UsersApiIdentityResolver against a mocked Users API."""

from __future__ import annotations

import pytest
import requests
import responses
from posts_api.infra.users_api.identity_resolver import UsersApiIdentityResolver
from posts_api.services._shared.errors import (
    InvalidTokenError,
    MalformedResponseError,
    UpstreamError,
    UpstreamUnavailableError,
)
from posts_api.services.identity import ResolvedIdentity

BASE_URL = "http://users-api.test"
WHOAMI = f"{BASE_URL}/auth/me"


@pytest.fixture()
def resolver() -> UsersApiIdentityResolver:
    return UsersApiIdentityResolver(BASE_URL + "/", timeout=5)


@responses.activate
def test_resolve_success(resolver) -> None:
    # Arrange
    responses.add(
        responses.GET,
        WHOAMI,
        json={"userId": 42, "name": "Alice", "email": "a@x.com", "role": "admin", "extra": True},
        status=200,
    )

    # Act
    identity = resolver.resolve("tok-123")

    # Assert
    assert identity == ResolvedIdentity(id=42, name="Alice", email="a@x.com", role="admin")
    sent = responses.calls[0].request
    assert sent.headers["Authorization"] == "Bearer tok-123"
    assert sent.headers["Content-Type"] == "application/json"


@responses.activate
def test_resolve_sparse_body_defaults_to_empty_strings(resolver) -> None:
    responses.add(responses.GET, WHOAMI, json={"userId": 7}, status=200)

    identity = resolver.resolve("tok")

    assert identity == ResolvedIdentity(id=7, name="", email="", role="")


@responses.activate
def test_resolve_401_is_invalid_token(resolver) -> None:
    responses.add(responses.GET, WHOAMI, json={"error": "expired"}, status=401)

    with pytest.raises(InvalidTokenError):
        resolver.resolve("tok")


@responses.activate
def test_resolve_other_status_is_upstream_error(resolver) -> None:
    responses.add(responses.GET, WHOAMI, body="boom", status=503)

    with pytest.raises(UpstreamError) as info:
        resolver.resolve("tok")

    assert info.value.status == 503
    assert info.value.body == "boom"


@responses.activate
def test_resolve_connection_failure_is_unavailable(resolver) -> None:
    responses.add(responses.GET, WHOAMI, body=requests.ConnectionError("refused"))

    with pytest.raises(UpstreamUnavailableError):
        resolver.resolve("tok")


@responses.activate
def test_resolve_timeout_is_unavailable(resolver) -> None:
    responses.add(responses.GET, WHOAMI, body=requests.Timeout("slow"))

    with pytest.raises(UpstreamUnavailableError):
        resolver.resolve("tok")


@responses.activate
@pytest.mark.parametrize(
    "kwargs",
    [
        {"body": "not json", "content_type": "text/plain"},
        {"json": {"name": "No id"}},
        {"json": {"userId": "42"}},
        {"json": [1, 2, 3]},
    ],
)
def test_resolve_malformed_body(resolver, kwargs) -> None:
    responses.add(responses.GET, WHOAMI, status=200, **kwargs)

    with pytest.raises(MalformedResponseError):
        resolver.resolve("tok")


@responses.activate
def test_empty_token_never_calls_upstream(resolver) -> None:
    with pytest.raises(InvalidTokenError):
        resolver.resolve("")

    assert len(responses.calls) == 0


def test_timeout_is_capped_at_thirty_seconds() -> None:
    assert UsersApiIdentityResolver(BASE_URL, timeout=120).timeout == 30.0
    assert UsersApiIdentityResolver(BASE_URL, timeout=2).timeout == 2.0


def test_whoami_url_strips_trailing_slash(resolver) -> None:
    assert resolver.whoami_url == WHOAMI
