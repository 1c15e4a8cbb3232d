"""CORS policy built from ``CORS_ORIGINS``."""

from __future__ import annotations

import pytest
from flask import Flask
from posts_api.core import cors


def _app(origins: str) -> Flask:
    app = Flask(__name__)
    app.config.update(CORS_ORIGINS=origins, CORS_MAX_AGE=600)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    cors.init_app(app)
    return app


@pytest.mark.parametrize("origins", ["*", "", " * "])
def test_wildcard_policy_answers_literal_star(origins):
    client = _app(origins).test_client()

    resp = client.get("/ping", headers={"Origin": "http://frontend.test"})

    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "Access-Control-Allow-Credentials" not in resp.headers


def test_explicit_origins_echo_only_listed_origin():
    client = _app("http://a.test, http://b.test").test_client()

    allowed = client.get("/ping", headers={"Origin": "http://b.test"})
    denied = client.get("/ping", headers={"Origin": "http://evil.test"})

    assert allowed.headers["Access-Control-Allow-Origin"] == "http://b.test"
    assert allowed.headers["Access-Control-Allow-Credentials"] == "true"
    assert "Access-Control-Allow-Origin" not in denied.headers


def test_preflight_advertises_methods_and_max_age():
    client = _app("*").test_client()

    resp = client.options(
        "/ping",
        headers={"Origin": "http://frontend.test", "Access-Control-Request-Method": "GET"},
    )

    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "GET" in resp.headers["Access-Control-Allow-Methods"]
    assert resp.headers["Access-Control-Max-Age"] == "600"
