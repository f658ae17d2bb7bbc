# tests/test_errors.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tenantcms.core.errors import NotFound, register_error_handlers


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("db password is hunter2")

    @app.get("/missing")
    def missing():
        raise NotFound("Widget not found")

    return app


def test_unexpected_errors_become_opaque_internal():
    client = TestClient(_app(), raise_server_exceptions=False)
    r = client.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"error": "internal", "detail": "Internal error"}


def test_domain_errors_keep_their_status():
    r = TestClient(_app()).get("/missing")
    assert r.status_code == 404
    assert r.json() == {"error": "not_found", "detail": "Widget not found"}
