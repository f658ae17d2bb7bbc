# tests/test_tenant_context.py
from __future__ import annotations

import logging

import pytest

from tenantcms.core.errors import Forbidden, NotFound, Unauthorized
from tenantcms.core.logging import TenantLogFilter
from tenantcms.core.settings import settings
from tenantcms.models.auth import User, UserRole
from tenantcms.services.tenant_context import (
    SESSION_ACTIVE_TENANT_KEY,
    build_tenant_context,
    current_override_tenant,
    drop_stale_override,
    reset_tenant,
    resolve_active_tenant,
    switch_tenant,
)
from tenantcms.tenancy.context import ScopeMode, TenantContext

API = settings.API_V1_STR


# ---------- resolver ----------
def test_regular_user_always_gets_home_tenant(editor_a, tenant_a, tenant_b):
    # a forged override in the session is ignored for non super admins
    session = {SESSION_ACTIVE_TENANT_KEY: {"user_id": editor_a.id, "tenant_id": tenant_b.id}}
    assert resolve_active_tenant(editor_a, session) == tenant_a.id
    assert current_override_tenant(editor_a, session) is None


def test_super_admin_switch_and_reset(db, super_admin, tenant_a, tenant_b):
    session: dict = {}
    switch_tenant(db, principal=super_admin, session=session, tenant_id=tenant_b.id)
    assert resolve_active_tenant(super_admin, session) == tenant_b.id
    assert current_override_tenant(super_admin, session) == tenant_b.id

    switch_tenant(db, principal=super_admin, session=session, tenant_id=tenant_a.id)
    assert build_tenant_context(db, super_admin, session).tenant_id == tenant_a.id

    reset_tenant(super_admin, session)
    assert current_override_tenant(super_admin, session) is None
    # no home tenant and no override: fail, never "all tenants"
    with pytest.raises(Unauthorized):
        resolve_active_tenant(super_admin, session)


def test_super_admin_with_home_tenant_falls_back_after_reset(db, tenant_a, tenant_b):
    boss = User(email="boss@tenantcms.io", hashed_password="x", role=UserRole.super_admin, tenant_id=tenant_a.id)
    db.add(boss); db.flush()
    session: dict = {}
    assert resolve_active_tenant(boss, session) == tenant_a.id
    switch_tenant(db, principal=boss, session=session, tenant_id=tenant_b.id)
    assert resolve_active_tenant(boss, session) == tenant_b.id
    reset_tenant(boss, session)
    assert resolve_active_tenant(boss, session) == tenant_a.id


def test_switch_requires_super_admin(db, admin_a, tenant_b):
    session: dict = {}
    with pytest.raises(Forbidden):
        switch_tenant(db, principal=admin_a, session=session, tenant_id=tenant_b.id)
    assert session == {}


def test_switch_to_missing_or_inactive_tenant(db, super_admin, make_tenant):
    inactive = make_tenant(is_active=False)
    session: dict = {}
    with pytest.raises(NotFound):
        switch_tenant(db, principal=super_admin, session=session, tenant_id=inactive.id)
    with pytest.raises(NotFound):
        switch_tenant(db, principal=super_admin, session=session, tenant_id=999_999)
    assert SESSION_ACTIVE_TENANT_KEY not in session


def test_override_written_for_another_principal_is_ignored(db, super_admin, tenant_a, tenant_b):
    other = User(email="other-root@tenantcms.io", hashed_password="x", role=UserRole.super_admin, tenant_id=tenant_a.id)
    db.add(other); db.flush()
    session = {SESSION_ACTIVE_TENANT_KEY: {"user_id": super_admin.id, "tenant_id": tenant_b.id}}
    assert resolve_active_tenant(other, session) == tenant_a.id


def test_reset_is_noop_for_regular_users(editor_a):
    session = {"something": 1}
    reset_tenant(editor_a, session)
    assert session == {"something": 1}


def test_context_requires_tenant():
    with pytest.raises(Unauthorized):
        TenantContext(tenant_id=None)


def test_scope_modes(tenant_a):
    ctx = TenantContext(tenant_id=tenant_a.id)
    assert ctx.tenant_only().mode == ScopeMode.tenant_only
    assert ctx.tenant_and_system().mode == ScopeMode.tenant_and_system
    assert not ctx.tenant_only().includes_system
    assert ctx.tenant_and_system().includes_system


# ---------- HTTP flow ----------
def test_switch_reset_flow_over_http(client, db, super_admin, tenant_a, tenant_b, headers_for):
    db.commit()
    h = headers_for(super_admin)

    r = client.get(f"{API}/tenant-switch/current", headers=h)
    assert r.status_code == 200
    assert r.json()["active_tenant_id"] is None

    # scoped endpoints fail fast without an active tenant
    assert client.get(f"{API}/pages", headers=h).status_code == 401

    r = client.post(f"{API}/tenant-switch/{tenant_b.id}", headers=h)
    assert r.status_code == 200
    assert r.json()["active_tenant_id"] == tenant_b.id
    assert r.json()["override_tenant_id"] == tenant_b.id

    r = client.post(f"{API}/pages", headers=h, json={"slug": "home", "title": "Home"})
    assert r.status_code == 201
    assert r.json()["tenant_id"] == tenant_b.id

    r = client.post(f"{API}/tenant-switch/reset", headers=h)
    assert r.status_code == 200
    assert r.json()["override_tenant_id"] is None


def test_regular_user_cannot_switch_over_http(client, db, admin_a, tenant_b, headers_for):
    db.commit()
    r = client.post(f"{API}/tenant-switch/{tenant_b.id}", headers=headers_for(admin_a))
    assert r.status_code == 403
    assert r.json() == {"error": "forbidden", "detail": "Forbidden"}


def test_logout_clears_override(client, db, super_admin, tenant_b, headers_for):
    db.commit()
    h = headers_for(super_admin)
    client.post(f"{API}/tenant-switch/{tenant_b.id}", headers=h)
    assert client.get(f"{API}/tenant-switch/current", headers=h).json()["override_tenant_id"] == tenant_b.id

    assert client.post(f"{API}/auth/logout").status_code == 204
    assert client.get(f"{API}/tenant-switch/current", headers=h).json()["override_tenant_id"] is None


def test_tenant_list_is_privileged(client, db, super_admin, admin_a, tenant_a, tenant_b, headers_for):
    db.commit()
    assert client.get(f"{API}/tenants", headers=headers_for(admin_a)).status_code == 403
    r = client.get(f"{API}/tenants", headers=headers_for(super_admin))
    assert r.status_code == 200
    assert {t["id"] for t in r.json()} >= {tenant_a.id, tenant_b.id}


def test_missing_token_is_opaque_401(client):
    r = client.get(f"{API}/pages")
    assert r.status_code == 401
    assert r.json() == {"error": "unauthorized", "detail": "Authentication required"}


def test_override_to_deactivated_tenant_is_dropped(db, super_admin, tenant_a, tenant_b):
    super_admin.tenant_id = tenant_a.id
    db.flush()
    session: dict = {}
    switch_tenant(db, principal=super_admin, session=session, tenant_id=tenant_b.id)
    tenant_b.is_active = False
    db.flush()

    ctx = build_tenant_context(db, super_admin, session)
    assert ctx.tenant_id == tenant_a.id
    assert SESSION_ACTIVE_TENANT_KEY not in session


def test_live_override_is_kept(db, super_admin, tenant_b):
    session: dict = {}
    switch_tenant(db, principal=super_admin, session=session, tenant_id=tenant_b.id)
    drop_stale_override(db, super_admin, session)
    assert current_override_tenant(super_admin, session) == tenant_b.id


def test_deactivated_override_over_http(client, db, super_admin, tenant_b, headers_for):
    db.commit()
    h = headers_for(super_admin)
    client.post(f"{API}/tenant-switch/{tenant_b.id}", headers=h)
    tenant_b.is_active = False
    db.commit()

    # no home tenant left to fall back on
    assert client.get(f"{API}/pages", headers=h).status_code == 401
    body = client.get(f"{API}/tenant-switch/current", headers=h).json()
    assert body["override_tenant_id"] is None
    assert body["active_tenant_id"] is None


def test_service_logs_carry_request_tenant(client, db, admin_a, tenant_a, headers_for):
    db.commit()
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = _Collect()
    handler.addFilter(TenantLogFilter())
    logger = logging.getLogger("tenantcms.services.page_composition")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        h = headers_for(admin_a)
        page_id = client.post(f"{API}/pages", headers=h, json={"slug": "x", "title": "X"}).json()["id"]
        assert client.delete(f"{API}/pages/{page_id}", headers=h).status_code == 204
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)

    deleted = [r for r in records if "deleted" in r.getMessage()]
    assert deleted
    assert deleted[0].tenant_id == tenant_a.id
