# tests/test_auth_api.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from tenantcms.core.settings import settings
from tenantcms.models.auth import User, UserRole
from tenantcms.services.passwords import hash_password

API = settings.API_V1_STR


def _user(db, tenant, *, email="editor@tenantcms.io", password="s3cret-pass", is_active=True):
    u = User(
        email=email,
        hashed_password=hash_password(password),
        role=UserRole.editor,
        tenant_id=tenant.id,
        is_active=is_active,
    )
    db.add(u)
    db.commit()
    return u


def test_login_and_me(client, db, tenant_a):
    u = _user(db, tenant_a)
    r = client.post(f"{API}/auth/login", json={"email": u.email, "password": "s3cret-pass"})
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["token_type"] == "bearer"

    r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == u.email
    assert r.json()["tenant_id"] == tenant_a.id
    assert r.json()["role"] == "editor"


def test_bad_credentials_are_opaque(client, db, tenant_a):
    u = _user(db, tenant_a)
    wrong = client.post(f"{API}/auth/login", json={"email": u.email, "password": "nope"})
    unknown = client.post(f"{API}/auth/login", json={"email": "ghost@tenantcms.io", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "unauthorized", "detail": "Authentication required"}
    assert wrong.headers["www-authenticate"] == "Bearer"


def test_inactive_user_cannot_login(client, db, tenant_a):
    u = _user(db, tenant_a, is_active=False)
    r = client.post(f"{API}/auth/login", json={"email": u.email, "password": "s3cret-pass"})
    assert r.status_code == 403


def test_expired_and_garbage_tokens(client, db, tenant_a):
    u = _user(db, tenant_a)
    expired = jwt.encode(
        {"sub": str(u.id), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    for token in (expired, "not-a-jwt"):
        r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401


def test_login_clears_previous_override(client, db, super_admin, tenant_a, tenant_b, headers_for):
    db.commit()
    client.post(f"{API}/tenant-switch/{tenant_b.id}", headers=headers_for(super_admin))
    u = _user(db, tenant_a)
    r = client.post(f"{API}/auth/login", json={"email": u.email, "password": "s3cret-pass"})
    assert r.status_code == 200
    h = headers_for(super_admin)
    assert client.get(f"{API}/tenant-switch/current", headers=h).json()["override_tenant_id"] is None
