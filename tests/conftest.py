# tests/conftest.py
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import tenantcms.models.auth  # noqa: F401
import tenantcms.models.catalog  # noqa: F401
import tenantcms.models.content  # noqa: F401
from tenantcms.db.base import Base
from tenantcms.db.session import get_db
from tenantcms.main import app
from tenantcms.models.auth import Tenant, User, UserRole
from tenantcms.security.jwt import create_access_token
from tenantcms.seeds.component_types import seed_system_component_types
from tenantcms.tenancy.context import TenantContext


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(eng)
        eng.dispose()


@pytest.fixture()
def db(engine) -> Session:
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _override_get_db(db: Session):
    """Every endpoint uses the same session as the test."""
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def client() -> TestClient:
    # one client per test so session cookies never leak between tests
    return TestClient(app)


# ---------- factories ----------
def _mk_tenant(db: Session, *, is_active: bool = True) -> Tenant:
    suffix = uuid.uuid4().hex[:6]
    t = Tenant(name=f"T-{suffix}", slug=f"t-{suffix}", is_active=is_active)
    db.add(t); db.flush()
    return t


def _mk_user(db: Session, *, role: UserRole, tenant: Tenant | None) -> User:
    u = User(
        email=f"u-{uuid.uuid4().hex[:6]}@tenantcms.io",
        hashed_password="x",
        role=role,
        tenant_id=tenant.id if tenant else None,
    )
    db.add(u); db.flush()
    return u


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def tenant_a(db: Session) -> Tenant:
    return _mk_tenant(db)


@pytest.fixture()
def tenant_b(db: Session) -> Tenant:
    return _mk_tenant(db)


@pytest.fixture()
def ctx_a(tenant_a: Tenant) -> TenantContext:
    return TenantContext(tenant_id=tenant_a.id)


@pytest.fixture()
def ctx_b(tenant_b: Tenant) -> TenantContext:
    return TenantContext(tenant_id=tenant_b.id)


@pytest.fixture()
def super_admin(db: Session) -> User:
    return _mk_user(db, role=UserRole.super_admin, tenant=None)


@pytest.fixture()
def admin_a(db: Session, tenant_a: Tenant) -> User:
    return _mk_user(db, role=UserRole.tenant_admin, tenant=tenant_a)


@pytest.fixture()
def editor_a(db: Session, tenant_a: Tenant) -> User:
    return _mk_user(db, role=UserRole.editor, tenant=tenant_a)


@pytest.fixture()
def admin_b(db: Session, tenant_b: Tenant) -> User:
    return _mk_user(db, role=UserRole.tenant_admin, tenant=tenant_b)


@pytest.fixture()
def system_types(db: Session):
    types = seed_system_component_types(db)
    db.commit()
    return {ct.slug: ct for ct in types}


@pytest.fixture()
def headers_for():
    return auth_headers


@pytest.fixture()
def make_tenant(db: Session):
    def _make(**kw) -> Tenant:
        return _mk_tenant(db, **kw)
    return _make
