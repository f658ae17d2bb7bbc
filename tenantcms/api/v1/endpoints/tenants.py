# tenantcms/api/v1/endpoints/tenants.py
# Privileged tenant listing and the super admin tenant switcher
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from tenantcms.core.errors import Unauthorized
from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_current_user, require_super_admin
from tenantcms.models.auth import Tenant, User
from tenantcms.schemas.admin import ActiveTenantOut, TenantOut
from tenantcms.services import tenant_context

router = APIRouter(prefix="/tenants", tags=["tenants"])
switch_router = APIRouter(prefix="/tenant-switch", tags=["tenants"])


@router.get("", response_model=List[TenantOut])
def list_tenants(
    db: Session = Depends(get_db),
    _: User = Depends(require_super_admin),
    q: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    stmt = select(Tenant).order_by(Tenant.id.asc())
    if q:
        stmt = stmt.where(Tenant.name.icontains(q, autoescape=True))
    return db.execute(stmt.limit(limit).offset(offset)).scalars().all()


def _active_out(user: User, request: Request) -> ActiveTenantOut:
    try:
        active = tenant_context.resolve_active_tenant(user, request.session)
    except Unauthorized:
        # super admin without home tenant and no override
        active = None
    return ActiveTenantOut(
        active_tenant_id=active,
        override_tenant_id=tenant_context.current_override_tenant(user, request.session),
        home_tenant_id=user.tenant_id,
    )


@switch_router.get("/current", response_model=ActiveTenantOut)
def current_tenant(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tenant_context.drop_stale_override(db, current_user, request.session)
    return _active_out(current_user, request)


@switch_router.post("/reset", response_model=ActiveTenantOut)
def reset_tenant(request: Request, current_user: User = Depends(get_current_user)):
    tenant_context.reset_tenant(current_user, request.session)
    return _active_out(current_user, request)


@switch_router.post("/{tenant_id}", response_model=ActiveTenantOut)
def switch_tenant(
    tenant_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tenant_context.switch_tenant(db, principal=current_user, session=request.session, tenant_id=tenant_id)
    return _active_out(current_user, request)
