# tenantcms/api/v1/endpoints/component_types.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_tenant_context, require_roles
from tenantcms.models.auth import UserRole
from tenantcms.repositories.base import transaction
from tenantcms.schemas.components import (
    ComponentTypeCreate, ComponentTypeOut, ComponentTypeUpdate, ContentIn, ValidationResultOut,
)
from tenantcms.services import component_registry
from tenantcms.tenancy.context import TenantContext

router = APIRouter(prefix="/component-types", tags=["component-types"])

_manage = [Depends(require_roles(UserRole.tenant_admin))]


@router.get("", response_model=List[ComponentTypeOut])
def list_component_types(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    return component_registry.list_visible(db, ctx, active_only=active_only)


@router.get("/{component_type_id}", response_model=ComponentTypeOut)
def get_component_type(
    component_type_id: int,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    return component_registry.get_visible(db, ctx, component_type_id)


@router.post("", response_model=ComponentTypeOut, status_code=201, dependencies=_manage)
def create_component_type(
    payload: ComponentTypeCreate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        ct = component_registry.create(db, ctx, payload)
    return ct


@router.put("/{component_type_id}", response_model=ComponentTypeOut, dependencies=_manage)
def update_component_type(
    component_type_id: int,
    payload: ComponentTypeUpdate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        ct = component_registry.update(db, ctx, component_type_id, payload)
    return ct


@router.delete("/{component_type_id}", status_code=204, dependencies=_manage)
def delete_component_type(
    component_type_id: int,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        component_registry.delete(db, ctx, component_type_id)
    return Response(status_code=204)


@router.post("/{component_type_id}/toggle-active", response_model=ComponentTypeOut, dependencies=_manage)
def toggle_component_type(
    component_type_id: int,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        ct = component_registry.toggle_active(db, ctx, component_type_id)
    return ct


@router.post("/{component_type_id}/validate", response_model=ValidationResultOut)
def validate_component_content(
    component_type_id: int,
    payload: ContentIn,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    ct = component_registry.get_visible(db, ctx, component_type_id)
    result = component_registry.validate_content(ct, component_registry.apply_defaults(ct, payload.content))
    return ValidationResultOut(valid=result.valid, errors=result.errors)
