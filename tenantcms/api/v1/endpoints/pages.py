# tenantcms/api/v1/endpoints/pages.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_tenant_context
from tenantcms.repositories.base import transaction
from tenantcms.schemas.pages import (
    DuplicatePageIn, PageCreate, PageListOut, PageOut, PageUpdate, SectionOut,
)
from tenantcms.services import page_composition as pc
from tenantcms.tenancy.context import TenantContext

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("", response_model=PageListOut)
def list_pages(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None),
    is_published: Optional[bool] = Query(None),
    sort: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    result = pc.list_pages(
        db, ctx, page=page, per_page=per_page, search=search,
        filters={"is_published": is_published}, sort=sort,
    )
    return PageListOut(
        items=[PageOut.model_validate(p) for p in result.items],
        total=result.total, page=result.page, per_page=result.per_page, pages=result.pages,
    )


@router.post("", response_model=PageOut, status_code=201)
def create_page(
    payload: PageCreate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        page = pc.create_page(db, ctx, **payload.model_dump())
    return page


@router.get("/{page_id}", response_model=PageOut)
def get_page(page_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    return pc.get_page(db, ctx, page_id)


@router.put("/{page_id}", response_model=PageOut)
def update_page(
    page_id: int,
    payload: PageUpdate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        page = pc.update_page(db, ctx, page_id, payload.model_dump(exclude_unset=True))
    return page


@router.delete("/{page_id}", status_code=204)
def delete_page(page_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        pc.delete_page(db, ctx, page_id)
    return Response(status_code=204)


@router.get("/{page_id}/sections", response_model=List[SectionOut])
def list_page_sections(
    page_id: int,
    published_only: bool = Query(False),
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    return pc.list_sections(db, ctx, page_id, published_only=published_only)


@router.post("/{page_id}/toggle-publish", response_model=PageOut)
def toggle_publish(page_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        page = pc.toggle_page_published(db, ctx, page_id)
    return page


@router.post("/{page_id}/duplicate", response_model=PageOut, status_code=201)
def duplicate_page(
    page_id: int,
    payload: Optional[DuplicatePageIn] = None,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    new_slug = payload.new_slug if payload else None
    with transaction(db):
        page = pc.duplicate_page(db, ctx, page_id, new_slug=new_slug)
    return page
