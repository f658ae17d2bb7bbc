# tenantcms/api/v1/endpoints/sections.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_tenant_context
from tenantcms.repositories.base import transaction
from tenantcms.schemas.components import ValidationResultOut
from tenantcms.schemas.pages import (
    MoveSectionIn, ReorderSectionsIn, SectionCreate, SectionOut, SectionUpdate, SectionWriteOut,
)
from tenantcms.services import page_composition as pc
from tenantcms.services.page_composition import SectionWrite
from tenantcms.tenancy.context import TenantContext

router = APIRouter(prefix="/sections", tags=["sections"])


def _write_out(w: SectionWrite) -> SectionWriteOut:
    return SectionWriteOut(
        section=SectionOut.model_validate(w.section),
        validation=ValidationResultOut(valid=w.validation.valid, errors=w.validation.errors),
    )


@router.post("", response_model=SectionWriteOut, status_code=201)
def create_section(
    payload: SectionCreate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        w = pc.append_section(
            db, ctx, payload.page_id, payload.component_type, payload.content,
            styles=payload.styles, settings=payload.settings, is_published=payload.is_published,
        )
    return _write_out(w)


# static paths before /{section_id}
@router.post("/reorder", response_model=List[SectionOut])
def reorder_sections(
    payload: ReorderSectionsIn,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        items = pc.reorder_sections(db, ctx, payload.page_id, payload.sections)
    return items


@router.put("/{section_id}", response_model=SectionWriteOut)
def update_section(
    section_id: int,
    payload: SectionUpdate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        w = pc.update_section(db, ctx, section_id, **payload.model_dump(exclude_unset=True))
    return _write_out(w)


@router.delete("/{section_id}", status_code=204)
def delete_section(section_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        pc.delete_section(db, ctx, section_id)
    return Response(status_code=204)


@router.post("/{section_id}/move-up", response_model=SectionOut)
def move_up(section_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        section = pc.move_section_up(db, ctx, section_id)
    return section


@router.post("/{section_id}/move-down", response_model=SectionOut)
def move_down(section_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        section = pc.move_section_down(db, ctx, section_id)
    return section


@router.post("/{section_id}/duplicate", response_model=SectionOut, status_code=201)
def duplicate(section_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        section = pc.duplicate_section(db, ctx, section_id)
    return section


@router.post("/{section_id}/toggle-publish", response_model=SectionOut)
def toggle_publish(section_id: int, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_tenant_context)):
    with transaction(db):
        section = pc.toggle_section_published(db, ctx, section_id)
    return section


@router.post("/{section_id}/move-to-page", response_model=SectionOut)
def move_to_page(
    section_id: int,
    payload: MoveSectionIn,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    with transaction(db):
        section = pc.move_section_to_page(db, ctx, section_id, payload.page_id)
    return section
