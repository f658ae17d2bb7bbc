# tenantcms/api/v1/endpoints/catalog.py
# Generic list + reorder over the orderable catalogue entities
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_tenant_context
from tenantcms.repositories.base import transaction
from tenantcms.repositories.catalog import get_catalog_repository
from tenantcms.schemas.admin import CatalogPageOut, ReorderIn
from tenantcms.tenancy.context import TenantContext

router = APIRouter(prefix="/catalog", tags=["catalog"])

_RESERVED_PARAMS = {"page", "per_page", "search", "sort"}


def _row(obj) -> Dict[str, Any]:
    return jsonable_encoder({c.key: getattr(obj, c.key) for c in obj.__table__.columns})


def _filters_from_query(request: Request) -> Dict[str, Any]:
    """Every non-reserved query param is a column filter; repeated params mean IN.
    Values stay strings here, the repository casts them by column type."""
    filters: Dict[str, Any] = {}
    for key in request.query_params.keys():
        if key in _RESERVED_PARAMS or key in filters:
            continue
        values = request.query_params.getlist(key)
        filters[key] = values if len(values) > 1 else values[0]
    return filters


@router.get("/{entity}", response_model=CatalogPageOut)
def list_entities(
    entity: str,
    request: Request,
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    repo = get_catalog_repository(entity)
    result = repo.paginate(
        db, ctx.tenant_only(),
        page=page, per_page=per_page, search=search, sort=sort,
        filters=_filters_from_query(request),
    )
    return CatalogPageOut(
        items=[_row(o) for o in result.items],
        total=result.total, page=result.page, per_page=result.per_page, pages=result.pages,
    )


@router.post("/{entity}/reorder", response_model=List[Dict[str, Any]])
def reorder_entities(
    entity: str,
    payload: ReorderIn,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_tenant_context),
):
    repo = get_catalog_repository(entity)
    with transaction(db):
        items = repo.update_order(db, ctx.tenant_only(), payload.ids)
    return [_row(o) for o in items]
