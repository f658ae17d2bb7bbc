# tenantcms/services/component_registry.py
# Registry of component types (system + tenant), content validation and defaults
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from pydantic import ValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from tenantcms.content_registry import build_content_schema
from tenantcms.core.errors import Conflict, InvalidArgument, NotFound
from tenantcms.models.content import ComponentType
from tenantcms.repositories.content import component_types
from tenantcms.schemas.components import ComponentTypeCreate, ComponentTypeUpdate
from tenantcms.tenancy.context import TenantContext

log = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)


def _pydantic_errors(e: ValidationError) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for err in e.errors():
        key = ".".join(str(p) for p in err.get("loc", ())) or "__root__"
        out.setdefault(key, []).append(err.get("msg", "invalid"))
    return out


def _parse(model, payload):
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidArgument("Invalid component type definition", errors=_pydantic_errors(e)) from e


# -------- lookups --------
def list_visible(db: Session, ctx: TenantContext, *, active_only: bool = False) -> list[ComponentType]:
    filters = {"is_active": True} if active_only else None
    return component_types.list_all(db, ctx.tenant_and_system(), filters=filters)


def get_visible(db: Session, ctx: TenantContext, component_type_id: int) -> ComponentType:
    return component_types.get(db, ctx.tenant_and_system(), component_type_id)


def resolve(db: Session, ctx: TenantContext, ref: int | str) -> ComponentType:
    """By id, or by slug (case-insensitive) within tenant + system types."""
    if isinstance(ref, int) or (isinstance(ref, str) and ref.isdigit()):
        return get_visible(db, ctx, int(ref))
    ct = db.scalar(
        component_types.select(ctx.tenant_and_system())
        .where(func.lower(ComponentType.slug) == ref.lower())
        .order_by(ComponentType.tenant_id.is_(None).desc())
        .limit(1)
    )
    if ct is None:
        raise NotFound(f"Component type '{ref}' not found")
    return ct


def _slug_taken(db: Session, *, slug: str, tenant_id: int | None, exclude_id: int | None = None) -> bool:
    """
    System slugs are reserved for every tenant. A tenant slug only clashes with
    system types and that tenant's own types. A system slug clashes with anything.
    """
    stmt = select(ComponentType.id).where(func.lower(ComponentType.slug) == slug.lower())
    if tenant_id is not None:
        stmt = stmt.where(or_(ComponentType.tenant_id.is_(None), ComponentType.tenant_id == tenant_id))
    if exclude_id is not None:
        stmt = stmt.where(ComponentType.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


# -------- writes --------
def create(db: Session, ctx: TenantContext, definition: ComponentTypeCreate | Mapping[str, Any]) -> ComponentType:
    payload = _parse(ComponentTypeCreate, definition)
    if _slug_taken(db, slug=payload.slug, tenant_id=ctx.tenant_id):
        raise Conflict(f"Slug '{payload.slug}' already in use", errors={"slug": ["already in use"]})

    ct = ComponentType(
        tenant_id=ctx.tenant_id,
        slug=payload.slug,
        name=payload.name,
        description=payload.description,
        icon=payload.icon,
        fields=[f.to_storage() for f in payload.fields],
        default_content=dict(payload.default_content or {}),
        default_styles=payload.default_styles,
        is_active=payload.is_active,
        order=payload.order,
        is_system=False,   # only the seeding path creates system types
    )
    component_types.add(db, ct)
    log.info("component type %s created for tenant %s", ct.slug, ctx.tenant_id)
    return ct


def seed_system_type(db: Session, definition: ComponentTypeCreate | Mapping[str, Any]) -> ComponentType:
    """Insert or refresh a system-wide type, keyed by slug. Idempotent."""
    payload = _parse(ComponentTypeCreate, definition)
    ct = db.scalar(
        select(ComponentType).where(
            ComponentType.tenant_id.is_(None),
            func.lower(ComponentType.slug) == payload.slug.lower(),
        )
    )
    if ct is None:
        if _slug_taken(db, slug=payload.slug, tenant_id=None):
            raise Conflict(f"Slug '{payload.slug}' already used by a tenant type")
        ct = ComponentType(tenant_id=None, slug=payload.slug, is_system=True, is_active=payload.is_active)
        db.add(ct)
    ct.name = payload.name
    ct.description = payload.description
    ct.icon = payload.icon
    ct.fields = [f.to_storage() for f in payload.fields]
    ct.default_content = dict(payload.default_content or {})
    ct.default_styles = payload.default_styles
    ct.order = payload.order
    ct.is_system = True
    db.flush()
    return ct


def update(
    db: Session,
    ctx: TenantContext,
    component_type_id: int,
    changes: ComponentTypeUpdate | Mapping[str, Any],
) -> ComponentType:
    payload = _parse(ComponentTypeUpdate, changes)
    ct = get_visible(db, ctx, component_type_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("slug") is not None and data["slug"] != ct.slug:
        if _slug_taken(db, slug=data["slug"], tenant_id=ct.tenant_id, exclude_id=ct.id):
            raise Conflict(f"Slug '{data['slug']}' already in use", errors={"slug": ["already in use"]})
    if payload.fields is not None:
        data["fields"] = [f.to_storage() for f in payload.fields]

    for key, value in data.items():
        if value is None and key in {"slug", "name", "fields", "is_active", "order", "default_content"}:
            continue
        setattr(ct, key, value)
    db.flush()
    return ct


def delete(db: Session, ctx: TenantContext, component_type_id: int) -> None:
    ct = get_visible(db, ctx, component_type_id)
    if ct.is_system:
        raise Conflict("System component types cannot be deleted")
    component_types.delete(db, ct)
    log.info("component type %s deleted by tenant %s", ct.slug, ctx.tenant_id)


def toggle_active(db: Session, ctx: TenantContext, component_type_id: int) -> ComponentType:
    ct = get_visible(db, ctx, component_type_id)
    ct.is_active = not ct.is_active
    db.flush()
    return ct


# -------- content --------
def apply_defaults(component_type: ComponentType, content: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fill absent keys from default_content, then from each field's default."""
    out = dict(content or {})
    for key, value in (component_type.default_content or {}).items():
        if key not in out:
            out[key] = copy.deepcopy(value)
    for spec in component_type.fields or []:
        name = spec.get("name")
        if name and name not in out and spec.get("default") is not None:
            out[name] = copy.deepcopy(spec["default"])
    return out


def validate_content(component_type: ComponentType, content: Mapping[str, Any] | None) -> ValidationResult:
    """
    Best-effort check of a section's content against the type's fields.
    Required fields must be present and non-empty, enumerated fields must use a
    declared option, declared types are checked. Extra keys are tolerated.
    """
    fields = component_type.fields or []
    data = dict(content or {})
    errors: dict[str, list[str]] = {}

    for spec in fields:
        name = spec.get("name")
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            if spec.get("required"):
                errors.setdefault(name, []).append("This field is required.")
            # empty optional values are not type-checked
            data.pop(name, None)

    schema = build_content_schema(fields, enforce_required=False)
    for err in Draft202012Validator(schema).iter_errors(data):
        path = ".".join(str(p) for p in err.path) or "__root__"
        errors.setdefault(path, []).append(err.message)

    return ValidationResult(valid=not errors, errors=errors)
