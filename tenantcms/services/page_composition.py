# tenantcms/services/page_composition.py
# Pages and their ordered sections. Section orders on a page are always 0..n-1.
# Functions flush only; callers wrap them in repositories.base.transaction().
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from sqlalchemy.orm import Session

from tenantcms.core.errors import Conflict, InvalidArgument, NotFound
from tenantcms.models.content import Page, Section
from tenantcms.repositories.base import PageResult
from tenantcms.repositories.content import pages, sections
from tenantcms.services import component_registry
from tenantcms.services.component_registry import ValidationResult
from tenantcms.tenancy.context import TenantContext
from tenantcms.utils.payload_guard import enforce_section_content_size

log = logging.getLogger(__name__)

COPY_TITLE_SUFFIX = " (Copy)"
_PAGE_FIELDS = {"slug", "title", "meta_title", "meta_description", "order"}


@dataclass
class SectionWrite:
    section: Section
    validation: ValidationResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================ #
# Pages
# ============================================================================ #
def _slug_in_use(db: Session, ctx: TenantContext, slug: str, *, exclude_id: int | None = None) -> bool:
    stmt = pages.select(ctx.tenant_only()).where(Page.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Page.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def get_page(db: Session, ctx: TenantContext, page_id: int) -> Page:
    return pages.get(db, ctx.tenant_only(), page_id)


def list_pages(
    db: Session,
    ctx: TenantContext,
    *,
    page: int = 1,
    per_page: int | None = None,
    search: str | None = None,
    filters: Mapping[str, Any] | None = None,
    sort: str | None = None,
) -> PageResult[Page]:
    return pages.paginate(db, ctx.tenant_only(), page=page, per_page=per_page, filters=filters, search=search, sort=sort)


def create_page(
    db: Session,
    ctx: TenantContext,
    *,
    slug: str,
    title: str,
    meta_title: str | None = None,
    meta_description: str | None = None,
    is_published: bool = False,
) -> Page:
    if _slug_in_use(db, ctx, slug):
        raise Conflict(f"Page slug '{slug}' already exists", errors={"slug": ["already in use"]})
    page = Page(
        tenant_id=ctx.tenant_id,
        slug=slug,
        title=title,
        meta_title=meta_title,
        meta_description=meta_description,
        is_published=is_published,
        published_at=_utcnow() if is_published else None,
        order=pages.max_order(db, ctx.tenant_only()) + 1,
    )
    return pages.add(db, page)


def update_page(db: Session, ctx: TenantContext, page_id: int, changes: Mapping[str, Any]) -> Page:
    page = get_page(db, ctx, page_id)
    unknown = set(changes) - _PAGE_FIELDS
    if unknown:
        raise InvalidArgument("Unknown page fields", errors={k: ["not updatable"] for k in sorted(unknown)})
    new_slug = changes.get("slug")
    if new_slug and new_slug != page.slug and _slug_in_use(db, ctx, new_slug, exclude_id=page.id):
        raise Conflict(f"Page slug '{new_slug}' already exists", errors={"slug": ["already in use"]})
    for key, value in changes.items():
        if value is None and key in {"slug", "title", "order"}:
            continue
        setattr(page, key, value)
    db.flush()
    return page


def delete_page(db: Session, ctx: TenantContext, page_id: int) -> None:
    page = get_page(db, ctx, page_id)
    pages.delete(db, page)   # sections go with it (cascade)
    log.info("page %s (%s) deleted", page.id, page.slug)


def toggle_page_published(db: Session, ctx: TenantContext, page_id: int) -> Page:
    page = get_page(db, ctx, page_id)
    page.is_published = not page.is_published
    if page.is_published:
        page.published_at = _utcnow()
    db.flush()
    return page


def _next_copy_slug(db: Session, ctx: TenantContext, slug: str) -> str:
    candidate = f"{slug}-copy"
    n = 2
    while _slug_in_use(db, ctx, candidate):
        candidate = f"{slug}-copy-{n}"
        n += 1
    return candidate


def duplicate_page(db: Session, ctx: TenantContext, page_id: int, new_slug: str | None = None) -> Page:
    """
    Clone a page (unpublished, title suffixed) with deep copies of all its
    sections in the same order. Run inside a transaction: all or nothing.
    """
    source = get_page(db, ctx, page_id)
    slug = new_slug or _next_copy_slug(db, ctx, source.slug)
    if _slug_in_use(db, ctx, slug):
        raise Conflict(f"Page slug '{slug}' already exists", errors={"new_slug": ["already in use"]})

    clone = Page(
        tenant_id=source.tenant_id,
        slug=slug,
        title=f"{source.title}{COPY_TITLE_SUFFIX}",
        meta_title=source.meta_title,
        meta_description=source.meta_description,
        is_published=False,
        published_at=None,
        order=pages.max_order(db, ctx.tenant_only()) + 1,
    )
    pages.add(db, clone)

    for index, s in enumerate(_page_sections(db, ctx, source.id)):
        db.add(Section(
            tenant_id=clone.tenant_id,
            page_id=clone.id,
            component_type=s.component_type,
            content=copy.deepcopy(s.content or {}),
            styles=copy.deepcopy(s.styles),
            settings=copy.deepcopy(s.settings),
            is_published=s.is_published,
            order=index,
        ))
    db.flush()
    db.refresh(clone)
    log.info("page %s duplicated as %s (%s)", source.id, clone.id, clone.slug)
    return clone


# ============================================================================ #
# Sections
# ============================================================================ #
def _page_sections(db: Session, ctx: TenantContext, page_id: int) -> list[Section]:
    return sections.list_all(db, ctx.tenant_only(), filters={"page_id": page_id}, sort="order")


def _compact(items: list[Section]) -> None:
    for index, s in enumerate(items):
        if s.order != index:
            s.order = index


def get_section(db: Session, ctx: TenantContext, section_id: int) -> Section:
    return sections.get(db, ctx.tenant_only(), section_id)


def list_sections(db: Session, ctx: TenantContext, page_id: int, *, published_only: bool = False) -> list[Section]:
    get_page(db, ctx, page_id)
    items = _page_sections(db, ctx, page_id)
    if published_only:
        items = [s for s in items if s.is_published]
    return items


def _validated(ct, content: Mapping[str, Any] | None) -> tuple[dict, ValidationResult]:
    data = dict(content or {})
    enforce_section_content_size(data)
    result = component_registry.validate_content(ct, data)
    if not result.valid:
        log.warning("section content for '%s' has validation issues: %s", ct.slug, result.errors)
    return data, result


def append_section(
    db: Session,
    ctx: TenantContext,
    page_id: int,
    component_type: int | str,
    content: Mapping[str, Any] | None = None,
    *,
    styles: dict | None = None,
    settings: dict | None = None,
    is_published: bool = False,
) -> SectionWrite:
    page = get_page(db, ctx, page_id)
    ct = component_registry.resolve(db, ctx, component_type)
    if not ct.is_active:
        raise InvalidArgument(
            f"Component type '{ct.slug}' is inactive",
            errors={"component_type": ["inactive"]},
        )
    data, result = _validated(ct, component_registry.apply_defaults(ct, content))

    section = Section(
        tenant_id=page.tenant_id,
        page_id=page.id,
        component_type=ct.slug,
        content=data,
        styles=styles if styles is not None else copy.deepcopy(ct.default_styles),
        settings=settings,
        is_published=is_published,
        order=len(_page_sections(db, ctx, page.id)),
    )
    sections.add(db, section)
    return SectionWrite(section=section, validation=result)


def update_section(
    db: Session,
    ctx: TenantContext,
    section_id: int,
    *,
    content: Mapping[str, Any] | None = None,
    styles: dict | None = None,
    settings: dict | None = None,
    is_published: bool | None = None,
) -> SectionWrite:
    section = get_section(db, ctx, section_id)
    if content is not None:
        # types may have been deactivated or deleted since; existing sections stay editable
        try:
            ct = component_registry.resolve(db, ctx, section.component_type)
        except NotFound:
            log.warning("section %s references unknown component type '%s'", section.id, section.component_type)
            data = dict(content)
            enforce_section_content_size(data)
            result = ValidationResult(valid=True)
        else:
            data, result = _validated(ct, content)
        section.content = data
    else:
        result = ValidationResult(valid=True)
    if styles is not None:
        section.styles = styles
    if settings is not None:
        section.settings = settings
    if is_published is not None:
        section.is_published = is_published
    db.flush()
    return SectionWrite(section=section, validation=result)


def delete_section(db: Session, ctx: TenantContext, section_id: int) -> None:
    section = get_section(db, ctx, section_id)
    page_id = section.page_id
    sections.delete(db, section)
    _compact(_page_sections(db, ctx, page_id))
    db.flush()


def reorder_sections(db: Session, ctx: TenantContext, page_id: int, ordered_ids: Iterable[int]) -> list[Section]:
    """
    ``ordered_ids`` must be exactly the page's section ids in their new order.
    Anything else (foreign, duplicated or missing ids) is rejected before any write.
    """
    get_page(db, ctx, page_id)
    ids = [int(i) for i in ordered_ids]
    current = _page_sections(db, ctx, page_id)
    by_id = {s.id: s for s in current}

    errors: dict[str, list[str]] = {}
    if len(set(ids)) != len(ids):
        errors.setdefault("sections", []).append("duplicate ids")
    foreign = [i for i in ids if i not in by_id]
    if foreign:
        errors.setdefault("sections", []).append(f"not on this page: {foreign}")
    missing = [i for i in by_id if i not in ids]
    if missing:
        errors.setdefault("sections", []).append(f"missing ids: {missing}")
    if errors:
        raise InvalidArgument("Section ids must be a permutation of the page's sections", errors=errors)

    for index, id_ in enumerate(ids):
        by_id[id_].order = index
    db.flush()
    return [by_id[i] for i in ids]


def _move(db: Session, ctx: TenantContext, section_id: int, delta: int) -> Section:
    section = get_section(db, ctx, section_id)
    items = _page_sections(db, ctx, section.page_id)
    _compact(items)
    index = items.index(section)
    target = index + delta
    if target < 0 or target >= len(items):
        return section   # already at the boundary
    neighbour = items[target]
    section.order, neighbour.order = neighbour.order, section.order
    db.flush()
    return section


def move_section_up(db: Session, ctx: TenantContext, section_id: int) -> Section:
    return _move(db, ctx, section_id, -1)


def move_section_down(db: Session, ctx: TenantContext, section_id: int) -> Section:
    return _move(db, ctx, section_id, +1)


def duplicate_section(db: Session, ctx: TenantContext, section_id: int) -> Section:
    """Unpublished copy placed right after the source; later sections shift by one."""
    source = get_section(db, ctx, section_id)
    items = _page_sections(db, ctx, source.page_id)
    _compact(items)
    for s in items:
        if s.order > source.order:
            s.order += 1
    clone = Section(
        tenant_id=source.tenant_id,
        page_id=source.page_id,
        component_type=source.component_type,
        content=copy.deepcopy(source.content or {}),
        styles=copy.deepcopy(source.styles),
        settings=copy.deepcopy(source.settings),
        is_published=False,
        order=source.order + 1,
    )
    return sections.add(db, clone)


def toggle_section_published(db: Session, ctx: TenantContext, section_id: int) -> Section:
    section = get_section(db, ctx, section_id)
    section.is_published = not section.is_published
    db.flush()
    return section


def move_section_to_page(db: Session, ctx: TenantContext, section_id: int, target_page_id: int) -> Section:
    """Append the section to another page of the same tenant; both pages stay dense."""
    section = get_section(db, ctx, section_id)
    target = get_page(db, ctx, target_page_id)
    if target.id == section.page_id:
        return section
    source_page_id = section.page_id
    section.order = len(_page_sections(db, ctx, target.id))
    section.page_id = target.id
    db.flush()
    _compact(_page_sections(db, ctx, source_page_id))
    db.flush()
    return section
