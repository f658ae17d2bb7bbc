# tenantcms/schemas/pages.py
# Pydantic requests/responses for Pages and Sections
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .components import ValidationResultOut

SLUG_PATTERN = r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$"


# ---------- Page ----------
class PageCreate(BaseModel):
    slug: str = Field(..., max_length=128, pattern=SLUG_PATTERN)
    title: str = Field(..., max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    is_published: bool = False


class PageUpdate(BaseModel):
    slug: Optional[str] = Field(None, max_length=128, pattern=SLUG_PATTERN)
    title: Optional[str] = Field(None, max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    order: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(extra="ignore")


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    tenant_id: int
    slug: str
    title: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime] = None
    order: int


class PageListOut(BaseModel):
    items: List[PageOut]
    total: int
    page: int
    per_page: int
    pages: int


class DuplicatePageIn(BaseModel):
    new_slug: Optional[str] = Field(None, max_length=128, pattern=SLUG_PATTERN)


# ---------- Section ----------
class SectionCreate(BaseModel):
    page_id: int
    # id or slug of a visible component type
    component_type: int | str
    content: Dict[str, Any] = Field(default_factory=dict)
    styles: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    is_published: bool = False


class SectionUpdate(BaseModel):
    content: Optional[Dict[str, Any]] = None
    styles: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    is_published: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")


class SectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    tenant_id: int
    page_id: int
    component_type: str
    content: Dict[str, Any]
    styles: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    order: int
    is_published: bool


class SectionWriteOut(BaseModel):
    section: SectionOut
    validation: ValidationResultOut


class ReorderSectionsIn(BaseModel):
    page_id: int
    sections: List[int]


class MoveSectionIn(BaseModel):
    page_id: int
