# tenantcms/schemas/components.py
# Pydantic: component type definitions (FieldSpec list) and validation results
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tenantcms.content_registry import FieldKind, kind_meta, option_values

SLUG_RE = re.compile(r"^[a-z][a-z0-9_]*$")


class FieldSpec(BaseModel):
    name: str = Field(..., max_length=64)
    label: Optional[str] = Field(None, max_length=128)
    # stored under "type" in ComponentType.fields; "kind" accepted as input alias
    type: FieldKind
    required: bool = False
    default: Any = None
    placeholder: Optional[str] = None
    options: Optional[Dict[str, Any] | List[Any]] = None
    # select fed from a runtime source (e.g. categories) instead of fixed options
    dynamic: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    fields: Optional[List["FieldSpec"]] = None   # repeater sub-fields

    model_config = ConfigDict(extra="allow", populate_by_name=True, use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def _kind_alias(cls, data: Any):
        if isinstance(data, dict) and "type" not in data and "kind" in data:
            data = {**data, "type": data["kind"]}
            data.pop("kind", None)
        return data

    @field_validator("name")
    @classmethod
    def _name_is_slug(cls, v: str) -> str:
        if not SLUG_RE.match(v):
            raise ValueError("field name must match ^[a-z][a-z0-9_]*$")
        return v

    @model_validator(mode="after")
    def _options_for_enumerated(self):
        if kind_meta(self.type).enumerated and not self.dynamic:
            if not option_values(self.options):
                raise ValueError(f"field '{self.name}' of type '{self.type}' requires options")
        return self

    def to_storage(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if self.fields:
            data["fields"] = [f.to_storage() for f in self.fields]
        return data


def _check_unique_names(fields: List[FieldSpec]) -> List[FieldSpec]:
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise ValueError(f"duplicate field name '{f.name}'")
        seen.add(f.name)
    return fields


class ComponentTypeCreate(BaseModel):
    slug: str = Field(..., max_length=64)
    name: str = Field(..., max_length=128)
    description: Optional[str] = Field(None, max_length=512)
    icon: Optional[str] = Field(None, max_length=64)
    fields: List[FieldSpec] = Field(..., min_length=1)
    default_content: Dict[str, Any] = Field(default_factory=dict)
    default_styles: Optional[Dict[str, Any]] = None
    is_active: bool = True
    order: int = 0

    model_config = ConfigDict(extra="ignore")

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: str) -> str:
        if not SLUG_RE.match(v):
            raise ValueError("slug must match ^[a-z][a-z0-9_]*$")
        return v

    @field_validator("fields")
    @classmethod
    def _fields_unique(cls, v: List[FieldSpec]) -> List[FieldSpec]:
        return _check_unique_names(v)


class ComponentTypeUpdate(BaseModel):
    slug: Optional[str] = Field(None, max_length=64)
    name: Optional[str] = Field(None, max_length=128)
    description: Optional[str] = Field(None, max_length=512)
    icon: Optional[str] = Field(None, max_length=64)
    fields: Optional[List[FieldSpec]] = Field(None, min_length=1)
    default_content: Optional[Dict[str, Any]] = None
    default_styles: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not SLUG_RE.match(v):
            raise ValueError("slug must match ^[a-z][a-z0-9_]*$")
        return v

    @field_validator("fields")
    @classmethod
    def _fields_unique(cls, v: Optional[List[FieldSpec]]) -> Optional[List[FieldSpec]]:
        return _check_unique_names(v) if v is not None else v


class ComponentTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    tenant_id: Optional[int]
    slug: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    fields: List[Dict[str, Any]]
    default_content: Dict[str, Any] = Field(default_factory=dict)
    default_styles: Optional[Dict[str, Any]] = None
    is_system: bool
    is_active: bool
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContentIn(BaseModel):
    content: Dict[str, Any] = Field(default_factory=dict)


class ValidationResultOut(BaseModel):
    valid: bool
    errors: Dict[str, List[str]] = Field(default_factory=dict)
