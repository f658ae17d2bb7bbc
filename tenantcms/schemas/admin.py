# tenantcms/schemas/admin.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from tenantcms.models.auth import UserRole


class TenantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    slug: str
    domain: Optional[str] = None
    is_active: bool


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    role: UserRole
    tenant_id: Optional[int] = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ActiveTenantOut(BaseModel):
    active_tenant_id: Optional[int] = None
    override_tenant_id: Optional[int] = None
    home_tenant_id: Optional[int] = None


class ReorderIn(BaseModel):
    ids: List[int]


class CatalogPageOut(BaseModel):
    items: List[Dict[str, Any]]
    total: int
    page: int
    per_page: int
    pages: int
