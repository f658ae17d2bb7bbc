# tenantcms/tenancy/context.py
# Explicit tenant context + query scope values threaded into every repository call
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from tenantcms.core.errors import Unauthorized


class ScopeMode(str, Enum):
    tenant_only = "tenant_only"
    tenant_and_system = "tenant_and_system"   # tenant rows plus tenant_id IS NULL rows


@dataclass(frozen=True)
class Scope:
    tenant_id: int
    mode: ScopeMode = ScopeMode.tenant_only

    @property
    def includes_system(self) -> bool:
        return self.mode == ScopeMode.tenant_and_system

    def clause(self, column) -> ColumnElement[bool]:
        if self.includes_system:
            return or_(column.is_(None), column == self.tenant_id)
        return column == self.tenant_id


@dataclass(frozen=True)
class TenantContext:
    """
    Active tenant for the current unit of work. Built once per request by the
    resolver; services and repositories never look at session state.
    """
    tenant_id: int
    user_id: int | None = None

    def __post_init__(self):
        if self.tenant_id is None:
            raise Unauthorized("No active tenant")

    def tenant_only(self) -> Scope:
        return Scope(self.tenant_id, ScopeMode.tenant_only)

    def tenant_and_system(self) -> Scope:
        return Scope(self.tenant_id, ScopeMode.tenant_and_system)
