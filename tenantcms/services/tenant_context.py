# tenantcms/services/tenant_context.py
# Resolver: which tenant is active for a principal (home tenant or super admin override)
from __future__ import annotations

import logging
from typing import MutableMapping

from sqlalchemy.orm import Session

from tenantcms.core.errors import Forbidden, NotFound, Unauthorized
from tenantcms.models.auth import Tenant, User
from tenantcms.tenancy.context import TenantContext

log = logging.getLogger(__name__)

SESSION_ACTIVE_TENANT_KEY = "active_tenant"


def _read_override(principal: User, session: MutableMapping | None) -> int | None:
    raw = (session or {}).get(SESSION_ACTIVE_TENANT_KEY)
    if not isinstance(raw, dict):
        return None
    # an override written for someone else is never honoured
    if raw.get("user_id") != principal.id:
        return None
    try:
        return int(raw["tenant_id"])
    except (KeyError, TypeError, ValueError):
        return None


def resolve_active_tenant(principal: User, session: MutableMapping | None) -> int:
    if principal.is_super_admin:
        override = _read_override(principal, session)
        if override is not None:
            return override
    if principal.tenant_id is None:
        raise Unauthorized("No active tenant")
    return int(principal.tenant_id)


def drop_stale_override(db: Session, principal: User, session: MutableMapping | None) -> None:
    """Forget an override whose tenant was deleted or deactivated after the switch."""
    override = current_override_tenant(principal, session)
    if override is None:
        return
    tenant = db.get(Tenant, override)
    if tenant is None or not tenant.is_active:
        session.pop(SESSION_ACTIVE_TENANT_KEY, None)
        log.warning("user %s override to tenant %s dropped: tenant no longer active", principal.id, override)


def build_tenant_context(db: Session, principal: User, session: MutableMapping | None) -> TenantContext:
    drop_stale_override(db, principal, session)
    return TenantContext(tenant_id=resolve_active_tenant(principal, session), user_id=principal.id)


def current_override_tenant(principal: User, session: MutableMapping | None) -> int | None:
    if not principal.is_super_admin:
        return None
    return _read_override(principal, session)


def switch_tenant(db: Session, *, principal: User, session: MutableMapping, tenant_id: int) -> Tenant:
    if not principal.is_super_admin:
        raise Forbidden("Super admin only")
    tenant = db.get(Tenant, tenant_id)
    if not tenant or not tenant.is_active:
        raise NotFound("Tenant not found")
    session[SESSION_ACTIVE_TENANT_KEY] = {"user_id": principal.id, "tenant_id": tenant.id}
    log.info("user %s switched active tenant to %s (%s)", principal.id, tenant.id, tenant.slug)
    return tenant


def reset_tenant(principal: User, session: MutableMapping) -> None:
    if not principal.is_super_admin:
        return
    if session.pop(SESSION_ACTIVE_TENANT_KEY, None) is not None:
        log.info("user %s reset tenant override", principal.id)
