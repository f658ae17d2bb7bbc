# tenantcms/deps/auth.py
from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from tenantcms.core.errors import Forbidden, Unauthorized
from tenantcms.core.logging import tenant_id_var
from tenantcms.db.session import get_db
from tenantcms.models.auth import User, UserRole
from tenantcms.security.jwt import decode_token
from tenantcms.services.tenant_context import build_tenant_context
from tenantcms.tenancy.context import TenantContext

# Reusable HTTP bearer scheme (non-fatal if header is missing)
_bearer = HTTPBearer(auto_error=False)


def _load_user_from_sub(db: Session, sub: str | int | None) -> Optional[User]:
    try:
        uid = int(sub)
    except (TypeError, ValueError):
        return None
    user = db.get(User, uid)
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    db: Session = Depends(get_db),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> User:
    if not creds or not creds.credentials:
        raise Unauthorized("Authentication required")
    try:
        payload = decode_token(creds.credentials)
    except ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except JWTError:
        raise Unauthorized("Invalid token")

    user = _load_user_from_sub(db, payload.get("sub"))
    if not user:
        raise Unauthorized("User not found or inactive")
    return user


def _resolve_tenant_context(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TenantContext:
    """The only place request session state turns into a tenant context."""
    return build_tenant_context(db, current_user, request.session)


async def get_tenant_context(ctx: TenantContext = Depends(_resolve_tenant_context)) -> TenantContext:
    # set in the request task: sync dependencies run on a copied context
    tenant_id_var.set(ctx.tenant_id)
    return ctx


def require_roles(*roles: UserRole) -> Callable:
    """
    Usage:
        @router.post(..., dependencies=[Depends(require_roles(UserRole.tenant_admin))])
    Super admins always pass.
    """
    allowed = set(roles)

    def _dep(current_user: User = Depends(get_current_user)) -> User:
        if current_user.is_super_admin or current_user.role in allowed:
            return current_user
        raise Forbidden("Insufficient role")

    return _dep


def require_super_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_super_admin:
        raise Forbidden("Super admin only")
    return current_user
