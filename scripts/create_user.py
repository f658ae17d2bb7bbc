# scripts/create_user.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from sqlalchemy.orm import Session

from tenantcms.db.session import SessionLocal
from tenantcms.models.auth import Tenant, User, UserRole
from tenantcms.services.passwords import hash_password


def upsert_user(
    db: Session,
    *,
    email: str,
    password: str,
    role: UserRole,
    tenant_slug: Optional[str] = None,
    full_name: Optional[str] = None,
) -> User:
    tenant_id = None
    if tenant_slug:
        tenant = db.scalar(select(Tenant).where(Tenant.slug == tenant_slug))
        if not tenant:
            raise SystemExit(f"[ERR] Tenant '{tenant_slug}' not found")
        tenant_id = tenant.id
    if tenant_id is None and role != UserRole.super_admin:
        raise SystemExit("[ERR] Only super_admin users may be created without --tenant")

    user = db.scalar(select(User).where(User.email == email))
    if not user:
        user = User(email=email)
        db.add(user)
    user.hashed_password = hash_password(password)
    user.role = role
    user.tenant_id = tenant_id
    user.full_name = full_name or user.full_name
    user.is_active = True
    db.flush()
    return user


def main():
    ap = argparse.ArgumentParser(description="Create or update a user.")
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.editor.value)
    ap.add_argument("--tenant", dest="tenant_slug", help="Home tenant slug")
    ap.add_argument("--name", dest="full_name")
    args = ap.parse_args()

    db: Session = SessionLocal()
    try:
        u = upsert_user(
            db, email=args.email, password=args.password, role=UserRole(args.role),
            tenant_slug=args.tenant_slug, full_name=args.full_name,
        )
        db.commit()
        print(f"[OK] User id={u.id} email={u.email} role={u.role.value} tenant_id={u.tenant_id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
