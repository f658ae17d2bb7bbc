# scripts/create_tenant.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

# --- Ensure repo root is on sys.path so "tenantcms.*" imports work when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from sqlalchemy.orm import Session

from tenantcms.db.session import SessionLocal
from tenantcms.models.auth import Tenant


def get_or_create_tenant(db: Session, *, name: str, slug: Optional[str] = None, domain: Optional[str] = None) -> Tenant:
    slug = slug or name.lower().replace(" ", "-")
    t = db.scalar(select(Tenant).where(Tenant.slug == slug))
    if t:
        return t
    t = Tenant(name=name, slug=slug, domain=domain)
    db.add(t)
    db.flush()
    return t


def run(name: str, slug: Optional[str] = None, domain: Optional[str] = None) -> None:
    db: Session = SessionLocal()
    try:
        t = get_or_create_tenant(db, name=name, slug=slug, domain=domain)
        db.commit()
        print(f"[OK] Tenant id={t.id} name={t.name} slug={t.slug}")
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(
        description="Create (or get) a tenant by slug.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--name", required=True, help="Tenant name (e.g., Acme Dental)")
    ap.add_argument("--slug", help="Tenant slug (defaults to the lowercased name)")
    ap.add_argument("--domain", help="Custom domain (optional)")
    args = ap.parse_args()
    run(name=args.name, slug=args.slug, domain=args.domain)


if __name__ == "__main__":
    main()
