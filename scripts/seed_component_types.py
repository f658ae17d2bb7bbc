# scripts/seed_component_types.py
# Seeds (or refreshes) the system component types. Safe to run repeatedly.
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tenantcms.core.logging import configure_logging
from tenantcms.db.session import SessionLocal
from tenantcms.seeds.component_types import seed_system_component_types


def main():
    configure_logging()
    db = SessionLocal()
    try:
        types = seed_system_component_types(db)
        db.commit()
        for ct in types:
            print(f"[OK] {ct.slug:<16} id={ct.id} fields={len(ct.fields or [])}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
