# tenantcms/core/logging.py
from __future__ import annotations

import logging
from contextvars import ContextVar

ISO_FMT = "%Y-%m-%dT%H:%M:%S%z"

# Set by the tenant context dependency once the active tenant is resolved.
tenant_id_var: ContextVar[int | None] = ContextVar("tenant_id", default=None)


class TenantLogFilter(logging.Filter):
    """Injects the active tenant id into every record (``-`` when unresolved)."""

    def filter(self, record: logging.LogRecord) -> bool:
        tid = tenant_id_var.get()
        record.tenant_id = tid if tid is not None else "-"
        return True


def configure_logging(level: int | str = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s [tenant=%(tenant_id)s] :: %(message)s",
        datefmt=ISO_FMT,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, TenantLogFilter) for f in handler.filters):
            handler.addFilter(TenantLogFilter())
