from __future__ import annotations

from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from tenantcms.api.v1.router import api_router
from tenantcms.core.config import create_app
from tenantcms.core.logging import configure_logging
from tenantcms.core.settings import settings

configure_logging(settings.LOG_LEVEL)

app = create_app()
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

# Private API (JWT bearer + session cookie for the tenant override)
app.include_router(api_router, prefix=settings.API_V1_STR)
