# tenantcms/api/v1/router.py
from fastapi import APIRouter

from tenantcms.api.v1.endpoints import auth as auth_endpoints
from tenantcms.api.v1.endpoints import catalog as catalog_endpoints
from tenantcms.api.v1.endpoints import component_types as component_types_endpoints
from tenantcms.api.v1.endpoints import health
from tenantcms.api.v1.endpoints import pages as pages_endpoints
from tenantcms.api.v1.endpoints import sections as sections_endpoints
from tenantcms.api.v1.endpoints import tenants as tenants_endpoints

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth_endpoints.router, prefix="/auth")

api_router.include_router(tenants_endpoints.router)           # /tenants
api_router.include_router(tenants_endpoints.switch_router)    # /tenant-switch
api_router.include_router(component_types_endpoints.router)   # /component-types
api_router.include_router(pages_endpoints.router)             # /pages
api_router.include_router(sections_endpoints.router)          # /sections
api_router.include_router(catalog_endpoints.router)           # /catalog/{entity}
