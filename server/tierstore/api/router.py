from fastapi import APIRouter

from tierstore.api.routes.admin import router as admin_router
from tierstore.api.routes.bulk import router as bulk_router
from tierstore.api.routes.costs import router as costs_router
from tierstore.api.routes.files import router as files_router
from tierstore.api.routes.folders import router as folders_router
from tierstore.api.routes.health import router as health_router
from tierstore.api.routes.maintenance import router as maintenance_router
from tierstore.api.routes.versions import router as versions_router


api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(files_router, prefix="/files", tags=["files"])
api_router.include_router(versions_router, prefix="/files", tags=["versions"])
api_router.include_router(maintenance_router, prefix="/versions", tags=["versions"])
api_router.include_router(folders_router, prefix="/folders", tags=["folders"])
api_router.include_router(bulk_router, prefix="/bulk", tags=["bulk"])
api_router.include_router(costs_router, tags=["costs"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
