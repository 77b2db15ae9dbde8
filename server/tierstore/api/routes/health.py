from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from tierstore import __version__
from tierstore.core.settings import get_settings


router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
    environment: str
    storage_bucket: str
    catalog_db_path: str
    timestamp: str


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app=settings.app_name,
        version=__version__,
        environment=settings.environment,
        storage_bucket=settings.storage_bucket,
        catalog_db_path=settings.catalog_db_path,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
