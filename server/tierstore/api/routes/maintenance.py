from typing import Optional

from fastapi import APIRouter, Depends

from tierstore.dependencies import current_user, optimization_engine, retention_manager
from tierstore.models import (
    OptimizeRequest,
    OptimizeResponse,
    RetentionCleanupRequest,
    RetentionCleanupResponse,
    VersionStatistics,
)


router = APIRouter()


@router.post("/optimize-all", response_model=OptimizeResponse)
def optimize_all(
    request: Optional[OptimizeRequest] = None,
    user_id: str = Depends(current_user),
) -> OptimizeResponse:
    """Optimize every file the user owns."""
    request = request or OptimizeRequest()
    return optimization_engine.optimize_user(
        user_id,
        days_threshold=request.days_threshold,
        target_storage_class=request.target_storage_class,
        skip_active_version=request.skip_active_version,
    )


@router.post("/cleanup", response_model=RetentionCleanupResponse)
def cleanup_versions(
    request: Optional[RetentionCleanupRequest] = None,
    user_id: str = Depends(current_user),
) -> RetentionCleanupResponse:
    tier = request.tier if request is not None else None
    return retention_manager.cleanup(user_id, tier)


@router.get("/statistics", response_model=VersionStatistics)
def version_statistics(user_id: str = Depends(current_user)) -> VersionStatistics:
    return retention_manager.statistics(user_id)
