from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.concurrency import run_in_threadpool

from tierstore.dependencies import current_user, optimization_engine, version_catalog
from tierstore.models import (
    ChangeStorageClassRequest,
    DeleteVersionResult,
    OptimizeRequest,
    OptimizeResponse,
    RestoreResult,
    StorageClass,
    StorageClassChangeResult,
    UpdateCommentRequest,
    VersionHistory,
    VersionRecord,
)


router = APIRouter()


@router.get("/{file_id}/versions", response_model=VersionHistory)
def list_versions(file_id: str, user_id: str = Depends(current_user)) -> VersionHistory:
    return version_catalog.list_versions(user_id, file_id)


@router.post("/{file_id}/versions", response_model=VersionRecord, status_code=status.HTTP_201_CREATED)
async def create_version(
    file_id: str,
    request: Request,
    storage_class: StorageClass = Query(StorageClass.STANDARD),
    comment: Optional[str] = Query(None, max_length=1000),
    user_id: str = Depends(current_user),
) -> VersionRecord:
    data = await request.body()
    return await run_in_threadpool(
        version_catalog.create_version, user_id, file_id, data, storage_class, comment, user_id
    )


@router.put("/{file_id}/versions/{version_id}/restore", response_model=RestoreResult)
def restore_version(file_id: str, version_id: str, user_id: str = Depends(current_user)) -> RestoreResult:
    return version_catalog.restore_version(user_id, file_id, version_id, actor=user_id)


@router.delete("/{file_id}/versions/{version_id}", response_model=DeleteVersionResult)
def delete_version(file_id: str, version_id: str, user_id: str = Depends(current_user)) -> DeleteVersionResult:
    return version_catalog.delete_version(user_id, file_id, version_id, actor=user_id)


@router.patch("/{file_id}/versions/{version_id}", response_model=VersionRecord)
def update_version_comment(
    file_id: str,
    version_id: str,
    request: UpdateCommentRequest,
    user_id: str = Depends(current_user),
) -> VersionRecord:
    return version_catalog.update_version_comment(user_id, file_id, version_id, request.comment)


@router.put("/{file_id}/versions/{version_id}/storage-class", response_model=StorageClassChangeResult)
def change_version_storage_class(
    file_id: str,
    version_id: str,
    request: ChangeStorageClassRequest,
    user_id: str = Depends(current_user),
) -> StorageClassChangeResult:
    return version_catalog.change_version_storage_class(user_id, file_id, version_id, request.storage_class)


@router.post("/{file_id}/versions/optimize", response_model=OptimizeResponse)
def optimize_versions(
    file_id: str,
    request: OptimizeRequest,
    user_id: str = Depends(current_user),
) -> OptimizeResponse:
    return optimization_engine.optimize_versions(
        user_id,
        file_id,
        days_threshold=request.days_threshold,
        target_storage_class=request.target_storage_class,
        skip_active_version=request.skip_active_version,
    )
