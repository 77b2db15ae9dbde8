from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.concurrency import run_in_threadpool

from tierstore.dependencies import current_user, version_catalog
from tierstore.models import (
    CatalogItem,
    DownloadLink,
    FileCostEstimate,
    FileRecord,
    StarRequest,
    StorageClass,
)


router = APIRouter()


@router.post("/upload", response_model=FileRecord, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    name: str = Query(..., min_length=1, max_length=255),
    storage_class: StorageClass = Query(StorageClass.STANDARD),
    parent_folder_id: Optional[str] = Query(None),
    comment: Optional[str] = Query(None, max_length=1000),
    user_id: str = Depends(current_user),
) -> FileRecord:
    """Upload the raw request body. A name already present in the folder gets a new version."""
    data = await request.body()
    return await run_in_threadpool(
        version_catalog.upload_file,
        user_id,
        name,
        data,
        storage_class,
        request.headers.get("content-type"),
        parent_folder_id,
        comment,
    )


@router.get("", response_model=list[CatalogItem])
def list_items(
    parent_folder_id: Optional[str] = Query(None),
    user_id: str = Depends(current_user),
) -> list[CatalogItem]:
    return version_catalog.list_items(user_id, parent_folder_id)


@router.get("/{file_id}", response_model=FileRecord)
def get_file(file_id: str, user_id: str = Depends(current_user)) -> FileRecord:
    return version_catalog.get_file(user_id, file_id)


@router.delete("/{file_id}", response_model=FileRecord)
def delete_file(file_id: str, user_id: str = Depends(current_user)) -> FileRecord:
    return version_catalog.delete_file(user_id, file_id)


@router.patch("/{file_id}/star", response_model=CatalogItem)
def star_item(file_id: str, request: StarRequest, user_id: str = Depends(current_user)) -> CatalogItem:
    return version_catalog.set_starred(user_id, file_id, request.starred)


@router.get("/{file_id}/cost", response_model=FileCostEstimate)
def file_cost(file_id: str, user_id: str = Depends(current_user)) -> FileCostEstimate:
    return version_catalog.estimate_file_cost(user_id, file_id)


@router.get("/{file_id}/download", response_model=DownloadLink)
def download_file(
    file_id: str,
    version_id: Optional[str] = Query(None),
    ttl_seconds: Optional[int] = Query(None, ge=1, le=604800),
    user_id: str = Depends(current_user),
) -> DownloadLink:
    return version_catalog.download_url(user_id, file_id, version_id, ttl_seconds)
