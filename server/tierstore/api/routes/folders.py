from fastapi import APIRouter, Depends, status

from tierstore.dependencies import current_user, version_catalog
from tierstore.models import (
    CreateFolderRequest,
    FolderCostEstimate,
    FolderRecord,
    UpdateFolderRequest,
)


router = APIRouter()


@router.post("", response_model=FolderRecord, status_code=status.HTTP_201_CREATED)
def create_folder(request: CreateFolderRequest, user_id: str = Depends(current_user)) -> FolderRecord:
    return version_catalog.create_folder(user_id, request.name, request.parent_folder_id)


@router.patch("/{folder_id}", response_model=FolderRecord)
def update_folder(
    folder_id: str,
    request: UpdateFolderRequest,
    user_id: str = Depends(current_user),
) -> FolderRecord:
    # An explicit null parent moves the folder to the root; an omitted one leaves it in place.
    if "parent_folder_id" in request.model_fields_set:
        return version_catalog.update_folder(user_id, folder_id, request.name, request.parent_folder_id)
    return version_catalog.update_folder(user_id, folder_id, request.name)


@router.delete("/{folder_id}", response_model=FolderRecord)
def delete_folder(folder_id: str, user_id: str = Depends(current_user)) -> FolderRecord:
    return version_catalog.delete_folder(user_id, folder_id)


@router.get("/{folder_id}/path", response_model=list[FolderRecord])
def folder_path(folder_id: str, user_id: str = Depends(current_user)) -> list[FolderRecord]:
    return version_catalog.folder_path(user_id, folder_id)


@router.get("/{folder_id}/cost", response_model=FolderCostEstimate)
def folder_cost(folder_id: str, user_id: str = Depends(current_user)) -> FolderCostEstimate:
    return version_catalog.estimate_folder_cost(user_id, folder_id)
