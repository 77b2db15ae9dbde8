from fastapi import APIRouter, Depends

from tierstore.dependencies import bulk_coordinator, current_user
from tierstore.models import BulkRequest, BulkResponse


router = APIRouter()


@router.post("", response_model=BulkResponse)
def bulk_execute(request: BulkRequest, user_id: str = Depends(current_user)) -> BulkResponse:
    return bulk_coordinator.execute(user_id, request.operation, request.item_ids, request.storage_class)
