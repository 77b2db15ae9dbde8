from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tierstore.dependencies import billing_ledger, current_user, version_catalog
from tierstore.models import BillingSummary, CostBreakdownResponse, StorageClassPricing
from tierstore.pricing import pricing_table


router = APIRouter()


@router.get("/costs/breakdown", response_model=CostBreakdownResponse)
def cost_breakdown(user_id: str = Depends(current_user)) -> CostBreakdownResponse:
    return version_catalog.aggregate_cost_by_storage_class(user_id)


@router.get("/costs/pricing", response_model=list[StorageClassPricing])
def storage_class_pricing() -> list[StorageClassPricing]:
    return pricing_table()


@router.get("/billing/summary", response_model=BillingSummary)
def billing_summary(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    user_id: str = Depends(current_user),
) -> BillingSummary:
    return billing_ledger.summarize(user_id, start, end)
