from datetime import datetime, timezone
import logging
from typing import Any, Callable, Optional
import uuid

from tierstore.errors import NotFoundError
from tierstore.models import (
    BillingActivity,
    BillingActivityType,
    BillingLedgerDocument,
    BillingSummary,
    BillingTypeSummary,
)
from tierstore.state import BILLING_RECORD, CatalogStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BillingLedger:
    """Append-only per-user record of chargeable operations."""

    def __init__(self, store: CatalogStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store = store
        self._clock = clock

    def record(
        self,
        user_id: str,
        activity_type: BillingActivityType,
        cost: float = 0.0,
        metadata: Optional[dict[str, Any]] = None,
    ) -> BillingActivity:
        activity = BillingActivity(
            activity_id=str(uuid.uuid4()),
            timestamp=self._clock(),
            type=activity_type,
            cost=max(cost, 0.0),
            metadata=metadata or {},
        )
        with self._store.user_lock(user_id):
            ledger = self._load(user_id)
            ledger.activities.append(activity)
            self._store.write_user_record(user_id, BILLING_RECORD, ledger.model_dump(mode="json"))
        logger.debug("Billing %s for user %s: $%.6f", activity_type.value, user_id, activity.cost)
        return activity

    def activities(self, user_id: str) -> list[BillingActivity]:
        return list(self._load(user_id).activities)

    def summarize(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> BillingSummary:
        start = _as_utc(start)
        end = _as_utc(end)
        selected = [
            activity
            for activity in self._load(user_id).activities
            if (start is None or activity.timestamp >= start)
            and (end is None or activity.timestamp <= end)
        ]

        breakdown: dict[BillingActivityType, BillingTypeSummary] = {}
        for activity in selected:
            entry = breakdown.setdefault(activity.type, BillingTypeSummary())
            entry.count += 1
            entry.cost += activity.cost

        return BillingSummary(
            user_id=user_id,
            total_cost=sum(activity.cost for activity in selected),
            activity_count=len(selected),
            breakdown=breakdown,
        )

    def _load(self, user_id: str) -> BillingLedgerDocument:
        try:
            raw = self._store.read_user_record(user_id, BILLING_RECORD)
        except NotFoundError:
            return BillingLedgerDocument(user_id=user_id)
        return BillingLedgerDocument.model_validate(raw)
