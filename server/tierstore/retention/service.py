from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
from typing import Callable, Optional, Union

from tierstore.catalog import VersionCatalog
from tierstore.costing import CostCalculator
from tierstore.errors import InvalidArgumentError, TierStoreError
from tierstore.models import (
    CleanedVersionResult,
    FileRecord,
    RetentionCleanupResponse,
    RetentionTier,
    VersionRecord,
    VersionStatistics,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RetentionPolicy:
    tier: RetentionTier
    max_versions: Optional[int]  # None keeps any number of versions
    auto_delete_after_days: int


RETENTION_POLICIES: dict[RetentionTier, RetentionPolicy] = {
    RetentionTier.FREE: RetentionPolicy(RetentionTier.FREE, 3, 30),
    RetentionTier.PRO: RetentionPolicy(RetentionTier.PRO, 10, 90),
    RetentionTier.BUSINESS: RetentionPolicy(RetentionTier.BUSINESS, None, 365),
}


def resolve_retention_tier(value: Union[RetentionTier, str]) -> RetentionTier:
    if isinstance(value, RetentionTier):
        return value
    try:
        return RetentionTier(str(value).strip().upper())
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown retention tier '{value}'.",
            details={"allowed": [tier.value for tier in RetentionTier]},
        ) from None


class RetentionManager:
    """
    Applies per-tier version retention and reports version statistics.

    A non-active version is removed when it is older than the tier's
    ``auto_delete_after_days``, or when the file holds more versions than
    ``max_versions`` allows (oldest first). The active version is never
    selected. Every removal goes through ``VersionCatalog.delete_version``,
    one version at a time; a failed removal is recorded and the run
    continues.
    """

    def __init__(
        self,
        catalog: VersionCatalog,
        costs: Optional[CostCalculator] = None,
        clock: Callable[[], datetime] = _utcnow,
        default_tier: Union[RetentionTier, str] = RetentionTier.FREE,
    ) -> None:
        self._catalog = catalog
        self._costs = costs or CostCalculator()
        self._clock = clock
        self.default_tier = resolve_retention_tier(default_tier)

    def plan(self, file: FileRecord, policy: RetentionPolicy, now: datetime) -> list[tuple[VersionRecord, str]]:
        """Versions of ``file`` the policy would remove, oldest first, with the reason."""
        ordered = sorted(file.versions, key=lambda version: (version.created_at, version.version_number))
        cutoff = timedelta(days=policy.auto_delete_after_days)
        selected: list[tuple[VersionRecord, str]] = []
        remaining = len(ordered)

        for version in ordered:
            if version.is_active:
                continue
            if now - version.created_at > cutoff:
                selected.append((version, "age"))
                remaining -= 1
            elif policy.max_versions is not None and remaining > policy.max_versions:
                selected.append((version, "count"))
                remaining -= 1
        return selected

    def cleanup(
        self, user_id: str, tier: Union[RetentionTier, str, None] = None
    ) -> RetentionCleanupResponse:
        policy = RETENTION_POLICIES[resolve_retention_tier(tier) if tier is not None else self.default_tier]
        now = self._clock()
        results: list[CleanedVersionResult] = []

        for file in self._catalog.snapshot(user_id).files():
            for version, reason in self.plan(file, policy, now):
                saved = self._costs.estimate_version_cost(version)
                try:
                    self._catalog.delete_version(user_id, file.file_id, version.version_id, actor="retention")
                except TierStoreError as exc:
                    logger.warning(
                        "Could not remove version %s of file %s under %s retention: %s",
                        version.version_id,
                        file.file_id,
                        policy.tier.value,
                        exc,
                    )
                    results.append(self._result(file, version, reason, 0, 0.0, error=exc.message))
                    continue
                results.append(self._result(file, version, reason, version.size_bytes, saved))

        cleaned = [result for result in results if result.success]
        response = RetentionCleanupResponse(
            user_id=user_id,
            tier=policy.tier,
            max_versions=policy.max_versions,
            auto_delete_after_days=policy.auto_delete_after_days,
            cleaned_count=len(cleaned),
            failed_count=len(results) - len(cleaned),
            freed_bytes=sum(result.freed_bytes for result in cleaned),
            saved_cost=sum(result.saved_cost for result in cleaned),
            results=results,
        )
        logger.info(
            "Retention cleanup (%s) for user %s: %d removed, %d failed, %d bytes freed",
            policy.tier.value,
            user_id,
            response.cleaned_count,
            response.failed_count,
            response.freed_bytes,
        )
        return response

    def statistics(self, user_id: str) -> VersionStatistics:
        files = self._catalog.snapshot(user_id).files()
        breakdown = self._costs.aggregate_by_storage_class(files)
        total_versions = sum(len(file.versions) for file in files)
        return VersionStatistics(
            user_id=user_id,
            total_files=len(files),
            total_versions=total_versions,
            average_versions_per_file=total_versions / len(files) if files else 0.0,
            total_bytes=sum(entry.total_bytes for entry in breakdown.values()),
            total_monthly_cost=sum(entry.total_cost for entry in breakdown.values()),
            breakdown=breakdown,
        )

    def _result(
        self,
        file: FileRecord,
        version: VersionRecord,
        reason: str,
        freed_bytes: int,
        saved_cost: float,
        error: Optional[str] = None,
    ) -> CleanedVersionResult:
        return CleanedVersionResult(
            file_id=file.file_id,
            file_name=file.original_name,
            version_id=version.version_id,
            version_number=version.version_number,
            reason=reason,
            freed_bytes=freed_bytes,
            saved_cost=saved_cost,
            success=error is None,
            error=error,
        )
