from datetime import datetime, timedelta, timezone
import logging
from typing import Callable, Optional, Union

from tierstore.catalog import VersionCatalog
from tierstore.errors import InvalidArgumentError, TierStoreError
from tierstore.models import (
    BillingActivityType,
    FileRecord,
    OptimizedVersionResult,
    OptimizeResponse,
    StorageClass,
    VersionRecord,
)
from tierstore.pricing import effective_unit_cost, monthly_savings, resolve_storage_class

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OptimizationEngine:
    """
    Moves old, inactive versions into a cheaper storage class.

    A version is eligible when it is not the active version, it is at least
    ``days_threshold`` days old, it is not already in the target class, and
    the target class is strictly cheaper per GB than its current class.
    Each eligible version is changed on its own; a failure on one version
    is recorded and the run continues. Runs only when invoked.

    Calls that leave the threshold or target unset use the engine defaults.
    """

    def __init__(
        self,
        catalog: VersionCatalog,
        clock: Callable[[], datetime] = _utcnow,
        default_days_threshold: int = 30,
        default_target: Union[StorageClass, str] = StorageClass.STANDARD_IA,
    ) -> None:
        self._catalog = catalog
        self._clock = clock
        self.default_days_threshold = default_days_threshold
        self.default_target = resolve_storage_class(default_target)

    def optimize_versions(
        self,
        user_id: str,
        file_id: str,
        days_threshold: Optional[int] = None,
        target_storage_class: Union[StorageClass, str, None] = None,
        skip_active_version: bool = True,
    ) -> OptimizeResponse:
        days_threshold, target = self._validate(days_threshold, target_storage_class, skip_active_version)
        file = self._catalog.get_file(user_id, file_id)
        response = self._optimize_file(user_id, file, days_threshold, target)
        logger.info(
            "Optimized file %s for user %s: %d moved, %d skipped, %d failed, $%.6f/month saved",
            file_id,
            user_id,
            response.optimized_count,
            response.skipped_count,
            response.failed_count,
            response.total_monthly_savings,
        )
        return response

    def optimize_user(
        self,
        user_id: str,
        days_threshold: Optional[int] = None,
        target_storage_class: Union[StorageClass, str, None] = None,
        skip_active_version: bool = True,
    ) -> OptimizeResponse:
        """Run the per-file optimization over every file a user owns."""
        days_threshold, target = self._validate(days_threshold, target_storage_class, skip_active_version)
        total = OptimizeResponse(
            file_id=None,
            target_storage_class=target,
            days_threshold=days_threshold,
            optimized_count=0,
            skipped_count=0,
            failed_count=0,
            total_monthly_savings=0.0,
        )

        for file in self._catalog.snapshot(user_id).files():
            partial = self._optimize_file(user_id, file, days_threshold, target)
            total.optimized_count += partial.optimized_count
            total.skipped_count += partial.skipped_count
            total.failed_count += partial.failed_count
            total.total_monthly_savings += partial.total_monthly_savings
            total.results.extend(partial.results)

        logger.info(
            "Optimized %d versions for user %s ($%.6f/month saved, %d failed)",
            total.optimized_count,
            user_id,
            total.total_monthly_savings,
            total.failed_count,
        )
        return total

    def is_eligible(
        self,
        version: VersionRecord,
        days_threshold: int,
        target: StorageClass,
        now: Optional[datetime] = None,
    ) -> bool:
        now = now or self._clock()
        if version.is_active:
            return False
        if now - version.created_at < timedelta(days=days_threshold):
            return False
        if version.storage_class == target:
            return False
        return effective_unit_cost(target) < effective_unit_cost(version.storage_class)

    def _optimize_file(
        self,
        user_id: str,
        file: FileRecord,
        days_threshold: int,
        target: StorageClass,
    ) -> OptimizeResponse:
        now = self._clock()
        results: list[OptimizedVersionResult] = []
        skipped = 0
        failed = 0
        savings = 0.0

        for version in file.versions:
            if not self.is_eligible(version, days_threshold, target, now):
                skipped += 1
                continue

            try:
                change = self._catalog.change_version_storage_class(
                    user_id,
                    file.file_id,
                    version.version_id,
                    target,
                    activity_type=BillingActivityType.STORAGE_OPTIMIZATION,
                    require_inactive=True,
                )
            except TierStoreError as exc:
                failed += 1
                logger.warning(
                    "Could not move version %s of file %s to %s: %s",
                    version.version_id,
                    file.file_id,
                    target.value,
                    exc,
                )
                results.append(
                    OptimizedVersionResult(
                        file_id=file.file_id,
                        version_id=version.version_id,
                        version_number=version.version_number,
                        old_storage_class=version.storage_class,
                        new_storage_class=target,
                        monthly_savings=0.0,
                        success=False,
                        error=str(exc),
                    )
                )
                continue

            if not change.changed:
                skipped += 1
                continue

            saved = monthly_savings(version.size_bytes, change.old_storage_class, change.new_storage_class)
            savings += saved
            results.append(
                OptimizedVersionResult(
                    file_id=file.file_id,
                    version_id=version.version_id,
                    version_number=version.version_number,
                    old_storage_class=change.old_storage_class,
                    new_storage_class=change.new_storage_class,
                    monthly_savings=saved,
                    success=True,
                )
            )

        return OptimizeResponse(
            file_id=file.file_id,
            target_storage_class=target,
            days_threshold=days_threshold,
            optimized_count=len([result for result in results if result.success]),
            skipped_count=skipped,
            failed_count=failed,
            total_monthly_savings=savings,
            results=results,
        )

    def _validate(
        self,
        days_threshold: Optional[int],
        target_storage_class: Union[StorageClass, str, None],
        skip_active_version: bool,
    ) -> tuple[int, StorageClass]:
        if not skip_active_version:
            raise InvalidArgumentError(
                "skip_active_version cannot be disabled: demoting the active version degrades retrieval latency.",
                details={"skip_active_version": skip_active_version},
            )
        if days_threshold is None:
            days_threshold = self.default_days_threshold
        if target_storage_class is None:
            target_storage_class = self.default_target
        if isinstance(days_threshold, bool) or not isinstance(days_threshold, int) or days_threshold < 0:
            raise InvalidArgumentError(
                f"days_threshold must be a non-negative integer, got {days_threshold!r}.",
                details={"days_threshold": days_threshold},
            )
        return days_threshold, resolve_storage_class(target_storage_class)
