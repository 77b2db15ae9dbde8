import logging
from threading import Event
from typing import Callable, Optional, Union

from tierstore.catalog import VersionCatalog
from tierstore.errors import InvalidArgumentError, TierStoreError
from tierstore.models import (
    BulkItemResult,
    BulkOperation,
    BulkProgress,
    BulkResponse,
    StorageClass,
)
from tierstore.pricing import resolve_storage_class

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BulkProgress], None]


class BulkCoordinator:
    """
    Runs one operation over a list of item ids, one item at a time.

    Items are attempted in order and every attempt is recorded; a failing
    item never stops the batch. Progress is reported after each item. When
    the cancel event is set, no further items are started and the items
    already attempted stay in the result.

    Storage-class changes address files; a folder id in that batch fails
    on its own as not applicable to folders.
    """

    def __init__(self, catalog: VersionCatalog) -> None:
        self._catalog = catalog

    def execute(
        self,
        user_id: str,
        operation: BulkOperation,
        item_ids: list[str],
        storage_class: Optional[Union[StorageClass, str]] = None,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[Event] = None,
    ) -> BulkResponse:
        operation = BulkOperation(operation)
        target_class: Optional[StorageClass] = None
        if operation == BulkOperation.CHANGE_STORAGE_CLASS:
            if storage_class is None:
                raise InvalidArgumentError("storage_class is required for change_storage_class.")
            target_class = resolve_storage_class(storage_class)

        total = len(item_ids)
        results: list[BulkItemResult] = []
        cancelled = False

        for index, item_id in enumerate(item_ids):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.info("Bulk %s cancelled after %d/%d items", operation.value, index, total)
                break

            result = self._run_item(user_id, operation, item_id, target_class)
            results.append(result)

            if progress is not None:
                progress(BulkProgress(current=index + 1, total=total, item_id=item_id, success=result.success))

        success_count = len([result for result in results if result.success])
        failure_count = len(results) - success_count
        logger.info(
            "Bulk %s for user %s: %d succeeded, %d failed of %d",
            operation.value,
            user_id,
            success_count,
            failure_count,
            total,
        )
        return BulkResponse(
            operation=operation,
            total=total,
            success_count=success_count,
            failure_count=failure_count,
            cancelled=cancelled,
            results=results,
        )

    def _run_item(
        self,
        user_id: str,
        operation: BulkOperation,
        item_id: str,
        target_class: Optional[StorageClass],
    ) -> BulkItemResult:
        try:
            if operation == BulkOperation.DELETE:
                self._catalog.delete_item(user_id, item_id)
            elif operation == BulkOperation.CHANGE_STORAGE_CLASS:
                self._catalog.change_file_storage_class(user_id, item_id, target_class)
            elif operation == BulkOperation.RESTORE:
                file = self._catalog.find_file_for_version(user_id, item_id)
                self._catalog.restore_version(user_id, file.file_id, item_id)
        except TierStoreError as exc:
            logger.warning("Bulk %s failed for %s: %s", operation.value, item_id, exc)
            return BulkItemResult(id=item_id, success=False, error=exc.message, error_kind=exc.kind.value)

        return BulkItemResult(id=item_id, success=True)
