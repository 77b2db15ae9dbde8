from datetime import datetime, timezone
import logging
from typing import Any, Callable, Optional
import uuid

from pydantic import ValidationError

from tierstore.errors import InvalidArgumentError, NotFoundError, TierStoreError
from tierstore.models import (
    MigrationReport,
    MigrationUserReport,
    StorageClass,
    UserCatalog,
)
from tierstore.pricing import STORAGE_CLASS_PROFILES, resolve_storage_class
from tierstore.state import CATALOG_RECORD, CatalogStore

logger = logging.getLogger(__name__)

MIGRATED_COMMENT = "Initial version (migrated from legacy)"

# Legacy records sometimes carry the backend's own class names.
_S3_CLASS_NAMES = {profile.s3_name: storage_class for storage_class, profile in STORAGE_CLASS_PROFILES.items()}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _pick(record: dict[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return default


class LegacyMigrationTool:
    """
    Upgrades pre-versioning catalog documents to the versioned schema.

    A file record that already has a version list and a current version
    number is left as it is, so running the tool again changes nothing.
    Users are migrated one at a time; a user whose document cannot be read
    or converted is reported with an error and the run moves on.
    """

    def __init__(self, store: CatalogStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store = store
        self._clock = clock

    def run(self) -> MigrationReport:
        reports = [self.migrate_user(user_id) for user_id in self._store.list_user_ids()]
        report = MigrationReport(
            users=reports,
            users_processed=len(reports),
            total_migrated=sum(item.migrated for item in reports),
            total_already_current=sum(item.already_current for item in reports),
            completed_at=self._clock(),
        )
        logger.info(
            "Legacy migration finished: %d records migrated, %d already current, %d users",
            report.total_migrated,
            report.total_already_current,
            report.users_processed,
        )
        return report

    def migrate_user(self, user_id: str) -> MigrationUserReport:
        with self._store.user_lock(user_id):
            try:
                raw = self._store.read_user_record(user_id, CATALOG_RECORD)
            except NotFoundError:
                logger.info("No catalog found for user %s", user_id)
                return MigrationUserReport(user_id=user_id)
            except TierStoreError as exc:
                logger.error("Could not read catalog for user %s: %s", user_id, exc)
                return MigrationUserReport(user_id=user_id, error=exc.message)

            try:
                items, migrated, current = self._convert_items(user_id, raw)
                catalog = UserCatalog.model_validate({"user_id": user_id, "items": items})
            except (TierStoreError, ValidationError) as exc:
                logger.error("Could not migrate catalog for user %s: %s", user_id, exc)
                return MigrationUserReport(user_id=user_id, error=str(exc))

            if migrated == 0:
                logger.info("No records to migrate for user %s", user_id)
                return MigrationUserReport(user_id=user_id, already_current=current)

            try:
                self._store.write_user_record(user_id, CATALOG_RECORD, catalog.model_dump(mode="json"))
            except TierStoreError as exc:
                logger.error("Could not write migrated catalog for user %s: %s", user_id, exc)
                return MigrationUserReport(user_id=user_id, already_current=current, error=exc.message)

        logger.info("Migrated %d records for user %s", migrated, user_id)
        return MigrationUserReport(user_id=user_id, migrated=migrated, already_current=current)

    def _convert_items(self, user_id: str, raw: Any) -> tuple[list[dict[str, Any]], int, int]:
        if isinstance(raw, list):
            records = raw
        elif isinstance(raw, dict) and isinstance(raw.get("items"), list):
            records = raw["items"]
        else:
            raise InvalidArgumentError(
                f"Catalog for user '{user_id}' is neither a record list nor an items document.",
                resource_id=user_id,
            )

        items: list[dict[str, Any]] = []
        migrated = 0
        current = 0
        for record in records:
            if not isinstance(record, dict):
                raise InvalidArgumentError(
                    f"Catalog for user '{user_id}' contains a non-object record.", resource_id=user_id
                )
            if self._is_folder(record):
                if record.get("kind") == "folder" and "folder_id" in record:
                    items.append(record)
                    current += 1
                else:
                    items.append(self._convert_folder(user_id, record))
                    migrated += 1
            elif record.get("versions") and record.get("current_version_number"):
                items.append(record)
                current += 1
            else:
                items.append(self._convert_file(user_id, record))
                migrated += 1
        return items, migrated, current

    def _is_folder(self, record: dict[str, Any]) -> bool:
        return record.get("kind") == "folder" or bool(_pick(record, "is_folder", "isFolder", default=False))

    def _convert_folder(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        return {
            "kind": "folder",
            "folder_id": _pick(record, "folder_id", "id", default=str(uuid.uuid4())),
            "owner_id": _pick(record, "owner_id", "userId", default=user_id),
            "folder_name": _pick(record, "folder_name", "folderName", "name", default="Untitled folder"),
            "parent_folder_id": _pick(record, "parent_folder_id", "parentFolderId"),
            "is_starred": bool(_pick(record, "is_starred", "isStarred", default=False)),
            "created_at": _pick(record, "created_at", "createdAt", "uploadDate", default=self._clock()),
        }

    def _convert_file(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        file_id = _pick(record, "file_id", "id", default=str(uuid.uuid4()))
        created_at = _pick(record, "created_at", "uploadDate", default=self._clock())

        legacy_versions = record.get("versions")
        if legacy_versions:
            # Versioned by the pre-schema server: camelCase version entries.
            versions = [self._convert_version(user_id, entry, created_at) for entry in legacy_versions]
            current_number = _pick(record, "currentVersion", default=None)
            if current_number is None:
                active = [version for version in versions if version["is_active"]]
                current_number = active[0]["version_number"] if active else versions[-1]["version_number"]
        else:
            storage_key = _pick(record, "storage_key", "s3Key")
            if not storage_key:
                raise InvalidArgumentError(
                    f"Legacy file '{file_id}' has no storage key.", resource_id=file_id
                )
            versions = [
                {
                    "version_id": str(uuid.uuid4()),
                    "version_number": 1,
                    "storage_key": storage_key,
                    "size_bytes": int(_pick(record, "size_bytes", "fileSize", default=0)),
                    "storage_class": self._storage_class(_pick(record, "storage_class", "storageClass")),
                    "created_at": created_at,
                    "created_by": user_id,
                    "comment": MIGRATED_COMMENT,
                    "is_active": True,
                    "checksum": None,
                    "metadata": {},
                }
            ]
            current_number = 1

        active = next(
            (version for version in versions if version["version_number"] == current_number),
            versions[-1],
        )
        return {
            "kind": "file",
            "file_id": file_id,
            "owner_id": _pick(record, "owner_id", "userId", default=user_id),
            "original_name": _pick(record, "original_name", "originalName", "fileName", "name", default=file_id),
            "mime_type": _pick(record, "mime_type", "mimeType", default="application/octet-stream"),
            "parent_folder_id": _pick(record, "parent_folder_id", "parentFolderId"),
            "current_version_number": current_number,
            "highest_version_number": max(version["version_number"] for version in versions),
            "total_versions": len(versions),
            "versions": versions,
            "versioning_enabled": True,
            "is_starred": bool(_pick(record, "is_starred", "isStarred", default=False)),
            "size_bytes": active["size_bytes"],
            "storage_class": active["storage_class"],
            "storage_key": active["storage_key"],
            "created_at": created_at,
            "updated_at": _pick(record, "updated_at", "updatedAt", default=created_at),
        }

    def _convert_version(self, user_id: str, entry: dict[str, Any], fallback_created: Any) -> dict[str, Any]:
        return {
            "version_id": _pick(entry, "version_id", "versionId", default=str(uuid.uuid4())),
            "version_number": int(_pick(entry, "version_number", "versionNumber", default=1)),
            "storage_key": _pick(entry, "storage_key", "s3Key"),
            "size_bytes": int(_pick(entry, "size_bytes", "fileSize", default=0)),
            "storage_class": self._storage_class(_pick(entry, "storage_class", "storageClass")),
            "created_at": _pick(entry, "created_at", "uploadDate", default=fallback_created),
            "created_by": _pick(entry, "created_by", "uploadedBy", default=user_id),
            "comment": _pick(entry, "comment", default=""),
            "is_active": bool(_pick(entry, "is_active", "isActive", default=False)),
            "checksum": entry.get("checksum"),
            "metadata": _pick(entry, "metadata", default={}),
        }

    def _storage_class(self, value: Optional[str]) -> str:
        if not value:
            return StorageClass.STANDARD.value
        if value in _S3_CLASS_NAMES:
            return _S3_CLASS_NAMES[value].value
        return resolve_storage_class(value).value
