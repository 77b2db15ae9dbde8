from contextlib import contextmanager
from datetime import datetime, timezone
import hashlib
import logging
import mimetypes
from typing import Any, Callable, Iterator, Optional, Union
import uuid

from pydantic import ValidationError

from tierstore.billing import BillingLedger
from tierstore.costing import CostCalculator
from tierstore.errors import (
    ConflictError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    TierStoreError,
)
from tierstore.models import (
    BillingActivityType,
    CostBreakdownResponse,
    DeleteVersionResult,
    DownloadLink,
    FileCostEstimate,
    FileRecord,
    FolderCostEstimate,
    FolderRecord,
    RestoreResult,
    StorageClass,
    StorageClassChangeResult,
    UserCatalog,
    VersionHistory,
    VersionRecord,
)
from tierstore.pricing import (
    effective_monthly_cost,
    profile_for,
    resolve_storage_class,
    retrieval_fee,
    transition_fee,
    upload_fee,
)
from tierstore.state import CATALOG_RECORD, CatalogStore
from tierstore.storage import ObjectStore, version_storage_key

logger = logging.getLogger(__name__)

_UNSET: Any = object()

Item = Union[FileRecord, FolderRecord]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VersionCatalog:
    """
    Files, folders and the version sets behind each file.

    Every mutation is a single read-modify-write of the user's catalog
    document under that user's lock, so the active-flag flip on create and
    restore is observed by other readers as one change. Puts and storage
    class changes happen before the catalog write, so a backend failure
    leaves the catalog untouched. Deletes go the other way: the catalog
    stops referencing the object first, and the object is removed after.
    A failed removal only leaves an unreferenced object behind.

    Billing activities are recorded once the catalog write has committed.
    A ledger failure is logged and never reported as a failed mutation.
    """

    def __init__(
        self,
        store: CatalogStore,
        object_store: ObjectStore,
        billing: BillingLedger,
        costs: Optional[CostCalculator] = None,
        clock: Callable[[], datetime] = _utcnow,
        signed_url_ttl: int = 3600,
        site_margin_percent: float = 30.0,
    ) -> None:
        self._store = store
        self._objects = object_store
        self._billing = billing
        self._costs = costs or CostCalculator()
        self._clock = clock
        self._signed_url_ttl = signed_url_ttl
        self._site_margin_percent = site_margin_percent

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self, user_id: str) -> UserCatalog:
        return self._load(user_id)

    def get_file(self, user_id: str, file_id: str) -> FileRecord:
        return self._require_file(self._load(user_id), file_id)

    def get_version(self, user_id: str, file_id: str, version_id: str) -> VersionRecord:
        file = self.get_file(user_id, file_id)
        return self._require_version(file, version_id)

    def list_items(self, user_id: str, parent_folder_id: Optional[str] = None) -> list[Item]:
        catalog = self._load(user_id)
        if parent_folder_id is not None:
            self._require_folder(catalog, parent_folder_id)
        return catalog.children_of(parent_folder_id)

    def list_versions(self, user_id: str, file_id: str) -> VersionHistory:
        file = self.get_file(user_id, file_id)
        views = [self._costs.version_view(version) for version in file.versions]
        return VersionHistory(
            file_id=file.file_id,
            original_name=file.original_name,
            current_version_number=file.current_version_number,
            total_versions=len(file.versions),
            versions=views,
            total_bytes=sum(view.size_bytes for view in views),
            total_monthly_cost=sum(view.monthly_cost for view in views),
            cost_breakdown=self._costs.aggregate_by_storage_class([file]),
        )

    def find_file_for_version(self, user_id: str, version_id: str) -> FileRecord:
        for file in self._load(user_id).files():
            if file.find_version(version_id) is not None:
                return file
        raise NotFoundError(f"Version '{version_id}' was not found.", resource_id=version_id)

    def folder_path(self, user_id: str, folder_id: str) -> list[FolderRecord]:
        catalog = self._load(user_id)
        path: list[FolderRecord] = []
        seen: set[str] = set()
        current: Optional[str] = folder_id
        while current and current not in seen:
            seen.add(current)
            folder = self._require_folder(catalog, current)
            path.insert(0, folder)
            current = folder.parent_folder_id
        return path

    # ------------------------------------------------------------------
    # Costs
    # ------------------------------------------------------------------

    def estimate_file_cost(self, user_id: str, file_id: str) -> FileCostEstimate:
        file = self.get_file(user_id, file_id)
        return FileCostEstimate(
            file_id=file.file_id,
            version_count=len(file.versions),
            total_bytes=sum(version.size_bytes for version in file.versions),
            total_monthly_cost=self._costs.estimate_file_cost(file),
            cost_breakdown=self._costs.aggregate_by_storage_class([file]),
        )

    def estimate_folder_cost(self, user_id: str, folder_id: str) -> FolderCostEstimate:
        catalog = self._load(user_id)
        folder = self._require_folder(catalog, folder_id)
        files, folders = self._descendants(catalog, folder_id)
        return FolderCostEstimate(
            folder_id=folder.folder_id,
            file_count=len(files),
            folder_count=len(folders),
            total_bytes=sum(v.size_bytes for f in files for v in f.versions),
            total_monthly_cost=self._costs.estimate_folder_cost(folder, catalog.items),
        )

    def aggregate_cost_by_storage_class(self, user_id: str) -> CostBreakdownResponse:
        files = self._load(user_id).files()
        breakdown = self._costs.aggregate_by_storage_class(files)
        return CostBreakdownResponse(
            user_id=user_id,
            file_count=len(files),
            total_bytes=sum(entry.total_bytes for entry in breakdown.values()),
            total_monthly_cost=sum(entry.total_cost for entry in breakdown.values()),
            breakdown=breakdown,
        )

    # ------------------------------------------------------------------
    # Files and versions
    # ------------------------------------------------------------------

    def upload_file(
        self,
        user_id: str,
        name: str,
        data: bytes,
        storage_class: Union[StorageClass, str] = StorageClass.STANDARD,
        mime_type: Optional[str] = None,
        parent_folder_id: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> FileRecord:
        """Store a new file, or a new version when the name already exists in that folder."""
        storage_class = resolve_storage_class(storage_class)
        name = (name or "").strip()
        if not name:
            raise InvalidArgumentError("A file name is required.")
        mime_type = mime_type or mimetypes.guess_type(name)[0] or "application/octet-stream"

        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            if parent_folder_id is not None:
                self._require_folder(catalog, parent_folder_id)

            existing = next(
                (
                    file
                    for file in catalog.files()
                    if file.original_name == name and file.parent_folder_id == parent_folder_id
                ),
                None,
            )
            if existing is not None:
                self.create_version(user_id, existing.file_id, data, storage_class, comment, actor=user_id)
                return self.get_file(user_id, existing.file_id)

            now = self._clock()
            file_id = str(uuid.uuid4())
            version = self._new_version(user_id, file_id, 1, data, storage_class, comment or "Initial version", user_id)
            self._objects.put(version.storage_key, data, storage_class, content_type=mime_type)

            file = FileRecord(
                file_id=file_id,
                owner_id=user_id,
                original_name=name,
                mime_type=mime_type,
                parent_folder_id=parent_folder_id,
                current_version_number=1,
                highest_version_number=1,
                total_versions=1,
                versions=[version],
                size_bytes=version.size_bytes,
                storage_class=storage_class,
                storage_key=version.storage_key,
                created_at=now,
                updated_at=now,
            )
            catalog.items.append(file)
            self._save_or_discard(catalog, version.storage_key)

        self._bill(
            user_id,
            BillingActivityType.UPLOAD,
            upload_fee(self._site_margin_percent),
            {"file_id": file_id, "version_id": version.version_id, "size_bytes": version.size_bytes},
        )
        logger.info("Created file %s (%s) for user %s", file_id, name, user_id)
        return file

    def create_version(
        self,
        user_id: str,
        file_id: str,
        data: bytes,
        storage_class: Union[StorageClass, str] = StorageClass.STANDARD,
        comment: Optional[str] = None,
        actor: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> VersionRecord:
        storage_class = resolve_storage_class(storage_class)

        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            file = self._require_file(catalog, file_id)

            number = file.highest_version_number + 1
            version = self._new_version(
                user_id,
                file.file_id,
                number,
                data,
                storage_class,
                comment or f"Version {number}",
                actor or user_id,
                metadata,
            )
            self._objects.put(version.storage_key, data, storage_class, content_type=file.mime_type)

            for existing in file.versions:
                existing.is_active = False
            file.versions.append(version)
            file.current_version_number = number
            file.highest_version_number = number
            file.total_versions = len(file.versions)
            self._mirror_active(file, version)
            self._save_or_discard(catalog, version.storage_key)

        self._bill(
            user_id,
            BillingActivityType.UPLOAD,
            upload_fee(self._site_margin_percent),
            {"file_id": file_id, "version_id": version.version_id, "size_bytes": version.size_bytes},
        )
        logger.info("Created version %d of file %s for user %s", number, file_id, user_id)
        return version

    def restore_version(
        self,
        user_id: str,
        file_id: str,
        version_id: str,
        actor: Optional[str] = None,
    ) -> RestoreResult:
        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            file = self._require_file(catalog, file_id)
            target = self._require_version(file, version_id)
            if target.is_active:
                return RestoreResult(file=file, restored_version_id=version_id, changed=False)

            for version in file.active_versions():
                version.is_active = False
            target.is_active = True
            file.current_version_number = target.version_number
            self._mirror_active(file, target)
            self._save(catalog)

        self._bill(
            user_id,
            BillingActivityType.VERSION_RESTORE,
            0.0,
            {"file_id": file_id, "version_id": version_id, "actor": actor or user_id},
        )
        logger.info(
            "Restored version %d of file %s for user %s", target.version_number, file_id, user_id
        )
        return RestoreResult(file=file, restored_version_id=version_id, changed=True)

    def delete_version(
        self,
        user_id: str,
        file_id: str,
        version_id: str,
        actor: Optional[str] = None,
    ) -> DeleteVersionResult:
        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            file = self._require_file(catalog, file_id)
            target = self._require_version(file, version_id)
            if target.is_active:
                raise ConflictError(
                    "Cannot delete the active version. Restore a different version first, or delete the file.",
                    resource_id=version_id,
                    details={"file_id": file_id},
                )
            if len(file.versions) == 1:
                raise ConflictError(
                    "Cannot delete the only version of a file. Delete the file instead.",
                    resource_id=version_id,
                    details={"file_id": file_id},
                )

            file.versions = [version for version in file.versions if version.version_id != version_id]
            file.total_versions = len(file.versions)
            file.updated_at = self._clock()
            self._save(catalog)
            self._discard_blob(target.storage_key)

        self._bill(
            user_id,
            BillingActivityType.VERSION_DELETE,
            0.0,
            {
                "file_id": file_id,
                "version_id": version_id,
                "freed_bytes": target.size_bytes,
                "actor": actor or user_id,
            },
        )
        logger.info("Deleted version %d of file %s for user %s", target.version_number, file_id, user_id)
        return DeleteVersionResult(deleted_version=target, remaining_versions=len(file.versions))

    def update_version_comment(
        self, user_id: str, file_id: str, version_id: str, comment: str
    ) -> VersionRecord:
        with self._session(user_id) as catalog:
            file = self._require_file(catalog, file_id)
            version = self._require_version(file, version_id)
            version.comment = comment
        return version

    def change_version_storage_class(
        self,
        user_id: str,
        file_id: str,
        version_id: str,
        storage_class: Union[StorageClass, str],
        activity_type: BillingActivityType = BillingActivityType.STORAGE_CLASS_CHANGE,
        require_inactive: bool = False,
    ) -> StorageClassChangeResult:
        storage_class = resolve_storage_class(storage_class)

        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            file = self._require_file(catalog, file_id)
            version = self._require_version(file, version_id)
            if require_inactive and version.is_active:
                raise ConflictError(
                    "Version became active; its storage class is left unchanged.",
                    resource_id=version_id,
                    details={"file_id": file_id},
                )
            old_class = version.storage_class
            old_cost = effective_monthly_cost(old_class, version.size_bytes)
            new_cost = effective_monthly_cost(storage_class, version.size_bytes)

            if old_class == storage_class:
                return StorageClassChangeResult(
                    file_id=file_id,
                    version_id=version_id,
                    old_storage_class=old_class,
                    new_storage_class=storage_class,
                    old_monthly_cost=old_cost,
                    new_monthly_cost=new_cost,
                    changed=False,
                )

            self._objects.change_storage_class(version.storage_key, storage_class)
            version.storage_class = storage_class
            if version.is_active:
                file.storage_class = storage_class
            file.updated_at = self._clock()
            self._save(catalog)

        self._bill(
            user_id,
            activity_type,
            transition_fee(storage_class),
            {
                "file_id": file_id,
                "version_id": version_id,
                "from_storage_class": old_class.value,
                "to_storage_class": storage_class.value,
                "size_bytes": version.size_bytes,
                "monthly_cost_change": new_cost - old_cost,
            },
        )
        logger.info(
            "Moved version %s of file %s from %s to %s", version_id, file_id, old_class.value, storage_class.value
        )
        return StorageClassChangeResult(
            file_id=file_id,
            version_id=version_id,
            old_storage_class=old_class,
            new_storage_class=storage_class,
            old_monthly_cost=old_cost,
            new_monthly_cost=new_cost,
            changed=True,
        )

    def change_file_storage_class(
        self, user_id: str, file_id: str, storage_class: Union[StorageClass, str]
    ) -> StorageClassChangeResult:
        """Move the active version of a file to another storage class."""
        catalog = self._load(user_id)
        if catalog.find_folder(file_id) is not None:
            raise InvalidArgumentError("Storage class changes are not applicable to folders.", resource_id=file_id)
        file = self._require_file(catalog, file_id)
        active = self._active_version(file)
        return self.change_version_storage_class(user_id, file_id, active.version_id, storage_class)

    def download_url(
        self,
        user_id: str,
        file_id: str,
        version_id: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ) -> DownloadLink:
        file = self.get_file(user_id, file_id)
        version = self._require_version(file, version_id) if version_id else self._active_version(file)
        ttl = ttl_seconds if ttl_seconds is not None else self._signed_url_ttl
        if ttl <= 0:
            raise InvalidArgumentError("Signed URL lifetime must be positive.", resource_id=file_id)

        url = self._objects.signed_url(version.storage_key, ttl)
        self._bill(
            user_id,
            BillingActivityType.RETRIEVAL,
            retrieval_fee(version.storage_class, version.size_bytes),
            {"file_id": file_id, "version_id": version.version_id, "size_bytes": version.size_bytes},
        )
        return DownloadLink(
            file_id=file_id,
            version_id=version.version_id,
            url=url,
            expires_in=ttl,
            retrieval_latency=profile_for(version.storage_class).retrieval_latency,
        )

    def set_starred(self, user_id: str, item_id: str, starred: bool) -> Item:
        with self._session(user_id) as catalog:
            item = catalog.find_file(item_id) or catalog.find_folder(item_id)
            if item is None:
                raise NotFoundError(f"Item '{item_id}' was not found.", resource_id=item_id)
            item.is_starred = starred
        return item

    def delete_file(self, user_id: str, file_id: str) -> FileRecord:
        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            file = self._require_file(catalog, file_id)
            catalog.items = [
                item for item in catalog.items if not (isinstance(item, FileRecord) and item.file_id == file_id)
            ]
            self._save(catalog)
            for version in file.versions:
                self._discard_blob(version.storage_key)
        logger.info("Deleted file %s with %d versions for user %s", file_id, len(file.versions), user_id)
        return file

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def create_folder(self, user_id: str, name: str, parent_folder_id: Optional[str] = None) -> FolderRecord:
        name = (name or "").strip()
        if not name:
            raise InvalidArgumentError("A folder name is required.")

        with self._session(user_id) as catalog:
            if parent_folder_id is not None:
                self._require_folder(catalog, parent_folder_id)
            self._require_unique_folder_name(catalog, name, parent_folder_id)
            folder = FolderRecord(
                folder_id=str(uuid.uuid4()),
                owner_id=user_id,
                folder_name=name,
                parent_folder_id=parent_folder_id,
                created_at=self._clock(),
            )
            catalog.items.append(folder)
        return folder

    def update_folder(
        self,
        user_id: str,
        folder_id: str,
        name: Optional[str] = None,
        parent_folder_id: Optional[str] = _UNSET,
    ) -> FolderRecord:
        if name is not None and not name.strip():
            raise InvalidArgumentError("A folder name cannot be blank.", resource_id=folder_id)

        with self._session(user_id) as catalog:
            folder = self._require_folder(catalog, folder_id)
            new_parent = folder.parent_folder_id if parent_folder_id is _UNSET else parent_folder_id

            if new_parent != folder.parent_folder_id:
                self._require_not_descendant(catalog, folder_id, new_parent)

            new_name = name.strip() if name else folder.folder_name
            if new_name != folder.folder_name or new_parent != folder.parent_folder_id:
                self._require_unique_folder_name(catalog, new_name, new_parent, exclude=folder_id)

            folder.folder_name = new_name
            folder.parent_folder_id = new_parent
        return folder

    def delete_folder(self, user_id: str, folder_id: str) -> FolderRecord:
        with self._session(user_id) as catalog:
            folder = self._require_folder(catalog, folder_id)
            children = catalog.children_of(folder_id)
            if children:
                file_count = len([child for child in children if isinstance(child, FileRecord)])
                raise ConflictError(
                    "Cannot delete a folder that is not empty. Move or delete its contents first.",
                    resource_id=folder_id,
                    details={"files": file_count, "folders": len(children) - file_count},
                )
            catalog.items = [
                item for item in catalog.items if not (isinstance(item, FolderRecord) and item.folder_id == folder_id)
            ]
        logger.info("Deleted folder %s for user %s", folder_id, user_id)
        return folder

    def delete_item(self, user_id: str, item_id: str) -> Item:
        catalog = self._load(user_id)
        if catalog.find_folder(item_id) is not None:
            return self.delete_folder(user_id, item_id)
        if catalog.find_file(item_id) is not None:
            return self.delete_file(user_id, item_id)
        raise NotFoundError(f"Item '{item_id}' was not found.", resource_id=item_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _session(self, user_id: str) -> Iterator[UserCatalog]:
        with self._store.user_lock(user_id):
            catalog = self._load(user_id)
            yield catalog
            self._save(catalog)

    def _load(self, user_id: str) -> UserCatalog:
        try:
            raw = self._store.read_user_record(user_id, CATALOG_RECORD)
        except NotFoundError:
            return UserCatalog(user_id=user_id)

        try:
            catalog = UserCatalog.model_validate(raw)
        except ValidationError as exc:
            raise InternalError(
                f"Catalog for user '{user_id}' is not in the versioned schema. Run the legacy migration.",
                resource_id=user_id,
                cause=exc,
            ) from exc

        for file in catalog.files():
            self._verify_file(file)
        return catalog

    def _save(self, catalog: UserCatalog) -> None:
        self._store.write_user_record(catalog.user_id, CATALOG_RECORD, catalog.model_dump(mode="json"))

    def _save_or_discard(self, catalog: UserCatalog, storage_key: str) -> None:
        try:
            self._save(catalog)
        except TierStoreError:
            logger.error("Catalog write failed; discarding uploaded object %s", storage_key)
            try:
                self._objects.delete(storage_key)
            except TierStoreError:
                logger.exception("Could not discard orphaned object %s", storage_key)
            raise

    def _verify_file(self, file: FileRecord) -> None:
        actives = file.active_versions()
        if len(actives) != 1:
            raise InternalError(
                f"File '{file.file_id}' has {len(actives)} active versions; exactly one is required.",
                resource_id=file.file_id,
                details={"active_versions": [version.version_id for version in actives]},
            )
        if actives[0].version_number != file.current_version_number:
            raise InternalError(
                f"File '{file.file_id}' points at version {file.current_version_number} "
                f"but version {actives[0].version_number} is active.",
                resource_id=file.file_id,
            )

    def _new_version(
        self,
        user_id: str,
        file_id: str,
        number: int,
        data: bytes,
        storage_class: StorageClass,
        comment: str,
        actor: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> VersionRecord:
        version_id = str(uuid.uuid4())
        return VersionRecord(
            version_id=version_id,
            version_number=number,
            storage_key=version_storage_key(user_id, file_id, version_id),
            size_bytes=len(data),
            storage_class=storage_class,
            created_at=self._clock(),
            created_by=actor,
            comment=comment,
            is_active=True,
            checksum=hashlib.sha256(data).hexdigest(),
            metadata=metadata or {},
        )

    def _mirror_active(self, file: FileRecord, version: VersionRecord) -> None:
        file.size_bytes = version.size_bytes
        file.storage_class = version.storage_class
        file.storage_key = version.storage_key
        file.updated_at = self._clock()

    def _discard_blob(self, storage_key: str) -> None:
        try:
            self._objects.delete(storage_key)
        except NotFoundError:
            logger.warning("Object %s was already gone from the backend", storage_key)
        except TierStoreError:
            logger.exception("Could not delete object %s; it is no longer referenced", storage_key)

    def _bill(
        self,
        user_id: str,
        activity_type: BillingActivityType,
        cost: float,
        metadata: dict[str, Any],
    ) -> None:
        try:
            self._billing.record(user_id, activity_type, cost, metadata)
        except TierStoreError:
            logger.exception(
                "Could not record %s activity for user %s: %s", activity_type.value, user_id, metadata
            )

    def _active_version(self, file: FileRecord) -> VersionRecord:
        actives = file.active_versions()
        if len(actives) != 1:
            raise InternalError(
                f"File '{file.file_id}' has {len(actives)} active versions; exactly one is required.",
                resource_id=file.file_id,
            )
        return actives[0]

    def _require_file(self, catalog: UserCatalog, file_id: str) -> FileRecord:
        file = catalog.find_file(file_id)
        if file is None:
            raise NotFoundError(f"File '{file_id}' was not found.", resource_id=file_id)
        return file

    def _require_version(self, file: FileRecord, version_id: str) -> VersionRecord:
        version = file.find_version(version_id)
        if version is None:
            raise NotFoundError(
                f"Version '{version_id}' was not found.",
                resource_id=version_id,
                details={"file_id": file.file_id},
            )
        return version

    def _require_folder(self, catalog: UserCatalog, folder_id: str) -> FolderRecord:
        folder = catalog.find_folder(folder_id)
        if folder is None:
            raise NotFoundError(f"Folder '{folder_id}' was not found.", resource_id=folder_id)
        return folder

    def _require_unique_folder_name(
        self,
        catalog: UserCatalog,
        name: str,
        parent_folder_id: Optional[str],
        exclude: Optional[str] = None,
    ) -> None:
        for folder in catalog.folders():
            if (
                folder.folder_id != exclude
                and folder.parent_folder_id == parent_folder_id
                and folder.folder_name == name
            ):
                raise ConflictError(
                    "A folder with this name already exists in this location.",
                    resource_id=folder.folder_id,
                )

    def _require_not_descendant(
        self, catalog: UserCatalog, folder_id: str, new_parent: Optional[str]
    ) -> None:
        seen: set[str] = set()
        current = new_parent
        while current is not None and current not in seen:
            if current == folder_id:
                raise ConflictError(
                    "A folder cannot be moved into itself or one of its subfolders.",
                    resource_id=folder_id,
                    details={"parent_folder_id": new_parent},
                )
            seen.add(current)
            current = self._require_folder(catalog, current).parent_folder_id

    def _descendants(
        self, catalog: UserCatalog, folder_id: str
    ) -> tuple[list[FileRecord], list[FolderRecord]]:
        files: list[FileRecord] = []
        folders: list[FolderRecord] = []
        pending = [folder_id]
        seen: set[str] = set()
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            for child in catalog.children_of(current):
                if isinstance(child, FileRecord):
                    files.append(child)
                else:
                    folders.append(child)
                    pending.append(child.folder_id)
        return files, folders
