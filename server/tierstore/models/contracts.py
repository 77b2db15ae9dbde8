from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field


class StorageClass(str, Enum):
    STANDARD = "STANDARD"
    STANDARD_IA = "STANDARD_IA"
    ONEZONE_IA = "ONEZONE_IA"
    GLACIER_INSTANT = "GLACIER_INSTANT"
    GLACIER_FLEXIBLE = "GLACIER_FLEXIBLE"
    DEEP_ARCHIVE = "DEEP_ARCHIVE"
    INTELLIGENT_TIERING = "INTELLIGENT_TIERING"


class RetrievalLatency(str, Enum):
    INSTANT = "instant"
    MINUTES = "minutes"
    HOURS = "hours"


class BillingActivityType(str, Enum):
    UPLOAD = "upload"
    STORAGE_CLASS_CHANGE = "storage_class_change"
    STORAGE_OPTIMIZATION = "storage_optimization"
    VERSION_RESTORE = "version_restore"
    VERSION_DELETE = "version_delete"
    RETRIEVAL = "retrieval"


class BulkOperation(str, Enum):
    DELETE = "delete"
    CHANGE_STORAGE_CLASS = "change_storage_class"
    RESTORE = "restore"


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive timestamps from legacy catalogs are read as UTC.
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class VersionRecord(BaseModel):
    version_id: str
    version_number: int = Field(ge=1)
    storage_key: str
    size_bytes: int = Field(ge=0)
    storage_class: StorageClass
    created_at: UtcDatetime
    created_by: str
    comment: str = ""
    is_active: bool = False
    checksum: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class FileRecord(BaseModel):
    kind: Literal["file"] = "file"
    file_id: str
    owner_id: str
    original_name: str
    mime_type: str = "application/octet-stream"
    parent_folder_id: Optional[str] = None
    current_version_number: int = Field(ge=1)
    highest_version_number: int = Field(ge=1)
    total_versions: int = Field(ge=0)
    versions: list[VersionRecord] = Field(default_factory=list)
    versioning_enabled: bool = True
    is_starred: bool = False
    size_bytes: int = Field(default=0, ge=0)
    storage_class: StorageClass = StorageClass.STANDARD
    storage_key: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def active_versions(self) -> list[VersionRecord]:
        return [version for version in self.versions if version.is_active]

    def find_version(self, version_id: str) -> Optional[VersionRecord]:
        for version in self.versions:
            if version.version_id == version_id:
                return version
        return None


class FolderRecord(BaseModel):
    kind: Literal["folder"] = "folder"
    folder_id: str
    owner_id: str
    folder_name: str
    parent_folder_id: Optional[str] = None
    is_starred: bool = False
    created_at: UtcDatetime


CatalogItem = Annotated[Union[FileRecord, FolderRecord], Field(discriminator="kind")]


class UserCatalog(BaseModel):
    user_id: str
    items: list[CatalogItem] = Field(default_factory=list)

    def files(self) -> list[FileRecord]:
        return [item for item in self.items if isinstance(item, FileRecord)]

    def folders(self) -> list[FolderRecord]:
        return [item for item in self.items if isinstance(item, FolderRecord)]

    def find_file(self, file_id: str) -> Optional[FileRecord]:
        for item in self.files():
            if item.file_id == file_id:
                return item
        return None

    def find_folder(self, folder_id: str) -> Optional[FolderRecord]:
        for item in self.folders():
            if item.folder_id == folder_id:
                return item
        return None

    def children_of(self, folder_id: Optional[str]) -> list[Union[FileRecord, FolderRecord]]:
        return [item for item in self.items if item.parent_folder_id == folder_id]


class BillingActivity(BaseModel):
    activity_id: str
    timestamp: UtcDatetime
    type: BillingActivityType
    cost: float = Field(ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)


class BillingLedgerDocument(BaseModel):
    user_id: str
    activities: list[BillingActivity] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pricing and cost views
# ---------------------------------------------------------------------------


class StorageClassPricing(BaseModel):
    storage_class: StorageClass
    base_unit_cost: float
    margin_percent: float
    effective_unit_cost: float
    retrieval_latency: RetrievalLatency
    minimum_retention_days: int
    transition_fee_per_1000: float
    retrieval_fee_per_gb: float


class StorageClassBreakdown(BaseModel):
    count: int = Field(default=0, ge=0)
    total_bytes: int = Field(default=0, ge=0)
    total_cost: float = Field(default=0.0, ge=0)


class VersionCostView(VersionRecord):
    monthly_cost: float = Field(ge=0)
    retrieval_latency: RetrievalLatency


class VersionHistory(BaseModel):
    file_id: str
    original_name: str
    current_version_number: int
    total_versions: int
    versions: list[VersionCostView]
    total_bytes: int
    total_monthly_cost: float
    cost_breakdown: dict[StorageClass, StorageClassBreakdown] = Field(default_factory=dict)


class FileCostEstimate(BaseModel):
    file_id: str
    version_count: int
    total_bytes: int
    total_monthly_cost: float
    cost_breakdown: dict[StorageClass, StorageClassBreakdown] = Field(default_factory=dict)


class FolderCostEstimate(BaseModel):
    folder_id: str
    file_count: int
    folder_count: int
    total_bytes: int
    total_monthly_cost: float


class CostBreakdownResponse(BaseModel):
    user_id: str
    file_count: int
    total_bytes: int
    total_monthly_cost: float
    breakdown: dict[StorageClass, StorageClassBreakdown] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Version catalog results
# ---------------------------------------------------------------------------


class RestoreResult(BaseModel):
    file: FileRecord
    restored_version_id: str
    changed: bool


class DeleteVersionResult(BaseModel):
    deleted_version: VersionRecord
    remaining_versions: int


class StorageClassChangeResult(BaseModel):
    file_id: str
    version_id: str
    old_storage_class: StorageClass
    new_storage_class: StorageClass
    old_monthly_cost: float
    new_monthly_cost: float
    changed: bool


class DownloadLink(BaseModel):
    file_id: str
    version_id: str
    url: str
    expires_in: int
    retrieval_latency: RetrievalLatency


class UpdateCommentRequest(BaseModel):
    comment: str = Field(max_length=1000)


class ChangeStorageClassRequest(BaseModel):
    storage_class: StorageClass


class StarRequest(BaseModel):
    starred: bool = True


class CreateFolderRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    parent_folder_id: Optional[str] = None


class UpdateFolderRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    parent_folder_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Optimization
# ---------------------------------------------------------------------------


class OptimizeRequest(BaseModel):
    # unset fields fall back to the configured optimization defaults
    days_threshold: Optional[int] = Field(default=None, ge=0)
    target_storage_class: Optional[StorageClass] = None
    skip_active_version: bool = True


class OptimizedVersionResult(BaseModel):
    file_id: str
    version_id: str
    version_number: int
    old_storage_class: StorageClass
    new_storage_class: StorageClass
    monthly_savings: float
    success: bool
    error: Optional[str] = None


class OptimizeResponse(BaseModel):
    file_id: Optional[str] = None
    target_storage_class: StorageClass
    days_threshold: int
    optimized_count: int
    skipped_count: int
    failed_count: int
    total_monthly_savings: float
    results: list[OptimizedVersionResult] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Retention
# ---------------------------------------------------------------------------


class RetentionTier(str, Enum):
    FREE = "FREE"
    PRO = "PRO"
    BUSINESS = "BUSINESS"


class RetentionCleanupRequest(BaseModel):
    tier: Optional[RetentionTier] = None


class CleanedVersionResult(BaseModel):
    file_id: str
    file_name: str
    version_id: str
    version_number: int
    reason: Literal["age", "count"]
    freed_bytes: int
    saved_cost: float
    success: bool
    error: Optional[str] = None


class RetentionCleanupResponse(BaseModel):
    user_id: str
    tier: RetentionTier
    max_versions: Optional[int]
    auto_delete_after_days: int
    cleaned_count: int
    failed_count: int
    freed_bytes: int
    saved_cost: float
    results: list[CleanedVersionResult] = Field(default_factory=list)


class VersionStatistics(BaseModel):
    user_id: str
    total_files: int
    total_versions: int
    average_versions_per_file: float
    total_bytes: int
    total_monthly_cost: float
    breakdown: dict[StorageClass, StorageClassBreakdown] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------


class BulkRequest(BaseModel):
    operation: BulkOperation
    item_ids: list[str] = Field(min_length=1, max_length=1000)
    storage_class: Optional[StorageClass] = None


class BulkItemResult(BaseModel):
    id: str
    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None


class BulkProgress(BaseModel):
    current: int
    total: int
    item_id: str
    success: bool


class BulkResponse(BaseModel):
    operation: BulkOperation
    total: int
    success_count: int
    failure_count: int
    cancelled: bool = False
    results: list[BulkItemResult] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Billing and migration
# ---------------------------------------------------------------------------


class BillingTypeSummary(BaseModel):
    count: int = 0
    cost: float = 0.0


class BillingSummary(BaseModel):
    user_id: str
    total_cost: float
    activity_count: int
    breakdown: dict[BillingActivityType, BillingTypeSummary] = Field(default_factory=dict)


class MigrationUserReport(BaseModel):
    user_id: str
    migrated: int = 0
    already_current: int = 0
    error: Optional[str] = None


class MigrationReport(BaseModel):
    users: list[MigrationUserReport] = Field(default_factory=list)
    users_processed: int
    total_migrated: int
    total_already_current: int
    completed_at: datetime
