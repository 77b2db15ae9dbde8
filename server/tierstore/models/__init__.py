from tierstore.models.contracts import (
    StorageClass,
    RetrievalLatency,
    BillingActivityType,
    BulkOperation,
    VersionRecord,
    FileRecord,
    FolderRecord,
    UserCatalog,
    BillingActivity,
    BillingLedgerDocument,
    StorageClassPricing,
    StorageClassBreakdown,
    VersionCostView,
    VersionHistory,
    FileCostEstimate,
    FolderCostEstimate,
    CostBreakdownResponse,
    RestoreResult,
    DeleteVersionResult,
    StorageClassChangeResult,
    DownloadLink,
    UpdateCommentRequest,
    ChangeStorageClassRequest,
    StarRequest,
    CreateFolderRequest,
    UpdateFolderRequest,
    OptimizeRequest,
    OptimizedVersionResult,
    OptimizeResponse,
    RetentionTier,
    RetentionCleanupRequest,
    CleanedVersionResult,
    RetentionCleanupResponse,
    VersionStatistics,
    BulkRequest,
    BulkItemResult,
    BulkProgress,
    BulkResponse,
    BillingTypeSummary,
    BillingSummary,
    MigrationUserReport,
    MigrationReport,
    CatalogItem,
)

__all__ = [
    "StorageClass",
    "RetrievalLatency",
    "BillingActivityType",
    "BulkOperation",
    "VersionRecord",
    "FileRecord",
    "FolderRecord",
    "UserCatalog",
    "BillingActivity",
    "BillingLedgerDocument",
    "StorageClassPricing",
    "StorageClassBreakdown",
    "VersionCostView",
    "VersionHistory",
    "FileCostEstimate",
    "FolderCostEstimate",
    "CostBreakdownResponse",
    "RestoreResult",
    "DeleteVersionResult",
    "StorageClassChangeResult",
    "DownloadLink",
    "UpdateCommentRequest",
    "ChangeStorageClassRequest",
    "StarRequest",
    "CreateFolderRequest",
    "UpdateFolderRequest",
    "OptimizeRequest",
    "OptimizedVersionResult",
    "OptimizeResponse",
    "RetentionTier",
    "RetentionCleanupRequest",
    "CleanedVersionResult",
    "RetentionCleanupResponse",
    "VersionStatistics",
    "BulkRequest",
    "BulkItemResult",
    "BulkProgress",
    "BulkResponse",
    "BillingTypeSummary",
    "BillingSummary",
    "MigrationUserReport",
    "MigrationReport",
    "CatalogItem",
]
