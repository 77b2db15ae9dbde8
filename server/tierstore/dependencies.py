import boto3
from fastapi import Header

from tierstore.billing import BillingLedger
from tierstore.bulk import BulkCoordinator
from tierstore.catalog import VersionCatalog
from tierstore.core.settings import get_settings
from tierstore.errors import InvalidArgumentError
from tierstore.migration import LegacyMigrationTool
from tierstore.optimizer import OptimizationEngine
from tierstore.retention import RetentionManager
from tierstore.state import CatalogStore
from tierstore.storage import ObjectStore, RetryPolicy

_settings = get_settings()

# A single client is shared by every service.
_s3 = boto3.client("s3", region_name=_settings.aws_region)

catalog_store = CatalogStore(db_path=_settings.catalog_db_path)
object_store = ObjectStore(
    bucket=_settings.storage_bucket,
    s3_client=_s3,
    retry_policy=RetryPolicy(
        max_attempts=_settings.retry_max_attempts,
        base_delay=_settings.retry_base_delay_seconds,
        max_delay=_settings.retry_max_delay_seconds,
        backoff_multiplier=_settings.retry_backoff_multiplier,
    ),
)
billing_ledger = BillingLedger(catalog_store)
version_catalog = VersionCatalog(
    catalog_store,
    object_store,
    billing_ledger,
    signed_url_ttl=_settings.signed_url_ttl_seconds,
    site_margin_percent=_settings.site_margin_percent,
)
optimization_engine = OptimizationEngine(
    version_catalog,
    default_days_threshold=_settings.optimize_days_threshold,
    default_target=_settings.optimize_target_class,
)
retention_manager = RetentionManager(version_catalog, default_tier=_settings.retention_default_tier)
bulk_coordinator = BulkCoordinator(version_catalog)
migration_tool = LegacyMigrationTool(catalog_store)


def current_user(x_user_id: str = Header(...)) -> str:
    """Principal id supplied by the identity layer in front of the API."""
    user_id = x_user_id.strip()
    if not user_id:
        raise InvalidArgumentError("X-User-Id header must not be blank.")
    return user_id
