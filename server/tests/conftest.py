"""
Shared test fixtures for unit and integration tests.

Key design decision:
  tierstore/api/routes/*.py do `from tierstore.dependencies import version_catalog`.
  That binds a local name at import time. Patching `tierstore.dependencies.version_catalog`
  afterwards does NOT affect the already-bound reference inside the route modules.
  Every location is patched from the ROUTE_BINDINGS table below.
"""

from contextlib import ExitStack
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from tierstore.billing import BillingLedger
from tierstore.bulk import BulkCoordinator
from tierstore.catalog import VersionCatalog
from tierstore.main import create_app
from tierstore.migration import LegacyMigrationTool
from tierstore.optimizer import OptimizationEngine
from tierstore.retention import RetentionManager
from tierstore.state import CatalogStore
from tierstore.storage import NO_RETRY, ObjectStore

BUCKET = "test-bucket"

# dependency name -> route modules holding their own binding of it
ROUTE_BINDINGS = {
    "version_catalog": ["files", "versions", "folders", "costs"],
    "optimization_engine": ["versions", "maintenance"],
    "retention_manager": ["maintenance"],
    "bulk_coordinator": ["bulk"],
    "billing_ledger": ["costs"],
    "migration_tool": ["admin"],
}


class FakeClock:
    """Settable clock shared by the services under test."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, seconds: int = 0) -> None:
        self.now = self.now + timedelta(days=days, seconds=seconds)


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Set fake AWS credentials so boto3 clients don't fail to initialize."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture(autouse=True)
def s3_mock(aws_credentials):
    """Wrap every test in a moto S3 mock with an empty test bucket.

    moto patches at the HTTP intercept layer, so all boto3 clients (including
    module-level ones) route to this backend. Each test starts with a fresh,
    isolated S3 state.
    """
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)
        yield s3


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the lru_cache on get_settings() before/after each test so that
    monkeypatch.setenv changes take effect."""
    from tierstore.core.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def tmp_store(tmp_path):
    """
    Fresh SQLite-backed CatalogStore per test.

    Uses a temp file (not ':memory:') because CatalogStore opens a new
    connection per operation.
    """
    return CatalogStore(db_path=str(tmp_path / "catalog.db"))


@pytest.fixture()
def object_store(s3_mock):
    return ObjectStore(BUCKET, s3_client=s3_mock, retry_policy=NO_RETRY)


@pytest.fixture()
def billing(tmp_store, clock):
    return BillingLedger(tmp_store, clock=clock)


@pytest.fixture()
def catalog(tmp_store, object_store, billing, clock):
    return VersionCatalog(tmp_store, object_store, billing, clock=clock)


@pytest.fixture()
def optimizer(catalog, clock):
    return OptimizationEngine(catalog, clock=clock)


@pytest.fixture()
def retention(catalog, clock):
    return RetentionManager(catalog, clock=clock)


@pytest.fixture()
def bulk(catalog):
    return BulkCoordinator(catalog)


@pytest.fixture()
def migration(tmp_store, clock):
    return LegacyMigrationTool(tmp_store, clock=clock)


@pytest.fixture()
def client(tmp_store, billing, catalog, optimizer, retention, bulk, migration):
    """
    FastAPI TestClient with all module-level singletons replaced by the
    per-test services above.
    """
    replacements = {
        "version_catalog": catalog,
        "optimization_engine": optimizer,
        "retention_manager": retention,
        "bulk_coordinator": bulk,
        "billing_ledger": billing,
        "migration_tool": migration,
    }
    with ExitStack() as stack:
        stack.enter_context(patch("tierstore.dependencies.catalog_store", tmp_store))
        for name, service in replacements.items():
            stack.enter_context(patch(f"tierstore.dependencies.{name}", service))
            for module in ROUTE_BINDINGS[name]:
                stack.enter_context(patch(f"tierstore.api.routes.{module}.{name}", service))
        with TestClient(create_app(), raise_server_exceptions=True) as tc:
            yield tc
