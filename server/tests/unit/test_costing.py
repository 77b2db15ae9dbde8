"""Unit tests for CostCalculator."""

import uuid
from datetime import datetime, timezone

import pytest

from tierstore.costing import CostCalculator
from tierstore.models import FileRecord, FolderRecord, RetrievalLatency, StorageClass, VersionRecord
from tierstore.pricing import BYTES_PER_GB, effective_monthly_cost

GB = BYTES_PER_GB
NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
calc = CostCalculator()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _version(number=1, size_bytes=GB, storage_class=StorageClass.STANDARD, active=False) -> VersionRecord:
    version_id = str(uuid.uuid4())
    return VersionRecord(
        version_id=version_id,
        version_number=number,
        storage_key=f"user/file/{version_id}",
        size_bytes=size_bytes,
        storage_class=storage_class,
        created_at=NOW,
        created_by="user",
        is_active=active,
    )


def _file(versions, parent=None) -> FileRecord:
    numbers = [version.version_number for version in versions]
    for version in versions:
        version.is_active = False
    versions[-1].is_active = True
    return FileRecord(
        file_id=str(uuid.uuid4()),
        owner_id="user",
        original_name="report.pdf",
        parent_folder_id=parent,
        current_version_number=versions[-1].version_number,
        highest_version_number=max(numbers),
        total_versions=len(versions),
        versions=versions,
        created_at=NOW,
        updated_at=NOW,
    )


def _folder(parent=None) -> FolderRecord:
    return FolderRecord(
        folder_id=str(uuid.uuid4()),
        owner_id="user",
        folder_name="docs",
        parent_folder_id=parent,
        created_at=NOW,
    )


@pytest.mark.unit
class TestVersionAndFileCost:
    def test_version_cost_matches_pricing(self):
        version = _version(size_bytes=2 * GB, storage_class=StorageClass.STANDARD_IA)
        assert calc.estimate_version_cost(version) == effective_monthly_cost(StorageClass.STANDARD_IA, 2 * GB)

    def test_file_cost_sums_all_versions_not_just_active(self):
        file = _file(
            [
                _version(1, GB, StorageClass.STANDARD),
                _version(2, 2 * GB, StorageClass.STANDARD_IA),
                _version(3, 3 * GB, StorageClass.STANDARD),
            ]
        )
        expected = (
            effective_monthly_cost(StorageClass.STANDARD, GB)
            + effective_monthly_cost(StorageClass.STANDARD_IA, 2 * GB)
            + effective_monthly_cost(StorageClass.STANDARD, 3 * GB)
        )
        assert calc.estimate_file_cost(file) == pytest.approx(expected)

    def test_version_view_carries_cost_and_latency(self):
        view = calc.version_view(_version(storage_class=StorageClass.DEEP_ARCHIVE))
        assert view.monthly_cost == pytest.approx(effective_monthly_cost(StorageClass.DEEP_ARCHIVE, GB))
        assert view.retrieval_latency == RetrievalLatency.HOURS


@pytest.mark.unit
class TestAggregateByStorageClass:
    def test_groups_by_each_versions_own_class(self):
        old = _version(1, GB, StorageClass.GLACIER_INSTANT)
        new = _version(2, 2 * GB, StorageClass.STANDARD)
        breakdown = calc.aggregate_by_storage_class([_file([old, new])])

        assert set(breakdown) == {StorageClass.GLACIER_INSTANT, StorageClass.STANDARD}
        assert breakdown[StorageClass.GLACIER_INSTANT].count == 1
        assert breakdown[StorageClass.GLACIER_INSTANT].total_bytes == GB
        assert breakdown[StorageClass.STANDARD].total_bytes == 2 * GB

    def test_totals_across_files(self):
        files = [_file([_version(1, GB)]), _file([_version(1, 3 * GB)])]
        breakdown = calc.aggregate_by_storage_class(files)
        entry = breakdown[StorageClass.STANDARD]
        assert entry.count == 2
        assert entry.total_bytes == 4 * GB
        assert entry.total_cost == pytest.approx(effective_monthly_cost(StorageClass.STANDARD, 4 * GB))

    def test_empty_input_gives_empty_breakdown(self):
        assert calc.aggregate_by_storage_class([]) == {}


@pytest.mark.unit
class TestFolderCost:
    def test_recurses_into_subfolders(self):
        root = _folder()
        child = _folder(parent=root.folder_id)
        top_file = _file([_version(1, GB)], parent=root.folder_id)
        nested_file = _file([_version(1, 2 * GB)], parent=child.folder_id)
        outside = _file([_version(1, 10 * GB)])

        cost = calc.estimate_folder_cost(root, [root, child, top_file, nested_file, outside])
        assert cost == pytest.approx(effective_monthly_cost(StorageClass.STANDARD, 3 * GB))

    def test_empty_folder_costs_nothing(self):
        folder = _folder()
        assert calc.estimate_folder_cost(folder, [folder]) == 0.0

    def test_terminates_on_parent_cycle(self):
        a = _folder()
        b = _folder(parent=a.folder_id)
        a.parent_folder_id = b.folder_id
        file = _file([_version(1, GB)], parent=b.folder_id)
        assert calc.estimate_folder_cost(a, [a, b, file]) == pytest.approx(
            effective_monthly_cost(StorageClass.STANDARD, GB)
        )
