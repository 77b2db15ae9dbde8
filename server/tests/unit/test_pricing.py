"""Unit tests for the storage-class pricing model."""

import pytest

from tierstore.errors import ErrorKind, InvalidArgumentError
from tierstore.models import RetrievalLatency, StorageClass
from tierstore.pricing import (
    BYTES_PER_GB,
    STORAGE_CLASS_PROFILES,
    effective_monthly_cost,
    effective_unit_cost,
    monthly_savings,
    pricing_table,
    profile_for,
    resolve_storage_class,
    retrieval_fee,
    transition_fee,
    upload_fee,
)

GB = BYTES_PER_GB


@pytest.mark.unit
class TestEffectiveUnitCost:
    def test_every_class_has_a_profile(self):
        assert set(STORAGE_CLASS_PROFILES) == set(StorageClass)

    @pytest.mark.parametrize("storage_class", list(StorageClass))
    def test_effective_cost_is_base_plus_margin(self, storage_class):
        profile = profile_for(storage_class)
        expected = profile.base_unit_cost * (1 + profile.margin_percent / 100)
        assert effective_unit_cost(storage_class) == pytest.approx(expected)

    @pytest.mark.parametrize("storage_class", list(StorageClass))
    def test_effective_cost_is_positive(self, storage_class):
        assert effective_unit_cost(storage_class) > 0

    def test_standard_effective_cost(self):
        assert effective_unit_cost(StorageClass.STANDARD) == pytest.approx(0.02875)

    def test_deep_archive_effective_cost(self):
        assert effective_unit_cost(StorageClass.DEEP_ARCHIVE) == pytest.approx(0.001584)


@pytest.mark.unit
class TestEffectiveMonthlyCost:
    def test_one_gib_in_standard(self):
        assert effective_monthly_cost(StorageClass.STANDARD, GB) == pytest.approx(0.02875)

    def test_uses_binary_gigabytes(self):
        decimal_gb = 1_000_000_000
        assert effective_monthly_cost(StorageClass.STANDARD, decimal_gb) < effective_monthly_cost(
            StorageClass.STANDARD, GB
        )

    def test_zero_bytes_costs_nothing(self):
        assert effective_monthly_cost(StorageClass.DEEP_ARCHIVE, 0) == 0.0

    def test_scales_linearly_with_size(self):
        one = effective_monthly_cost(StorageClass.STANDARD_IA, GB)
        assert effective_monthly_cost(StorageClass.STANDARD_IA, 10 * GB) == pytest.approx(10 * one)

    @pytest.mark.parametrize("size", [1, 1024, GB, 2 * GB, 5 * 1024 * GB])
    def test_deep_archive_strictly_cheaper_than_standard(self, size):
        assert effective_monthly_cost(StorageClass.DEEP_ARCHIVE, size) < effective_monthly_cost(
            StorageClass.STANDARD, size
        )

    def test_accepts_class_name_string(self):
        assert effective_monthly_cost("standard_ia", GB) == effective_monthly_cost(StorageClass.STANDARD_IA, GB)

    def test_monthly_savings_is_cost_difference(self):
        saved = monthly_savings(GB, StorageClass.STANDARD, StorageClass.STANDARD_IA)
        assert saved == pytest.approx(0.02875 - 0.016875)


@pytest.mark.unit
class TestResolveStorageClass:
    def test_unknown_class_is_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_storage_class("PLATINUM")
        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENT
        assert exc_info.value.resource_id == "PLATINUM"
        assert "STANDARD" in exc_info.value.details["allowed"]

    def test_unknown_class_never_defaults(self):
        with pytest.raises(InvalidArgumentError):
            effective_monthly_cost("", GB)

    def test_case_and_whitespace_normalized(self):
        assert resolve_storage_class("  glacier_instant ") == StorageClass.GLACIER_INSTANT

    def test_enum_passes_through(self):
        assert resolve_storage_class(StorageClass.ONEZONE_IA) is StorageClass.ONEZONE_IA


@pytest.mark.unit
class TestFees:
    def test_standard_has_no_transition_fee(self):
        assert transition_fee(StorageClass.STANDARD) == 0.0

    def test_transition_fee_includes_margin(self):
        assert transition_fee(StorageClass.DEEP_ARCHIVE) == pytest.approx(0.05 / 1000 * 1.6)

    def test_retrieval_fee_scales_with_size(self):
        assert retrieval_fee(StorageClass.GLACIER_INSTANT, 2 * GB) == pytest.approx(2 * 0.03 * 1.45)

    def test_standard_retrieval_is_free(self):
        assert retrieval_fee(StorageClass.STANDARD, 10 * GB) == 0.0

    def test_upload_fee_applies_site_margin(self):
        assert upload_fee(30.0) == pytest.approx(0.005 / 1000 * 1.3)


@pytest.mark.unit
class TestPricingTable:
    def test_one_row_per_class(self):
        rows = pricing_table()
        assert [row.storage_class for row in rows] == list(StorageClass)

    def test_latency_classes(self):
        rows = {row.storage_class: row for row in pricing_table()}
        assert rows[StorageClass.STANDARD].retrieval_latency == RetrievalLatency.INSTANT
        assert rows[StorageClass.GLACIER_FLEXIBLE].retrieval_latency == RetrievalLatency.MINUTES
        assert rows[StorageClass.DEEP_ARCHIVE].retrieval_latency == RetrievalLatency.HOURS

    def test_minimum_retention_days(self):
        rows = {row.storage_class: row for row in pricing_table()}
        assert rows[StorageClass.STANDARD].minimum_retention_days == 0
        assert rows[StorageClass.DEEP_ARCHIVE].minimum_retention_days == 180
