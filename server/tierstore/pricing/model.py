"""
Storage-class pricing model.

Static table of storage tiers: the backend's per GB-month unit cost, the
service margin applied on top, retrieval latency, minimum retention, and
the one-off fees charged when objects move into or are read out of a
tier. Every function here is pure.
"""

from dataclasses import dataclass
from typing import Union

from tierstore.errors import InvalidArgumentError
from tierstore.models import RetrievalLatency, StorageClass, StorageClassPricing

BYTES_PER_GB = 1024 ** 3

# S3 PUT/COPY request price per 1000 requests, before margin
UPLOAD_REQUEST_COST_PER_1000 = 0.005


@dataclass(frozen=True)
class StorageClassProfile:
    storage_class: StorageClass
    s3_name: str
    base_unit_cost: float           # $/GB/month charged by the backend
    margin_percent: float           # markup on top of the base cost
    retrieval_latency: RetrievalLatency
    minimum_retention_days: int
    transition_fee_per_1000: float  # lifecycle/copy requests into this class
    retrieval_fee_per_gb: float

    @property
    def effective_unit_cost(self) -> float:
        return self.base_unit_cost * (1 + self.margin_percent / 100)


STORAGE_CLASS_PROFILES: dict[StorageClass, StorageClassProfile] = {
    StorageClass.STANDARD: StorageClassProfile(
        StorageClass.STANDARD, "STANDARD", 0.023, 25, RetrievalLatency.INSTANT, 0, 0.0, 0.0
    ),
    StorageClass.STANDARD_IA: StorageClassProfile(
        StorageClass.STANDARD_IA, "STANDARD_IA", 0.0125, 35, RetrievalLatency.INSTANT, 30, 0.01, 0.01
    ),
    StorageClass.ONEZONE_IA: StorageClassProfile(
        StorageClass.ONEZONE_IA, "ONEZONE_IA", 0.01, 40, RetrievalLatency.INSTANT, 30, 0.01, 0.01
    ),
    StorageClass.GLACIER_INSTANT: StorageClassProfile(
        StorageClass.GLACIER_INSTANT, "GLACIER_IR", 0.004, 45, RetrievalLatency.INSTANT, 90, 0.02, 0.03
    ),
    StorageClass.GLACIER_FLEXIBLE: StorageClassProfile(
        StorageClass.GLACIER_FLEXIBLE, "GLACIER", 0.0036, 50, RetrievalLatency.MINUTES, 90, 0.03, 0.01
    ),
    StorageClass.DEEP_ARCHIVE: StorageClassProfile(
        StorageClass.DEEP_ARCHIVE, "DEEP_ARCHIVE", 0.00099, 60, RetrievalLatency.HOURS, 180, 0.05, 0.02
    ),
    StorageClass.INTELLIGENT_TIERING: StorageClassProfile(
        StorageClass.INTELLIGENT_TIERING, "INTELLIGENT_TIERING", 0.0125, 30, RetrievalLatency.INSTANT, 0, 0.0025, 0.0
    ),
}


def resolve_storage_class(value: Union[StorageClass, str]) -> StorageClass:
    """Parse an external storage-class name. Unknown names are rejected, never defaulted."""
    if isinstance(value, StorageClass):
        return value
    try:
        return StorageClass(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Unrecognized storage class '{value}'.",
            resource_id=str(value),
            details={"allowed": [item.value for item in StorageClass]},
            cause=exc,
        ) from exc


def profile_for(storage_class: Union[StorageClass, str]) -> StorageClassProfile:
    return STORAGE_CLASS_PROFILES[resolve_storage_class(storage_class)]


def effective_unit_cost(storage_class: Union[StorageClass, str]) -> float:
    return profile_for(storage_class).effective_unit_cost


def effective_monthly_cost(storage_class: Union[StorageClass, str], size_bytes: int) -> float:
    """Monthly cost in dollars of holding size_bytes in storage_class, margin included."""
    return (size_bytes / BYTES_PER_GB) * effective_unit_cost(storage_class)


def monthly_savings(size_bytes: int, from_class: StorageClass, to_class: StorageClass) -> float:
    return effective_monthly_cost(from_class, size_bytes) - effective_monthly_cost(to_class, size_bytes)


def transition_fee(storage_class: Union[StorageClass, str]) -> float:
    """Fee for moving a single object into storage_class."""
    profile = profile_for(storage_class)
    return profile.transition_fee_per_1000 / 1000 * (1 + profile.margin_percent / 100)


def retrieval_fee(storage_class: Union[StorageClass, str], size_bytes: int) -> float:
    profile = profile_for(storage_class)
    return (size_bytes / BYTES_PER_GB) * profile.retrieval_fee_per_gb * (1 + profile.margin_percent / 100)


def upload_fee(site_margin_percent: float) -> float:
    return UPLOAD_REQUEST_COST_PER_1000 / 1000 * (1 + site_margin_percent / 100)


def pricing_table() -> list[StorageClassPricing]:
    return [
        StorageClassPricing(
            storage_class=profile.storage_class,
            base_unit_cost=profile.base_unit_cost,
            margin_percent=profile.margin_percent,
            effective_unit_cost=profile.effective_unit_cost,
            retrieval_latency=profile.retrieval_latency,
            minimum_retention_days=profile.minimum_retention_days,
            transition_fee_per_1000=profile.transition_fee_per_1000,
            retrieval_fee_per_gb=profile.retrieval_fee_per_gb,
        )
        for profile in STORAGE_CLASS_PROFILES.values()
    ]
