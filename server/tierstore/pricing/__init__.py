from tierstore.pricing.model import (
    BYTES_PER_GB,
    STORAGE_CLASS_PROFILES,
    StorageClassProfile,
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

__all__ = [
    "BYTES_PER_GB",
    "STORAGE_CLASS_PROFILES",
    "StorageClassProfile",
    "effective_monthly_cost",
    "effective_unit_cost",
    "monthly_savings",
    "pricing_table",
    "profile_for",
    "resolve_storage_class",
    "retrieval_fee",
    "transition_fee",
    "upload_fee",
]
