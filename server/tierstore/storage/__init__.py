from tierstore.storage.object_store import ObjectStore, version_storage_key
from tierstore.storage.retry import DEFAULT_RETRYABLE_CODES, NO_RETRY, RetryPolicy

__all__ = [
    "DEFAULT_RETRYABLE_CODES",
    "NO_RETRY",
    "ObjectStore",
    "RetryPolicy",
    "version_storage_key",
]
