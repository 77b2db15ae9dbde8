from tierstore.retention.service import (
    RETENTION_POLICIES,
    RetentionManager,
    RetentionPolicy,
    resolve_retention_tier,
)

__all__ = ["RETENTION_POLICIES", "RetentionManager", "RetentionPolicy", "resolve_retention_tier"]
