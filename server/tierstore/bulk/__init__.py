from tierstore.bulk.service import BulkCoordinator, ProgressCallback

__all__ = ["BulkCoordinator", "ProgressCallback"]
