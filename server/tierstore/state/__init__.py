from tierstore.state.store import BILLING_RECORD, CATALOG_RECORD, CatalogStore

__all__ = ["BILLING_RECORD", "CATALOG_RECORD", "CatalogStore"]
