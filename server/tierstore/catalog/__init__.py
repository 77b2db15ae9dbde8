from tierstore.catalog.service import VersionCatalog

__all__ = ["VersionCatalog"]
