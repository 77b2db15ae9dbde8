from tierstore.migration.service import MIGRATED_COMMENT, LegacyMigrationTool

__all__ = ["MIGRATED_COMMENT", "LegacyMigrationTool"]
