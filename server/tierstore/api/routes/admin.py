from fastapi import APIRouter

from tierstore.dependencies import migration_tool
from tierstore.models import MigrationReport


router = APIRouter()


@router.post("/migrate-legacy", response_model=MigrationReport)
def migrate_legacy() -> MigrationReport:
    """Upgrade every user's pre-versioning records. Safe to call repeatedly."""
    return migration_tool.run()
