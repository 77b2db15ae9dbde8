from typing import Iterable, Optional, Union

from tierstore.models import (
    FileRecord,
    FolderRecord,
    StorageClass,
    StorageClassBreakdown,
    VersionCostView,
    VersionRecord,
)
from tierstore.pricing import effective_monthly_cost, profile_for


class CostCalculator:
    """
    Derives monthly cost estimates from stored versions.

    Every version of a file is billed, not only the active one, and each
    version is grouped under its own storage class since old versions may
    sit in a different tier than the active one.
    """

    def estimate_version_cost(self, version: VersionRecord) -> float:
        return effective_monthly_cost(version.storage_class, version.size_bytes)

    def estimate_file_cost(self, file: FileRecord) -> float:
        return sum(self.estimate_version_cost(version) for version in file.versions)

    def estimate_folder_cost(
        self,
        folder: FolderRecord,
        items: Iterable[Union[FileRecord, FolderRecord]],
    ) -> float:
        children_by_parent: dict[Optional[str], list[Union[FileRecord, FolderRecord]]] = {}
        for item in items:
            children_by_parent.setdefault(item.parent_folder_id, []).append(item)

        total = 0.0
        visited: set[str] = set()
        pending = [folder.folder_id]
        while pending:
            folder_id = pending.pop()
            if folder_id in visited:
                continue
            visited.add(folder_id)
            for child in children_by_parent.get(folder_id, []):
                if isinstance(child, FileRecord):
                    total += self.estimate_file_cost(child)
                else:
                    pending.append(child.folder_id)
        return total

    def aggregate_by_storage_class(
        self, files: Iterable[FileRecord]
    ) -> dict[StorageClass, StorageClassBreakdown]:
        breakdown: dict[StorageClass, StorageClassBreakdown] = {}
        for file in files:
            for version in file.versions:
                entry = breakdown.setdefault(version.storage_class, StorageClassBreakdown())
                entry.count += 1
                entry.total_bytes += version.size_bytes
                entry.total_cost += self.estimate_version_cost(version)
        return breakdown

    def version_view(self, version: VersionRecord) -> VersionCostView:
        return VersionCostView(
            **version.model_dump(),
            monthly_cost=self.estimate_version_cost(version),
            retrieval_latency=profile_for(version.storage_class).retrieval_latency,
        )
