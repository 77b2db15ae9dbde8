"""Unit tests for VersionCatalog folder operations."""

import pytest

from tierstore.errors import ConflictError, InvalidArgumentError, NotFoundError
from tierstore.models import FileRecord, FolderRecord, StorageClass
from tierstore.pricing import effective_monthly_cost

USER = "alice"


@pytest.mark.unit
class TestCreateFolder:
    def test_create_root_folder(self, catalog):
        folder = catalog.create_folder(USER, "Projects")
        assert folder.folder_name == "Projects"
        assert folder.parent_folder_id is None
        assert catalog.snapshot(USER).find_folder(folder.folder_id) == folder

    def test_name_is_trimmed(self, catalog):
        assert catalog.create_folder(USER, "  Taxes  ").folder_name == "Taxes"

    def test_blank_name_rejected(self, catalog):
        with pytest.raises(InvalidArgumentError):
            catalog.create_folder(USER, "   ")

    def test_duplicate_name_in_same_parent_conflicts(self, catalog):
        catalog.create_folder(USER, "Projects")
        with pytest.raises(ConflictError):
            catalog.create_folder(USER, "Projects")

    def test_same_name_in_different_parents_allowed(self, catalog):
        parent = catalog.create_folder(USER, "2024")
        catalog.create_folder(USER, "Photos")
        nested = catalog.create_folder(USER, "Photos", parent.folder_id)
        assert nested.parent_folder_id == parent.folder_id

    def test_unknown_parent_rejected(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.create_folder(USER, "Orphan", "missing")


@pytest.mark.unit
class TestUpdateFolder:
    def test_rename(self, catalog):
        folder = catalog.create_folder(USER, "Drafts")
        renamed = catalog.update_folder(USER, folder.folder_id, name="Final")
        assert renamed.folder_name == "Final"

    def test_rename_to_blank_rejected(self, catalog):
        folder = catalog.create_folder(USER, "Drafts")
        with pytest.raises(InvalidArgumentError):
            catalog.update_folder(USER, folder.folder_id, name=" ")

    def test_rename_onto_sibling_conflicts(self, catalog):
        catalog.create_folder(USER, "A")
        b = catalog.create_folder(USER, "B")
        with pytest.raises(ConflictError):
            catalog.update_folder(USER, b.folder_id, name="A")

    def test_move_under_another_folder(self, catalog):
        target = catalog.create_folder(USER, "Archive")
        folder = catalog.create_folder(USER, "2019")
        moved = catalog.update_folder(USER, folder.folder_id, parent_folder_id=target.folder_id)
        assert moved.parent_folder_id == target.folder_id

    def test_move_back_to_root(self, catalog):
        parent = catalog.create_folder(USER, "Archive")
        folder = catalog.create_folder(USER, "2019", parent.folder_id)
        moved = catalog.update_folder(USER, folder.folder_id, parent_folder_id=None)
        assert moved.parent_folder_id is None

    def test_rename_keeps_parent_when_not_given(self, catalog):
        parent = catalog.create_folder(USER, "Archive")
        folder = catalog.create_folder(USER, "2019", parent.folder_id)
        assert catalog.update_folder(USER, folder.folder_id, name="2020").parent_folder_id == parent.folder_id

    def test_move_into_itself_conflicts(self, catalog):
        folder = catalog.create_folder(USER, "Loop")
        with pytest.raises(ConflictError):
            catalog.update_folder(USER, folder.folder_id, parent_folder_id=folder.folder_id)

    def test_move_into_descendant_conflicts(self, catalog):
        top = catalog.create_folder(USER, "top")
        middle = catalog.create_folder(USER, "middle", top.folder_id)
        bottom = catalog.create_folder(USER, "bottom", middle.folder_id)
        with pytest.raises(ConflictError):
            catalog.update_folder(USER, top.folder_id, parent_folder_id=bottom.folder_id)
        assert catalog.snapshot(USER).find_folder(top.folder_id).parent_folder_id is None

    def test_move_to_unknown_parent(self, catalog):
        folder = catalog.create_folder(USER, "x")
        with pytest.raises(NotFoundError):
            catalog.update_folder(USER, folder.folder_id, parent_folder_id="missing")


@pytest.mark.unit
class TestDeleteFolder:
    def test_delete_empty_folder(self, catalog):
        folder = catalog.create_folder(USER, "Empty")
        catalog.delete_folder(USER, folder.folder_id)
        assert catalog.snapshot(USER).find_folder(folder.folder_id) is None

    def test_delete_folder_with_file_conflicts(self, catalog):
        folder = catalog.create_folder(USER, "Docs")
        catalog.upload_file(USER, "a.txt", b"a", parent_folder_id=folder.folder_id)
        with pytest.raises(ConflictError) as exc_info:
            catalog.delete_folder(USER, folder.folder_id)
        assert exc_info.value.details == {"files": 1, "folders": 0}
        assert catalog.snapshot(USER).find_folder(folder.folder_id) is not None

    def test_delete_folder_with_subfolder_conflicts(self, catalog):
        folder = catalog.create_folder(USER, "Docs")
        catalog.create_folder(USER, "Inner", folder.folder_id)
        with pytest.raises(ConflictError) as exc_info:
            catalog.delete_folder(USER, folder.folder_id)
        assert exc_info.value.details == {"files": 0, "folders": 1}

    def test_delete_item_dispatches_on_kind(self, catalog):
        folder = catalog.create_folder(USER, "Docs")
        file = catalog.upload_file(USER, "a.txt", b"a")
        assert isinstance(catalog.delete_item(USER, folder.folder_id), FolderRecord)
        assert isinstance(catalog.delete_item(USER, file.file_id), FileRecord)
        assert catalog.snapshot(USER).items == []

    def test_delete_unknown_item(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.delete_item(USER, "missing")


@pytest.mark.unit
class TestTreeQueries:
    def test_folder_path_from_root(self, catalog):
        top = catalog.create_folder(USER, "top")
        middle = catalog.create_folder(USER, "middle", top.folder_id)
        bottom = catalog.create_folder(USER, "bottom", middle.folder_id)
        path = catalog.folder_path(USER, bottom.folder_id)
        assert [folder.folder_name for folder in path] == ["top", "middle", "bottom"]

    def test_list_items_by_parent(self, catalog):
        folder = catalog.create_folder(USER, "Docs")
        inside = catalog.upload_file(USER, "a.txt", b"a", parent_folder_id=folder.folder_id)
        catalog.upload_file(USER, "b.txt", b"b")

        children = catalog.list_items(USER, folder.folder_id)
        assert [item.file_id for item in children] == [inside.file_id]
        assert len(catalog.list_items(USER)) == 2

    def test_list_items_unknown_parent(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.list_items(USER, "missing")

    def test_folder_cost_is_recursive(self, catalog):
        top = catalog.create_folder(USER, "top")
        inner = catalog.create_folder(USER, "inner", top.folder_id)
        catalog.upload_file(USER, "a.bin", b"x" * 100, parent_folder_id=top.folder_id)
        catalog.upload_file(USER, "b.bin", b"x" * 300, parent_folder_id=inner.folder_id)
        catalog.upload_file(USER, "c.bin", b"x" * 900)

        estimate = catalog.estimate_folder_cost(USER, top.folder_id)

        assert estimate.file_count == 2
        assert estimate.folder_count == 1
        assert estimate.total_bytes == 400
        assert estimate.total_monthly_cost == pytest.approx(effective_monthly_cost(StorageClass.STANDARD, 400))
