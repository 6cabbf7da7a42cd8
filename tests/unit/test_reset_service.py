"""
Unit tests for ResetService.

Run: pytest tests/unit/test_reset_service.py -v
"""

import pytest

from exceptions import AdminClientUnavailableError
from services.reset_service import ResetService, is_protected_table
from tests.factories import MockAPIError


@pytest.fixture
def reset(destination):
    return ResetService(destination)


class TestResetPreconditions:

    def test_requires_admin_client(self):
        with pytest.raises(AdminClientUnavailableError) as exc_info:
            ResetService(None)

        assert exc_info.value.status_code == 503
        assert "Service role key is required" in exc_info.value.message

    def test_connection_failure_reported_for_tables(self, reset, mock_supabase):
        mock_supabase.set_error("products", ConnectionRefusedError("connection refused"), op="select")
        mock_supabase.set_rpc_data("get_tables", ["products"])

        result = reset.delete_all_table_data()

        assert result.success is False
        assert result.results[0].table == "connection"
        assert "connection refused" in result.results[0].error
        assert mock_supabase.deleted == []

    def test_connection_failure_reported_for_storage(self, reset, mock_supabase):
        mock_supabase.set_error("products", ConnectionRefusedError("connection refused"), op="select")
        mock_supabase.storage.buckets = {"images": ["a.png"]}

        result = reset.delete_all_storage_files()

        assert result.success is False
        assert result.results[0].bucket == "connection"
        assert mock_supabase.storage.removed == []


class TestProtectedTables:

    @pytest.mark.parametrize("table", ["_prisma_migrations", "schema_migrations", "spatial_ref_sys"])
    def test_protected(self, table):
        assert is_protected_table(table) is True

    def test_regular_table(self):
        assert is_protected_table("products") is False


class TestDeleteAllTableData:
    """Tests for ResetService.delete_all_table_data()"""

    def test_one_delete_per_unprotected_table(self, reset, mock_supabase):
        mock_supabase.set_rpc_data(
            "get_tables",
            ["products", "deliveries", "schema_migrations", "_internal"]
        )

        result = reset.delete_all_table_data()

        assert result.success is True
        assert result.message == "Cleared data from 2 tables"
        assert [t for t, _ in mock_supabase.deleted] == ["products", "deliveries"]
        for _, filters in mock_supabase.deleted:
            assert filters == [("neq", "id", "00000000-0000-0000-0000-000000000000")]

    def test_table_failure_does_not_stop_others(self, reset, mock_supabase):
        mock_supabase.set_rpc_data("get_tables", ["products", "deliveries"])
        mock_supabase.set_error("products", MockAPIError("permission denied"), op="delete")

        result = reset.delete_all_table_data()

        assert result.success is True
        assert result.message == "Cleared data from 1 tables"
        by_table = {r.table: r for r in result.results}
        assert by_table["products"].success is False
        assert by_table["products"].error == "permission denied"
        assert by_table["deliveries"].success is True

    def test_no_tables(self, reset, mock_supabase):
        result = reset.delete_all_table_data()

        assert result.success is True
        assert result.message == "No tables found to clear"
        assert result.results == []

    def test_list_tables_failure(self, reset, mock_supabase):
        mock_supabase.set_rpc_error("get_tables", MockAPIError("function get_tables() does not exist"))

        result = reset.delete_all_table_data()

        assert result.success is False
        assert result.message.startswith("Failed to get tables:")


class TestDeleteAllStorageFiles:
    """Tests for ResetService.delete_all_storage_files()"""

    def test_removes_every_file(self, reset, mock_supabase):
        mock_supabase.storage.buckets = {
            "images": ["a.png", "b.png", "c.png"],
            "documents": [],
        }

        result = reset.delete_all_storage_files()

        assert result.success is True
        assert result.message == "Processed 2 storage buckets"
        by_bucket = {r.bucket: r for r in result.results}
        assert by_bucket["images"].files_deleted == 3
        assert by_bucket["documents"].success is True
        assert by_bucket["documents"].files_deleted == 0
        assert mock_supabase.storage.removed == [("images", ["a.png", "b.png", "c.png"])]

    def test_bucket_errors_continue(self, reset, mock_supabase):
        mock_supabase.storage.buckets = {"images": ["a.png"], "documents": ["x.pdf"], "avatars": ["me.jpg"]}
        mock_supabase.storage.list_errors["images"] = PermissionError("forbidden")
        mock_supabase.storage.remove_errors["documents"] = RuntimeError("remove failed")

        result = reset.delete_all_storage_files()

        by_bucket = {r.bucket: r for r in result.results}
        assert by_bucket["images"].success is False
        assert by_bucket["images"].error == "forbidden"
        assert by_bucket["documents"].success is False
        assert by_bucket["documents"].error == "remove failed"
        assert by_bucket["avatars"].files_deleted == 1
        assert result.message == "Processed 3 storage buckets"

    def test_counts_files_beyond_first_page_and_in_folders(self, reset, mock_supabase):
        """N files across pages and folders give files_deleted N."""
        files = [f"photo-{i:03d}.jpg" for i in range(230)] + ["2025/03/receipt.pdf", "2025/label.pdf"]
        mock_supabase.storage.buckets = {"images": files}

        result = reset.delete_all_storage_files()

        assert result.results[0].files_deleted == 232
        removed_bucket, removed_paths = mock_supabase.storage.removed[0]
        assert removed_bucket == "images"
        assert sorted(removed_paths) == sorted(files)

    def test_no_buckets(self, reset, mock_supabase):
        result = reset.delete_all_storage_files()

        assert result.success is True
        assert result.message == "No storage buckets found"

    def test_list_buckets_failure(self, reset, mock_supabase):
        mock_supabase.storage.list_buckets_error = PermissionError("forbidden")

        result = reset.delete_all_storage_files()

        assert result.success is False
        assert result.message == "Failed to list buckets: forbidden"
