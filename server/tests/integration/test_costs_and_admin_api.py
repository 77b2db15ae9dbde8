"""Integration tests for cost, billing and admin endpoints."""

import pytest

from tierstore.state import CATALOG_RECORD

API = "/api/v1"
HEADERS = {"X-User-Id": "alice"}


@pytest.mark.integration
class TestCostEndpoints:
    def test_pricing_table(self, client):
        rows = client.get(f"{API}/costs/pricing").json()
        assert len(rows) == 7
        standard = next(row for row in rows if row["storage_class"] == "STANDARD")
        assert standard["effective_unit_cost"] == pytest.approx(0.02875)

    def test_breakdown_groups_by_version_class(self, client):
        client.post(f"{API}/files/upload", params={"name": "a.txt"}, content=b"aaaa", headers=HEADERS)
        client.post(
            f"{API}/files/upload",
            params={"name": "b.txt", "storage_class": "STANDARD_IA"},
            content=b"bb",
            headers=HEADERS,
        )
        body = client.get(f"{API}/costs/breakdown", headers=HEADERS).json()
        assert body["file_count"] == 2
        assert body["total_bytes"] == 6
        assert body["breakdown"]["STANDARD"]["total_bytes"] == 4
        assert body["breakdown"]["STANDARD_IA"]["total_bytes"] == 2

    def test_billing_summary(self, client):
        client.post(f"{API}/files/upload", params={"name": "a.txt"}, content=b"a", headers=HEADERS)
        body = client.get(f"{API}/billing/summary", headers=HEADERS).json()
        assert body["activity_count"] == 1
        assert body["breakdown"]["upload"]["count"] == 1
        assert body["total_cost"] > 0

    def test_billing_summary_window(self, client):
        client.post(f"{API}/files/upload", params={"name": "a.txt"}, content=b"a", headers=HEADERS)
        body = client.get(
            f"{API}/billing/summary", params={"start": "2030-01-01T00:00:00Z"}, headers=HEADERS
        ).json()
        assert body["activity_count"] == 0


@pytest.mark.integration
class TestMigrationEndpoint:
    def test_migrate_legacy_is_idempotent(self, client, tmp_store):
        tmp_store.write_user_record(
            "legacy-user",
            CATALOG_RECORD,
            [{"id": "f-1", "originalName": "old.txt", "s3Key": "legacy-user/f-1", "fileSize": 12}],
        )

        first = client.post(f"{API}/admin/migrate-legacy")
        second = client.post(f"{API}/admin/migrate-legacy")

        assert first.status_code == 200
        assert first.json()["total_migrated"] == 1
        assert second.json()["total_migrated"] == 0
        assert second.json()["total_already_current"] == 1

        history = client.get(f"{API}/files/f-1/versions", headers={"X-User-Id": "legacy-user"}).json()
        assert history["versions"][0]["comment"] == "Initial version (migrated from legacy)"
