"""
Tests for the scheduled notification checks.
"""

from unittest.mock import patch

import httpx
import pytest

from src.core.database import Database, get_db
from src.domains.scheduled_checks.service import SCHEDULED_CHECKS, run_scheduled_checks
from src.main import app


class TestRunScheduledChecks:
    @pytest.mark.asyncio
    async def test_runs_every_check(self, memory_db):
        results = await run_scheduled_checks(memory_db)

        assert len(results) == len(SCHEDULED_CHECKS) == 14
        assert all(results.values())
        assert [call[0] for call in memory_db.rpc_calls] == [
            routine for _, routine in SCHEDULED_CHECKS
        ]

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_rest(self, memory_db):
        memory_db.fail("rpc", "check_stalled_cards")

        results = await run_scheduled_checks(memory_db)

        assert results["stalled_cards"] is False
        assert results["overdue_deliveries"] is True
        assert sum(results.values()) == 13

    @pytest.mark.asyncio
    async def test_network_failure_is_isolated(self, failing_supabase_client):
        client = failing_supabase_client(
            {"check_stalled_cards": httpx.ConnectError("connection reset")}
        )

        results = await run_scheduled_checks(Database(client))

        assert results["stalled_cards"] is False
        assert results["overdue_deliveries"] is True
        assert sum(results.values()) == 13


class TestScheduledChecksRoute:
    def test_open_when_no_secret_configured(self, client, memory_db):
        app.dependency_overrides[get_db] = lambda: memory_db

        response = client.post("/api/v1/scheduled-checks/run")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Scheduled notifications checked"
        assert body["results"]["no_clients_moved"] is True

    def test_secret_required_when_configured(self, client, memory_db):
        app.dependency_overrides[get_db] = lambda: memory_db

        with patch(
            "src.domains.scheduled_checks.routes.settings.SCHEDULED_CHECKS_SECRET",
            "cron-secret",
        ):
            missing = client.post("/api/v1/scheduled-checks/run")
            wrong = client.post(
                "/api/v1/scheduled-checks/run", headers={"X-Cron-Secret": "nope"}
            )
            right = client.post(
                "/api/v1/scheduled-checks/run",
                headers={"X-Cron-Secret": "cron-secret"},
            )

        assert missing.status_code == 401
        assert wrong.status_code == 401
        assert right.status_code == 200
        assert memory_db.rpc_calls
