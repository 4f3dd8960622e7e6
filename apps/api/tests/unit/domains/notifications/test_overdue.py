"""
Tests for the overdue task scan feeding the task-delay channel.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from src.domains.notifications.overdue import (
    TASK_SOURCES,
    OverdueItem,
    OverdueTaskScanner,
    is_overdue,
    open_task_filter,
)
from src.shared.permissions.models import UserRole
from src.shared.resources import utcnow


def days_ago(days: int) -> str:
    return (utcnow() - timedelta(days=days)).isoformat()


class TestIsOverdue:
    def test_due_yesterday_is_overdue(self):
        assert is_overdue("2024-03-09", date(2024, 3, 10)) is True

    def test_due_today_is_not_overdue(self):
        assert is_overdue("2024-03-10T23:00:00Z", date(2024, 3, 10)) is False

    @pytest.mark.parametrize("value", [None, "", "next week"])
    def test_missing_or_unparseable_due_date(self, value):
        assert is_overdue(value, date(2024, 3, 10)) is False

    def test_open_task_filter(self):
        (kanban,) = [s for s in TASK_SOURCES if s.table == "kanban_cards"]

        assert open_task_filter(kanban) == {
            "archived": True,
            "status": "done",
            "due_date": None,
            "assigned_to": None,
        }


class TestOverdueTaskScanner:
    @pytest.mark.asyncio
    async def test_creates_one_notification_per_task(self, memory_db, make_principal):
        memory_db.seed("profiles", {"user_id": "d-1", "name": "Dora"})
        memory_db.seed("user_roles", {"user_id": "d-1", "role": "design"})
        (task,) = memory_db.seed(
            "department_tasks",
            {"user_id": "d-1", "title": "Banner", "status": "todo", "due_date": days_ago(2)},
        )
        memory_db.seed(
            "department_tasks",
            {"user_id": "d-1", "title": "Done", "status": "done", "due_date": days_ago(2)},
            {"user_id": "d-1", "title": "Future", "status": "todo", "due_date": days_ago(-3)},
        )
        scanner = OverdueTaskScanner(memory_db)
        principal = make_principal(UserRole.DESIGN, user_id="d-1")

        assert await scanner.scan(principal) == (1, 1)
        assert await scanner.scan(principal) == (1, 0)

        (notification,) = memory_db.rows("task_delay_notifications")
        assert notification["task_id"] == task["id"]
        assert notification["task_table"] == "department_tasks"
        assert notification["task_owner_name"] == "Dora"
        assert notification["task_owner_role"] == "design"

    @pytest.mark.asyncio
    async def test_closed_work_is_filtered_by_the_store(self, memory_db, make_principal):
        memory_db.seed(
            "department_tasks",
            {"user_id": "d-1", "title": "Open", "status": "todo",
             "archived": None, "due_date": days_ago(2)},
            {"user_id": "d-1", "title": "Archived", "status": "todo",
             "archived": True, "due_date": days_ago(2)},
            {"user_id": None, "title": "Unassigned", "status": "todo",
             "due_date": days_ago(2)},
        )
        memory_db.find_many = AsyncMock(wraps=memory_db.find_many)

        await OverdueTaskScanner(memory_db).scan(make_principal(UserRole.CEO))

        memory_db.find_many.assert_any_await(
            "department_tasks",
            exclude={
                "archived": True,
                "status": "done",
                "due_date": None,
                "user_id": None,
            },
        )
        (notification,) = memory_db.rows("task_delay_notifications")
        assert notification["task_title"] == "Open"

    @pytest.mark.asyncio
    async def test_department_used_when_owner_has_no_role(self, memory_db, make_principal):
        memory_db.seed(
            "department_tasks",
            {"user_id": "x-1", "title": "Edit", "status": "doing",
             "department": "editor_video", "due_date": days_ago(1)},
        )

        await OverdueTaskScanner(memory_db).scan(make_principal(UserRole.CEO))

        (notification,) = memory_db.rows("task_delay_notifications")
        assert notification["task_owner_role"] == "editor_video"
        assert notification["task_owner_name"] == "User"

    @pytest.mark.asyncio
    async def test_ads_tasks_only_scanned_for_ads_supervisors(
        self, memory_db, make_principal
    ):
        memory_db.seed(
            "ads_tasks",
            {"ads_manager_id": "ads-1", "title": "Campaign", "status": "todo",
             "due_date": days_ago(3)},
        )

        assert await OverdueTaskScanner(memory_db).scan(
            make_principal(UserRole.DESIGN)
        ) == (0, 0)
        assert await OverdueTaskScanner(memory_db).scan(
            make_principal(UserRole.GESTOR_ADS)
        ) == (1, 1)
        (notification,) = memory_db.rows("task_delay_notifications")
        assert notification["task_owner_role"] == "gestor_ads"

    @pytest.mark.asyncio
    async def test_late_onboarding_milestone(self, memory_db, make_principal):
        client = {
            "id": "c-1",
            "name": "Acme",
            "assigned_ads_manager": "ads-1",
            "status": "onboarding",
        }
        memory_db.seed(
            "client_onboarding",
            {
                "client_id": "c-1",
                "current_milestone": 2,
                "milestone_2_started_at": days_ago(5),
                "completed_at": None,
                "client": client,
            },
            {
                "client_id": "c-2",
                "current_milestone": 2,
                "milestone_2_started_at": days_ago(2),
                "completed_at": None,
                "client": {**client, "id": "c-2"},
            },
            {
                "client_id": "c-3",
                "current_milestone": 1,
                "milestone_1_started_at": days_ago(30),
                "completed_at": None,
                "client": {**client, "id": "c-3", "status": "active"},
            },
        )

        overdue, created = await OverdueTaskScanner(memory_db).scan(
            make_principal(UserRole.SUCESSO_CLIENTE)
        )

        assert (overdue, created) == (1, 1)
        (notification,) = memory_db.rows("task_delay_notifications")
        assert notification["task_id"] == "onboarding_c-1_2"
        assert notification["task_table"] == "client_onboarding"
        assert notification["task_owner_id"] == "ads-1"

    @pytest.mark.asyncio
    async def test_create_if_missing(self, memory_db):
        item = OverdueItem(
            task_id="t-1",
            task_table="kanban_cards",
            owner_id="u-1",
            owner_role="unknown",
            title="Card",
            due_date="2024-01-01",
        )
        scanner = OverdueTaskScanner(memory_db)

        assert await scanner.create_if_missing(item) is True
        assert await scanner.create_if_missing(item) is False
        assert len(memory_db.rows("task_delay_notifications")) == 1
