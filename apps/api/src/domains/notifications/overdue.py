# apps/api/src/domains/notifications/overdue.py
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from src.core.database import Database, Record
from src.domains.auth.models import Principal
from src.domains.notifications.registry import ADS_DELAY_NOTIFICATION_ROLES, TASK_DELAY
from src.shared.permissions.models import UserRole
from src.shared.resources import utcnow

logger = logging.getLogger(__name__)

# Days each onboarding milestone may take before it counts as late
MILESTONE_MAX_DAYS = {1: 3, 2: 4, 3: 5, 4: 6, 5: 10}
DEFAULT_MILESTONE_MAX_DAYS = 7


@dataclass(frozen=True)
class TaskSource:
    table: str
    owner_column: str
    # Used when the owner has no role row
    fallback_role: Optional[str] = None
    fallback_role_column: Optional[str] = None
    # Owner role is implied by the table, skip the lookup
    fixed_role: Optional[str] = None
    ads_only: bool = False


TASK_SOURCES = (
    TaskSource(
        "ads_tasks",
        owner_column="ads_manager_id",
        fixed_role=UserRole.GESTOR_ADS.value,
        ads_only=True,
    ),
    TaskSource(
        "department_tasks", owner_column="user_id", fallback_role_column="department"
    ),
    TaskSource(
        "onboarding_tasks",
        owner_column="assigned_to",
        fallback_role=UserRole.GESTOR_ADS.value,
    ),
    TaskSource("kanban_cards", owner_column="assigned_to", fallback_role="unknown"),
)


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_overdue(due_date: Optional[str], today: date) -> bool:
    """A task is overdue once its due day is over; due today is not late yet."""
    if not due_date:
        return False
    try:
        return parse_timestamp(due_date).date() < today
    except ValueError:
        logger.warning(f"Ignoring unparseable due date: {due_date}")
        return False


def open_task_filter(source: TaskSource) -> dict[str, Any]:
    """Exclusions that leave unarchived, unfinished, dated and assigned work."""
    return {
        "archived": True,
        "status": "done",
        "due_date": None,
        source.owner_column: None,
    }


@dataclass(frozen=True)
class OverdueItem:
    task_id: str
    task_table: str
    owner_id: str
    owner_role: str
    title: str
    due_date: str


class OverdueTaskScanner:
    """
    Turn overdue work into task-delay notifications.

    A notification is created at most once per (task_id, task_table), so the
    scan can run on every poll.
    """

    def __init__(self, db: Database):
        self.db = db

    async def scan(self, principal: Principal) -> tuple[int, int]:
        """
        Returns:
            Tuple of (overdue items found, notifications created)
        """
        now = utcnow()
        items: list[OverdueItem] = []
        for source in TASK_SOURCES:
            if source.ads_only and principal.role not in ADS_DELAY_NOTIFICATION_ROLES:
                continue
            items.extend(await self._overdue_tasks(source, now.date()))

        if principal.role in ADS_DELAY_NOTIFICATION_ROLES:
            items.extend(await self._late_onboardings(now))

        created = 0
        for item in items:
            if await self.create_if_missing(item):
                created += 1

        if created:
            logger.info(f"Created {created} task delay notifications")
        return len(items), created

    async def _owner_role(self, source: TaskSource, row: Record) -> str:
        if source.fixed_role:
            return source.fixed_role
        role_row = await self.db.find_first(
            "user_roles", {"user_id": row[source.owner_column]}, columns="role"
        )
        if role_row and role_row.get("role"):
            return role_row["role"]
        if source.fallback_role_column and row.get(source.fallback_role_column):
            return row[source.fallback_role_column]
        return source.fallback_role or "unknown"

    async def _overdue_tasks(self, source: TaskSource, today: date) -> list[OverdueItem]:
        rows = await self.db.find_many(source.table, exclude=open_task_filter(source))
        items = []
        for row in rows:
            if not is_overdue(row.get("due_date"), today):
                continue
            items.append(
                OverdueItem(
                    task_id=str(row["id"]),
                    task_table=source.table,
                    owner_id=row[source.owner_column],
                    owner_role=await self._owner_role(source, row),
                    title=row.get("title") or "",
                    due_date=row["due_date"],
                )
            )
        return items

    async def _late_onboardings(self, now: datetime) -> list[OverdueItem]:
        onboardings = await self.db.find_many(
            "client_onboarding",
            {"completed_at": None},
            columns="*, client:clients(id, name, assigned_ads_manager, status)",
        )
        items = []
        for onboarding in onboardings:
            client = onboarding.get("client") or {}
            if client.get("status") != "onboarding":
                continue
            manager_id = client.get("assigned_ads_manager")
            if not manager_id:
                continue

            milestone = onboarding.get("current_milestone") or 1
            max_days = MILESTONE_MAX_DAYS.get(milestone, DEFAULT_MILESTONE_MAX_DAYS)
            started_raw = (
                onboarding.get(f"milestone_{milestone}_started_at")
                or onboarding.get("created_at")
            )
            if not started_raw:
                continue
            started = parse_timestamp(started_raw)
            if (now - started).days <= max_days:
                continue

            items.append(
                OverdueItem(
                    task_id=f"onboarding_{client['id']}_{milestone}",
                    task_table="client_onboarding",
                    owner_id=manager_id,
                    owner_role=UserRole.GESTOR_ADS.value,
                    title=f"Onboarding: {client.get('name')} (Milestone {milestone})",
                    due_date=(started + timedelta(days=max_days)).isoformat(),
                )
            )
        return items

    async def create_if_missing(self, item: OverdueItem) -> bool:
        existing = await self.db.find_first(
            TASK_DELAY.table,
            {"task_id": item.task_id, "task_table": item.task_table},
            columns="id",
        )
        if existing:
            return False

        profile = await self.db.find_first(
            "profiles", {"user_id": item.owner_id}, columns="name"
        )
        await self.db.create(
            TASK_DELAY.table,
            {
                "task_id": item.task_id,
                "task_table": item.task_table,
                "task_owner_id": item.owner_id,
                "task_owner_name": (profile or {}).get("name") or "User",
                "task_owner_role": item.owner_role,
                "task_title": item.title,
                "task_due_date": item.due_date,
            },
        )
        return True
