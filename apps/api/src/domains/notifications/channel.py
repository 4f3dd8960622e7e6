# apps/api/src/domains/notifications/channel.py
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from src.core.database import Database, Record
from src.domains.auth.models import Principal
from src.domains.notifications.models import (
    AcknowledgeMode,
    AcknowledgeRequest,
    NotificationState,
)
from src.shared.permissions.models import UserRole
from src.shared.resources import utcnow

TargetRule = Callable[[Principal, Record], bool]
CreateHook = Callable[[Database, Principal, Record], Awaitable[None]]
AcknowledgeHook = Callable[[Database, Principal, Record], Awaitable[Optional[Record]]]
AcknowledgmentFields = Callable[[Principal, AcknowledgeRequest], dict[str, Any]]


def everyone(principal: Principal, notification: Record) -> bool:
    return True


def no_fields(principal: Principal, request: AcknowledgeRequest) -> dict[str, Any]:
    return {}


@dataclass(frozen=True)
class NotificationChannel:
    """
    One notification table and the rules deciding who sees and clears it.

    DISMISSAL channels keep one acknowledgment row per (notification, viewer)
    in `acknowledgment_table`; READ_FLAG channels address a single recipient
    through `target_column` and flip `read` / `read_at` on the notification.
    """

    name: str
    table: str
    mode: AcknowledgeMode
    terminal_state: NotificationState = NotificationState.DISMISSED
    eligible_roles: Optional[frozenset[UserRole]] = None
    is_target: TargetRule = everyone
    target_column: Optional[str] = None
    acknowledgment_table: Optional[str] = None
    acknowledgment_fields: AcknowledgmentFields = no_fields
    # Acknowledging again overwrites the stored fields instead of a no-op
    refresh_acknowledgment: bool = False
    order_by: str = "created_at"
    requires_challenge: bool = False
    requires_justification: bool = False
    payload_model: Optional[type[BaseModel]] = None
    before_create: Optional[CreateHook] = None
    on_acknowledge: Optional[AcknowledgeHook] = None

    def is_eligible(self, principal: Principal) -> bool:
        return self.eligible_roles is None or principal.role in self.eligible_roles

    def addresses(self, principal: Principal, notification: Record) -> bool:
        """Check if the principal is one of the notification's recipients."""
        if not self.is_eligible(principal):
            return False
        if self.target_column and notification.get(self.target_column) != principal.id:
            return False
        return self.is_target(principal, notification)

    async def list_visible(self, db: Database, principal: Principal) -> list[Record]:
        if not self.is_eligible(principal):
            return []

        where: dict[str, Any] = {}
        if self.target_column:
            where[self.target_column] = principal.id
        if self.mode is AcknowledgeMode.READ_FLAG:
            where["read"] = False

        rows = await db.find_many(
            self.table, where or None, order_by=self.order_by, descending=True
        )

        if self.mode is AcknowledgeMode.DISMISSAL:
            acknowledged = await self._acknowledged_ids(db, principal)
            rows = [row for row in rows if row.get("id") not in acknowledged]

        return [row for row in rows if self.addresses(principal, row)]

    async def _acknowledged_ids(self, db: Database, principal: Principal) -> set[str]:
        rows = await db.find_many(
            self.acknowledgment_table,
            {"user_id": principal.id},
            columns="notification_id",
        )
        return {row["notification_id"] for row in rows}

    async def find_acknowledgment(
        self, db: Database, principal: Principal, notification_id: str
    ) -> Optional[Record]:
        if self.mode is not AcknowledgeMode.DISMISSAL:
            return None
        return await db.find_first(
            self.acknowledgment_table,
            {"notification_id": notification_id, "user_id": principal.id},
        )

    async def state_for(
        self, db: Database, principal: Principal, notification: Record
    ) -> NotificationState:
        """Lifecycle state of a notification as seen by one viewer."""
        if self.mode is AcknowledgeMode.READ_FLAG:
            if notification.get("read"):
                return self.terminal_state
        elif await self.find_acknowledgment(db, principal, notification["id"]):
            return self.terminal_state

        if self.addresses(principal, notification):
            return NotificationState.VISIBLE
        return NotificationState.CREATED

    async def acknowledge(
        self,
        db: Database,
        principal: Principal,
        notification: Record,
        request: AcknowledgeRequest,
    ) -> bool:
        """
        Record the viewer's acknowledgment.

        Returns:
            True when this call moved the notification into its terminal
            state, False when it was already there
        """
        if self.mode is AcknowledgeMode.READ_FLAG:
            if notification.get("read"):
                return False
            await db.update(
                self.table,
                {"id": notification["id"]},
                {"read": True, "read_at": utcnow().isoformat()},
            )
            return True

        fields = self.acknowledgment_fields(principal, request)
        existing = await self.find_acknowledgment(db, principal, notification["id"])
        if existing:
            if self.refresh_acknowledgment and fields:
                await db.update(
                    self.acknowledgment_table,
                    {"id": existing["id"]},
                    {**fields, "updated_at": utcnow().isoformat()},
                )
            return False

        await db.create(
            self.acknowledgment_table,
            {"notification_id": notification["id"], "user_id": principal.id, **fields},
        )
        return True
