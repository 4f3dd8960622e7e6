# apps/api/src/domains/notifications/service.py
import logging
from typing import Any, Optional

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.core.database import Database, Record, StoreError, is_unique_violation
from src.domains.auth.models import Principal
from src.domains.notifications.challenge import MathChallenge
from src.domains.notifications.exceptions import (
    ChallengeFailedError,
    ChannelNotCreatableError,
    JustificationRequiredError,
    NotificationNotAddressedError,
    NotificationNotFoundError,
)
from src.domains.notifications.models import (
    AcknowledgeRequest,
    AcknowledgeResponse,
    JustificationListResponse,
    JustificationResponse,
    NotificationResponse,
    NotificationState,
)
from src.domains.notifications.overdue import OverdueTaskScanner
from src.domains.notifications.registry import TASK_DELAY, get_channel
from src.shared.exceptions import (
    DuplicateRecordError,
    NotAuthorizedError,
    ResourceNotFoundError,
    TransientStoreError,
)
from src.shared.permissions.services import can_view_role
from src.shared.resources import utcnow

logger = logging.getLogger(__name__)

ACKNOWLEDGE_MESSAGES = {
    NotificationState.DISMISSED: "Notification dismissed",
    NotificationState.JUSTIFIED: "Justification saved",
    NotificationState.ACTED_UPON: "Notification marked as read",
}


def to_response(
    channel_name: str, record: Record, state: NotificationState
) -> NotificationResponse:
    data = {k: v for k, v in record.items() if k not in ("id", "created_at")}
    return NotificationResponse(
        id=str(record["id"]),
        channel=channel_name,
        state=state,
        created_at=record.get("created_at"),
        data=data,
    )


class NotificationService:
    """Channel-agnostic notification flows for the current principal."""

    def __init__(self, db: Database):
        self.db = db

    async def list_visible(
        self, channel_name: str, principal: Principal
    ) -> list[NotificationResponse]:
        channel = get_channel(channel_name)
        try:
            records = await channel.list_visible(self.db, principal)
        except StoreError as e:
            logger.error(f"Failed to list {channel.name} notifications: {e.message}")
            return []
        return [
            to_response(channel.name, record, NotificationState.VISIBLE)
            for record in records
        ]

    async def create(
        self, channel_name: str, payload: dict[str, Any], principal: Principal
    ) -> NotificationResponse:
        channel = get_channel(channel_name)
        if channel.payload_model is None:
            raise ChannelNotCreatableError()

        try:
            body = channel.payload_model.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors())

        record = body.to_record(principal)
        try:
            if channel.before_create:
                await channel.before_create(self.db, principal, record)
            created = await self.db.create(channel.table, record)
        except StoreError as e:
            logger.error(
                f"Failed to create {channel.name} notification: {e.code} {e.message}"
            )
            if is_unique_violation(e):
                raise DuplicateRecordError("This notification already exists")
            raise TransientStoreError()

        logger.info(f"Created {channel.name} notification {created.get('id')}")
        return to_response(channel.name, created, NotificationState.CREATED)

    async def _get_notification(self, table: str, notification_id: str) -> Record:
        try:
            record = await self.db.find_first(table, {"id": notification_id})
        except StoreError as e:
            logger.error(f"Failed to fetch {table} {notification_id}: {e.message}")
            raise TransientStoreError()
        if not record:
            raise NotificationNotFoundError()
        return record

    async def acknowledge(
        self,
        channel_name: str,
        principal: Principal,
        notification_id: str,
        request: AcknowledgeRequest,
    ) -> AcknowledgeResponse:
        """
        Move a notification into its terminal state for the principal.

        Repeating the call is a successful no-op and never re-runs the side
        effect. A failed write leaves the notification visible.
        """
        channel = get_channel(channel_name)
        notification = await self._get_notification(channel.table, notification_id)
        if not channel.addresses(principal, notification):
            raise NotificationNotAddressedError()

        if channel.requires_challenge:
            self._check_challenge(request)
        if channel.requires_justification and not (request.justification or "").strip():
            raise JustificationRequiredError()

        try:
            newly = await channel.acknowledge(self.db, principal, notification, request)
        except StoreError as e:
            logger.error(
                f"Failed to acknowledge {channel.name} notification "
                f"{notification_id}: {e.message}"
            )
            raise TransientStoreError("Could not save, try again")

        follow_up_id: Optional[str] = None
        if newly and channel.on_acknowledge:
            follow_up = await self._run_side_effect(channel.name, principal, notification)
            if follow_up and follow_up.get("id"):
                follow_up_id = str(follow_up["id"])

        return AcknowledgeResponse(
            message=ACKNOWLEDGE_MESSAGES[channel.terminal_state],
            state=channel.terminal_state,
            newly_acknowledged=newly,
            follow_up_task_id=follow_up_id,
        )

    def _check_challenge(self, request: AcknowledgeRequest) -> None:
        if not request.challenge or request.answer is None:
            raise ChallengeFailedError("Answer the challenge to dismiss this alert")
        try:
            challenge = MathChallenge.parse(request.challenge)
        except ValueError:
            raise ChallengeFailedError("Invalid challenge")
        if not challenge.verify(request.answer):
            raise ChallengeFailedError()

    async def _run_side_effect(
        self, channel_name: str, principal: Principal, notification: Record
    ) -> Optional[Record]:
        # Best effort: the acknowledgment itself already succeeded
        channel = get_channel(channel_name)
        try:
            return await channel.on_acknowledge(self.db, principal, notification)
        except (StoreError, HTTPException) as e:
            logger.error(
                f"Side effect for {channel_name} notification {notification['id']} "
                f"failed: {getattr(e, 'message', None) or getattr(e, 'detail', e)}"
            )
            return None

    def challenge(self) -> MathChallenge:
        return MathChallenge.generate()

    async def scan_overdue(self, principal: Principal) -> tuple[int, int]:
        try:
            return await OverdueTaskScanner(self.db).scan(principal)
        except StoreError as e:
            logger.error(f"Overdue task scan failed: {e.message}")
            raise TransientStoreError()

    async def list_justifications(
        self, principal: Principal, owner_role: Optional[str] = None
    ) -> JustificationListResponse:
        """
        Justifications for overdue tasks.

        Without `owner_role` this is the CEO's full review list; with it, any
        principal allowed to see that role gets the justifications for tasks
        owned by it.
        """
        if owner_role is None and not principal.is_ceo:
            raise NotAuthorizedError("Only the CEO can review all justifications")
        if owner_role is not None and not can_view_role(principal.role, owner_role):
            raise NotAuthorizedError("You cannot view this role's justifications")

        try:
            rows = await self.db.find_many(
                TASK_DELAY.acknowledgment_table,
                columns=f"*, notification:{TASK_DELAY.table}(*)",
                order_by="created_at",
                descending=True,
            )
            if owner_role is not None:
                rows = [
                    row
                    for row in rows
                    if (row.get("notification") or {}).get("task_owner_role")
                    == owner_role
                ]
            names = await self._profile_names({row["user_id"] for row in rows})
        except StoreError as e:
            logger.error(f"Failed to list justifications: {e.message}")
            return JustificationListResponse(active=[], archived=[])

        items = [self._justification(row, names) for row in rows]
        return JustificationListResponse(
            active=[item for item in items if not item.archived],
            archived=[item for item in items if item.archived],
        )

    async def _profile_names(self, user_ids: set[str]) -> dict[str, str]:
        if not user_ids:
            return {}
        profiles = await self.db.find_many(
            "profiles", {"user_id": sorted(user_ids)}, columns="user_id, name"
        )
        return {p["user_id"]: p.get("name") for p in profiles}

    @staticmethod
    def _justification(row: Record, names: dict[str, str]) -> JustificationResponse:
        notification = row.get("notification") or {}
        return JustificationResponse(
            id=str(row["id"]),
            notification_id=str(row["notification_id"]),
            user_id=row["user_id"],
            user_name=names.get(row["user_id"]) or "User",
            user_role=row.get("user_role"),
            justification=row.get("justification") or "",
            archived=bool(row.get("archived")),
            archived_at=row.get("archived_at"),
            created_at=row.get("created_at"),
            task_title=notification.get("task_title"),
            task_owner_role=notification.get("task_owner_role"),
        )

    async def archive_justification(
        self, principal: Principal, justification_id: str, archive: bool
    ) -> None:
        if not principal.is_ceo:
            raise NotAuthorizedError("Only the CEO can archive justifications")
        fields = {
            "archived": archive,
            "archived_at": utcnow().isoformat() if archive else None,
            "archived_by": principal.id if archive else None,
        }
        try:
            rows = await self.db.update(
                TASK_DELAY.acknowledgment_table, {"id": justification_id}, fields
            )
        except StoreError as e:
            logger.error(f"Failed to archive justification {justification_id}: {e.message}")
            raise TransientStoreError()
        if not rows:
            raise ResourceNotFoundError("Justification")
