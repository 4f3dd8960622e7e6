# apps/api/src/domains/notifications/registry.py
from datetime import timedelta
from types import MappingProxyType
from typing import Any, Mapping, Optional

from src.core.database import Database, Record
from src.domains.auth.models import Principal
from src.domains.notifications.channel import NotificationChannel
from src.domains.notifications.exceptions import UnknownChannelError
from src.domains.notifications.models import (
    AcknowledgeMode,
    AcknowledgeRequest,
    AdsNoteNotificationCreate,
    ChurnNotificationCreate,
    CompletionNotificationCreate,
    NotificationState,
)
from src.domains.tasks.service import DepartmentTaskService
from src.shared.permissions.models import UserRole
from src.shared.resources import utcnow

CHURN_NOTIFICATION_ROLES = frozenset(
    {
        UserRole.CEO,
        UserRole.GESTOR_ADS,
        UserRole.GESTOR_PROJETOS,
        UserRole.SUCESSO_CLIENTE,
        UserRole.FINANCEIRO,
        UserRole.CONSULTOR_COMERCIAL,
    }
)

# Roles that get a follow-up task when they dismiss a churn alert
CHURN_TASK_ROLES = frozenset(
    {UserRole.GESTOR_ADS, UserRole.GESTOR_PROJETOS, UserRole.SUCESSO_CLIENTE}
)

ADS_DELAY_NOTIFICATION_ROLES = frozenset(
    {UserRole.GESTOR_ADS, UserRole.SUCESSO_CLIENTE, UserRole.GESTOR_PROJETOS, UserRole.CEO}
)

OTHER_DELAY_NOTIFICATION_ROLES = frozenset({UserRole.GESTOR_PROJETOS, UserRole.CEO})

NOTE_TITLE_LENGTH = 80


async def schedule_churn_review(
    db: Database, principal: Principal, notification: Record
) -> Optional[Record]:
    """Commit the dismissing user to a review meeting with the churned client."""
    if principal.role not in CHURN_TASK_ROLES:
        return None

    client_name = notification.get("client_name") or "client"
    return await DepartmentTaskService(db).create_follow_up(
        user_id=principal.id,
        role=principal.role,
        title=f"Schedule churn review meeting - {client_name}",
        description=(
            f"The client {client_name} entered churn. Schedule a meeting to "
            "understand the reasons and collect feedback."
        ),
        due_date=utcnow() + timedelta(days=1),
        related_client_id=notification.get("client_id"),
    )


def truncate_note(content: str, length: int = NOTE_TITLE_LENGTH) -> str:
    if len(content) > length:
        return content[:length] + "..."
    return content


async def create_note_task(
    db: Database, principal: Principal, record: Record
) -> None:
    """Every note left for an ads manager lands on their task list."""
    await db.create(
        "ads_tasks",
        {
            "ads_manager_id": record["ads_manager_id"],
            "title": f"New note ({truncate_note(record['note_content'])})",
            "description": (
                f"Note added by {record.get('created_by_name')} on client "
                f"{record.get('client_name')}:\n\n{record['note_content']}"
            ),
            "task_type": "daily",
            "status": "todo",
            "priority": "high",
        },
    )


def is_task_delay_target(principal: Principal, notification: Record) -> bool:
    """
    Decide who is told about an overdue task.

    Tasks owned by an ads manager reach the ads managers themselves (own
    tasks only), customer success, project managers and the CEO. Any other
    task reaches its owner plus project managers and the CEO.
    """
    if notification.get("task_owner_role") == UserRole.GESTOR_ADS.value:
        if principal.role not in ADS_DELAY_NOTIFICATION_ROLES:
            return False
        if principal.role == UserRole.GESTOR_ADS:
            return notification.get("task_owner_id") == principal.id
        return True

    if notification.get("task_owner_id") == principal.id:
        return True
    return principal.role in OTHER_DELAY_NOTIFICATION_ROLES


def justification_fields(
    principal: Principal, request: AcknowledgeRequest
) -> dict[str, Any]:
    return {
        "justification": (request.justification or "").strip(),
        "user_role": principal.role.value,
    }


def named_justification_fields(
    principal: Principal, request: AcknowledgeRequest
) -> dict[str, Any]:
    return {
        "justification": (request.justification or "").strip(),
        "user_name": principal.name or "User",
    }


def math_answer_fields(
    principal: Principal, request: AcknowledgeRequest
) -> dict[str, Any]:
    return {"math_answer": request.answer}


def is_ads_task_delay_target(principal: Principal, notification: Record) -> bool:
    """Ads managers only hear about their own overdue tasks."""
    if principal.role == UserRole.GESTOR_ADS:
        return notification.get("ads_manager_id") == principal.id
    return True


def _card_delay_channel(department: str) -> NotificationChannel:
    # Overdue kanban cards are broadcast to every viewer until dismissed
    return NotificationChannel(
        name=f"{department}_delay",
        table=f"{department}_delay_notifications",
        mode=AcknowledgeMode.DISMISSAL,
        terminal_state=NotificationState.DISMISSED,
        acknowledgment_table=f"{department}_notification_dismissals",
    )


def _completion_channel(name: str, table: str) -> NotificationChannel:
    return NotificationChannel(
        name=name,
        table=table,
        mode=AcknowledgeMode.READ_FLAG,
        terminal_state=NotificationState.ACTED_UPON,
        target_column="requester_id",
        payload_model=CompletionNotificationCreate,
    )


CHURN = NotificationChannel(
    name="churn",
    table="churn_notifications",
    mode=AcknowledgeMode.DISMISSAL,
    terminal_state=NotificationState.DISMISSED,
    eligible_roles=CHURN_NOTIFICATION_ROLES,
    acknowledgment_table="churn_notification_dismissals",
    acknowledgment_fields=math_answer_fields,
    order_by="notification_date",
    requires_challenge=True,
    payload_model=ChurnNotificationCreate,
    on_acknowledge=schedule_churn_review,
)

TASK_DELAY = NotificationChannel(
    name="task_delay",
    table="task_delay_notifications",
    mode=AcknowledgeMode.DISMISSAL,
    terminal_state=NotificationState.JUSTIFIED,
    is_target=is_task_delay_target,
    acknowledgment_table="task_delay_justifications",
    acknowledgment_fields=justification_fields,
    refresh_acknowledgment=True,
    requires_justification=True,
)

COMERCIAL_DELAY = NotificationChannel(
    name="comercial_delay",
    table="comercial_delay_notifications",
    mode=AcknowledgeMode.DISMISSAL,
    terminal_state=NotificationState.JUSTIFIED,
    target_column="user_id",
    acknowledgment_table="comercial_delay_justifications",
    acknowledgment_fields=named_justification_fields,
    requires_justification=True,
)

ADS_TASK_DELAY = NotificationChannel(
    name="ads_task_delay",
    table="ads_task_delay_notifications",
    mode=AcknowledgeMode.DISMISSAL,
    terminal_state=NotificationState.JUSTIFIED,
    eligible_roles=ADS_DELAY_NOTIFICATION_ROLES,
    is_target=is_ads_task_delay_target,
    acknowledgment_table="ads_task_delay_justifications",
    acknowledgment_fields=justification_fields,
    refresh_acknowledgment=True,
    requires_justification=True,
)

ADS_NOTE = NotificationChannel(
    name="ads_note",
    table="ads_note_notifications",
    mode=AcknowledgeMode.READ_FLAG,
    terminal_state=NotificationState.ACTED_UPON,
    target_column="ads_manager_id",
    payload_model=AdsNoteNotificationCreate,
    before_create=create_note_task,
)

CHANNELS: Mapping[str, NotificationChannel] = MappingProxyType(
    {
        channel.name: channel
        for channel in (
            CHURN,
            TASK_DELAY,
            COMERCIAL_DELAY,
            ADS_TASK_DELAY,
            _card_delay_channel("design"),
            _card_delay_channel("dev"),
            _card_delay_channel("video"),
            _card_delay_channel("produtora"),
            ADS_NOTE,
            _completion_channel("design_completion", "design_completion_notifications"),
            _completion_channel("dev_completion", "dev_completion_notifications"),
            _completion_channel(
                "produtora_completion", "produtora_completion_notifications"
            ),
            _completion_channel(
                "atrizes_completion", "atrizes_completion_notifications"
            ),
        )
    }
)


def get_channel(name: str) -> NotificationChannel:
    try:
        return CHANNELS[name]
    except KeyError:
        raise UnknownChannelError(f"Unknown notification channel: {name}")
