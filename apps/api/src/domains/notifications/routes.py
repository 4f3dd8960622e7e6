# apps/api/src/domains/notifications/routes.py
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from src.core.database import Database, get_db
from src.core.settings import settings
from src.domains.auth.dependencies import get_current_principal
from src.domains.auth.models import Principal
from src.domains.notifications.models import (
    AcknowledgeRequest,
    AcknowledgeResponse,
    ChallengeResponse,
    JustificationArchiveRequest,
    JustificationListResponse,
    NotificationListResponse,
    NotificationResponse,
    OverdueScanResponse,
)
from src.domains.notifications.service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "/churn/challenge",
    response_model=ChallengeResponse,
    operation_id="getChurnChallenge",
)
async def get_churn_challenge(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> ChallengeResponse:
    """Question that must be answered to dismiss a churn alert."""
    challenge = NotificationService(db).challenge()
    return ChallengeResponse(question=challenge.question)


@router.post(
    "/task_delay/scan",
    response_model=OverdueScanResponse,
    operation_id="scanOverdueTasks",
)
async def scan_overdue_tasks(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> OverdueScanResponse:
    overdue, created = await NotificationService(db).scan_overdue(principal)
    return OverdueScanResponse(overdue=overdue, created=created)


@router.get(
    "/task_delay/justifications",
    response_model=JustificationListResponse,
    operation_id="listDelayJustifications",
)
async def list_delay_justifications(
    owner_role: Optional[str] = Query(
        None, description="Only justifications for tasks owned by this role"
    ),
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> JustificationListResponse:
    return await NotificationService(db).list_justifications(principal, owner_role)


@router.patch(
    "/task_delay/justifications/{justification_id}",
    operation_id="archiveDelayJustification",
)
async def archive_delay_justification(
    justification_id: str,
    request: JustificationArchiveRequest,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> dict[str, str]:
    await NotificationService(db).archive_justification(
        principal, justification_id, request.archive
    )
    return {
        "message": "Justification archived"
        if request.archive
        else "Justification restored"
    }


@router.get(
    "/{channel}",
    response_model=NotificationListResponse,
    operation_id="listNotifications",
)
async def list_notifications(
    channel: str,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> NotificationListResponse:
    notifications = await NotificationService(db).list_visible(channel, principal)
    return NotificationListResponse(
        channel=channel,
        poll_interval_seconds=settings.NOTIFICATION_POLL_SECONDS,
        notifications=notifications,
    )


@router.post(
    "/{channel}",
    response_model=NotificationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createNotification",
)
async def create_notification(
    channel: str,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> NotificationResponse:
    return await NotificationService(db).create(channel, payload, principal)


@router.post(
    "/{channel}/{notification_id}/acknowledge",
    response_model=AcknowledgeResponse,
    operation_id="acknowledgeNotification",
)
async def acknowledge_notification(
    channel: str,
    notification_id: str,
    request: Optional[AcknowledgeRequest] = None,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> AcknowledgeResponse:
    """
    Dismiss, justify or mark a notification as read.

    Safe to repeat: acknowledging twice leaves exactly one acknowledgment.
    """
    return await NotificationService(db).acknowledge(
        channel, principal, notification_id, request or AcknowledgeRequest()
    )
