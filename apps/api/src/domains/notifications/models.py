# apps/api/src/domains/notifications/models.py
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from src.domains.auth.models import Principal
from src.shared.resources import utcnow


class NotificationState(str, Enum):
    """
    Lifecycle of a notification for one viewer.

    DISMISSED, JUSTIFIED and ACTED_UPON are terminal; a notification never
    returns to VISIBLE for that viewer.
    """

    CREATED = "created"
    VISIBLE = "visible"
    DISMISSED = "dismissed"
    JUSTIFIED = "justified"
    ACTED_UPON = "acted_upon"


class AcknowledgeMode(str, Enum):
    # One acknowledgment row per (notification, viewer)
    DISMISSAL = "dismissal"
    # Single-recipient notifications carrying their own read flag
    READ_FLAG = "read_flag"


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Field must not be empty")
    return value


class ChurnNotificationCreate(BaseModel):
    client_id: str
    client_name: str

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str) -> str:
        return _require_text(v)

    def to_record(self, principal: Principal) -> dict[str, Any]:
        return {
            "client_id": self.client_id,
            "client_name": self.client_name,
            "notification_date": utcnow().isoformat(),
        }


class AdsNoteNotificationCreate(BaseModel):
    ads_manager_id: str
    client_id: str
    client_name: str
    note_id: str
    note_content: str

    @field_validator("note_content")
    @classmethod
    def validate_note_content(cls, v: str) -> str:
        return _require_text(v)

    def to_record(self, principal: Principal) -> dict[str, Any]:
        return {
            "ads_manager_id": self.ads_manager_id,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "note_id": self.note_id,
            "note_content": self.note_content,
            "created_by": principal.id,
            "created_by_name": principal.name,
            "read": False,
        }


class CompletionNotificationCreate(BaseModel):
    card_id: str
    card_title: str
    requester_id: str
    requester_name: str

    def to_record(self, principal: Principal) -> dict[str, Any]:
        return {
            "card_id": self.card_id,
            "card_title": self.card_title,
            "requester_id": self.requester_id,
            "requester_name": self.requester_name,
            "completed_by": principal.id,
            "completed_by_name": principal.name,
            "read": False,
        }


class AcknowledgeRequest(BaseModel):
    challenge: Optional[str] = Field(
        None, description="Challenge question as returned by the challenge endpoint"
    )
    answer: Optional[str] = None
    justification: Optional[str] = None


class NotificationResponse(BaseModel):
    id: str
    channel: str
    state: NotificationState
    created_at: Optional[str] = None
    data: dict[str, Any]


class NotificationListResponse(BaseModel):
    channel: str
    poll_interval_seconds: int
    notifications: list[NotificationResponse]


class AcknowledgeResponse(BaseModel):
    message: str
    state: NotificationState
    newly_acknowledged: bool
    follow_up_task_id: Optional[str] = None


class ChallengeResponse(BaseModel):
    question: str


class OverdueScanResponse(BaseModel):
    overdue: int
    created: int


class JustificationResponse(BaseModel):
    id: str
    notification_id: str
    user_id: str
    user_name: str
    user_role: Optional[str] = None
    justification: str
    archived: bool
    archived_at: Optional[str] = None
    created_at: Optional[str] = None
    task_title: Optional[str] = None
    task_owner_role: Optional[str] = None


class JustificationListResponse(BaseModel):
    active: list[JustificationResponse]
    archived: list[JustificationResponse]


class JustificationArchiveRequest(BaseModel):
    archive: bool
