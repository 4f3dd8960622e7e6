# apps/api/src/domains/tasks/models.py
from datetime import datetime
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, Field, field_validator

TaskStatus = Literal["todo", "doing", "done"]
TaskPriority = Literal["low", "medium", "high"]
TaskType = Literal["daily", "weekly"]


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title must not be empty")
    return value


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    task_type: TaskType = "daily"
    priority: TaskPriority = "medium"
    due_date: Optional[datetime] = None
    related_client_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _require_text(v)


class TaskUpdate(BaseModel):
    # Columns that cannot be cleared; an explicit null leaves them unchanged
    REQUIRED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"title", "status", "priority"}
    )

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _require_text(v)

    def to_fields(self) -> dict[str, Any]:
        fields = self.model_dump(exclude_unset=True, mode="json")
        return {
            key: value
            for key, value in fields.items()
            if value is not None or key not in self.REQUIRED_FIELDS
        }


class TaskResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    task_type: Optional[str] = None
    status: str
    priority: Optional[str] = None
    due_date: Optional[str] = None
    department: Optional[str] = None
    related_client_id: Optional[str] = None
    archived: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "TaskResponse":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            title=record["title"],
            description=record.get("description"),
            task_type=record.get("task_type"),
            status=record.get("status") or "todo",
            priority=record.get("priority"),
            due_date=record.get("due_date"),
            department=record.get("department"),
            related_client_id=record.get("related_client_id"),
            archived=bool(record.get("archived")),
            created_at=record.get("created_at"),
        )


class TaskMutationResponse(BaseModel):
    message: str
    task: TaskResponse
