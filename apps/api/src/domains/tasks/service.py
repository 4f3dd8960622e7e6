# apps/api/src/domains/tasks/service.py
from datetime import datetime
from typing import Any, Optional

from src.core.database import Record
from src.domains.auth.models import Principal
from src.domains.tasks.models import TaskCreate, TaskUpdate
from src.shared.exceptions import NotAuthorizedError
from src.shared.permissions.models import UserRole
from src.shared.resources import ResourceService


class DepartmentTaskService(ResourceService):
    """Per-user department tasks, including follow-ups created by notifications."""

    table = "department_tasks"
    resource_name = "Task"

    async def list_for(self, principal: Principal) -> list[Record]:
        return await self.list({"user_id": principal.id})

    async def create_for(self, principal: Principal, task: TaskCreate) -> Record:
        data: dict[str, Any] = {
            "user_id": principal.id,
            "title": task.title,
            "description": task.description,
            "task_type": task.task_type,
            "status": "todo",
            "priority": task.priority,
            "due_date": task.due_date.isoformat() if task.due_date else None,
            "department": principal.role.value,
            "related_client_id": task.related_client_id,
            "archived": False,
        }
        return await self.create(data)

    async def _get_owned(self, principal: Principal, task_id: str) -> Record:
        record = await self.get(task_id)
        if record.get("user_id") != principal.id and not principal.is_admin:
            raise NotAuthorizedError("You can only change your own tasks")
        return record

    async def update_for(
        self, principal: Principal, task_id: str, changes: TaskUpdate
    ) -> Record:
        await self._get_owned(principal, task_id)
        return await self.update(task_id, changes.to_fields())

    async def archive_for(
        self, principal: Principal, task_id: str, archive: bool = True
    ) -> Record:
        await self._get_owned(principal, task_id)
        return await self.archive(task_id, archive)

    async def create_follow_up(
        self,
        user_id: str,
        role: UserRole,
        title: str,
        description: str,
        due_date: datetime,
        related_client_id: Optional[str] = None,
    ) -> Record:
        """Create a high-priority daily task committing a user to a follow-up."""
        return await self.create(
            {
                "user_id": user_id,
                "title": title,
                "description": description,
                "task_type": "daily",
                "status": "todo",
                "priority": "high",
                "due_date": due_date.isoformat(),
                "department": role.value,
                "related_client_id": related_client_id,
                "archived": False,
            }
        )
