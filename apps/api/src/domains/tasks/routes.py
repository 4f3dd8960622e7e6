# apps/api/src/domains/tasks/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_current_principal
from src.domains.auth.models import Principal
from src.domains.tasks.models import (
    TaskCreate,
    TaskMutationResponse,
    TaskResponse,
    TaskUpdate,
)
from src.domains.tasks.service import DepartmentTaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=List[TaskResponse], operation_id="getMyTasks")
async def get_my_tasks(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> List[TaskResponse]:
    records = await DepartmentTaskService(db).list_for(principal)
    return [TaskResponse.from_record(record) for record in records]


@router.post(
    "",
    response_model=TaskMutationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createTask",
)
async def create_task(
    task: TaskCreate,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> TaskMutationResponse:
    record = await DepartmentTaskService(db).create_for(principal, task)
    return TaskMutationResponse(
        message="Task created", task=TaskResponse.from_record(record)
    )


@router.patch(
    "/{task_id}", response_model=TaskMutationResponse, operation_id="updateTask"
)
async def update_task(
    task_id: str,
    changes: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> TaskMutationResponse:
    record = await DepartmentTaskService(db).update_for(principal, task_id, changes)
    return TaskMutationResponse(
        message="Task updated", task=TaskResponse.from_record(record)
    )


@router.post(
    "/{task_id}/archive",
    response_model=TaskMutationResponse,
    operation_id="archiveTask",
)
async def archive_task(
    task_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> TaskMutationResponse:
    record = await DepartmentTaskService(db).archive_for(principal, task_id)
    return TaskMutationResponse(
        message="Task archived", task=TaskResponse.from_record(record)
    )
