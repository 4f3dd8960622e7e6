# apps/api/src/domains/users/routes.py
from fastapi import APIRouter, Depends, status

from src.domains.users.dependencies import get_user_admin_service, require_ceo
from src.domains.users.models import UserCreate, UserMutationResponse, UserUpdate
from src.domains.users.service import UserAdminService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserMutationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createUser",
)
async def create_user(
    data: UserCreate,
    caller_id: str = Depends(require_ceo),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserMutationResponse:
    """
    Create an account with profile and role.

    Either every record is created or none is kept.
    """
    user = await service.create_user(data)
    return UserMutationResponse(message="User created", user=user)


@router.patch(
    "/{user_id}", response_model=UserMutationResponse, operation_id="updateUser"
)
async def update_user(
    user_id: str,
    changes: UserUpdate,
    caller_id: str = Depends(require_ceo),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserMutationResponse:
    await service.update_user(user_id, changes)
    return UserMutationResponse(message="User updated")


@router.delete(
    "/{user_id}", response_model=UserMutationResponse, operation_id="deleteUser"
)
async def delete_user(
    user_id: str,
    caller_id: str = Depends(require_ceo),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserMutationResponse:
    await service.delete_user(user_id)
    return UserMutationResponse(message="User removed")
