# apps/api/src/domains/groups/routes.py
from typing import List

from fastapi import APIRouter, Depends, Query

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_current_principal
from src.domains.auth.models import Principal
from src.domains.groups.models import GroupResponse, GroupRolesResponse
from src.domains.groups.service import GroupService
from src.domains.users.dependencies import get_user_admin_service, require_ceo
from src.domains.users.models import DeleteGroupResponse
from src.domains.users.service import UserAdminService
from src.shared.exceptions import NotAuthorizedError

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.get("", response_model=List[GroupResponse], operation_id="getGroups")
async def get_groups(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> List[GroupResponse]:
    return await GroupService(db).list_visible(principal)


@router.get(
    "/{group_id}/roles",
    response_model=GroupRolesResponse,
    operation_id="getGroupRoles",
)
async def get_group_roles(
    group_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> GroupRolesResponse:
    """Roles present in a group, limited to those the viewer may see."""
    roles = await GroupService(db).group_roles(principal, group_id)
    if roles is None:
        raise NotAuthorizedError("You can only view your own group")
    return roles


@router.delete(
    "/{group_id}", response_model=DeleteGroupResponse, operation_id="deleteGroup"
)
async def delete_group(
    group_id: str,
    delete_users: bool = Query(
        False, description="Also remove the group's members (CEO accounts are kept)"
    ),
    caller_id: str = Depends(require_ceo),
    service: UserAdminService = Depends(get_user_admin_service),
) -> DeleteGroupResponse:
    deleted = await service.delete_group(group_id, delete_users)
    return DeleteGroupResponse(message="Group removed", deleted_users=deleted)
