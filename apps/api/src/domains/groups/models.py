# apps/api/src/domains/groups/models.py
from typing import List, Optional

from pydantic import BaseModel

from src.shared.permissions.models import UserRole


class BoardLink(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None


class SquadResponse(BaseModel):
    id: str
    group_id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    position: Optional[int] = None
    boards: List[BoardLink]


class GroupResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    position: Optional[int] = None
    squads: List[SquadResponse]
    # Boards attached to the group but to no squad
    coringa_boards: List[BoardLink]


class GroupRolesResponse(BaseModel):
    group_id: str
    roles: List[UserRole]
    squad_roles: dict[str, List[UserRole]]
    coringa_roles: List[UserRole]
