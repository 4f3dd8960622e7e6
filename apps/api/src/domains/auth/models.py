# apps/api/src/domains/auth/models.py
from typing import Any, Optional

from pydantic import BaseModel, Field

from src.shared.permissions.models import ROLE_LABELS, UserRole
from src.shared.permissions.services import (
    can_create_tabs,
    can_manage_users,
    can_move_cards_freely,
    can_view_tab,
    coerce_role,
    is_admin,
)


class Principal(BaseModel):
    """The authenticated user for the duration of a request."""

    id: str
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None

    @classmethod
    def from_rows(
        cls, profile: dict[str, Any], role_row: dict[str, Any]
    ) -> Optional["Principal"]:
        role = coerce_role(role_row.get("role"))
        if role is None:
            return None
        return cls(
            id=profile["user_id"],
            name=profile.get("name") or profile.get("email") or "",
            email=profile.get("email") or "",
            role=role,
            avatar=profile.get("avatar") or None,
            group_id=profile.get("group_id"),
            squad_id=profile.get("squad_id"),
        )

    # Capability flags are recomputed on each access
    @property
    def is_ceo(self) -> bool:
        return self.role == UserRole.CEO

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)

    @property
    def can_manage_users(self) -> bool:
        return can_manage_users(self.role)

    @property
    def can_create_tabs(self) -> bool:
        return can_create_tabs(self.role)

    @property
    def can_move_freely(self) -> bool:
        return can_move_cards_freely(self.role)

    def can_view_tab(self, tab_id: str) -> bool:
        return can_view_tab(self.role, tab_id)


class SessionState(BaseModel):
    user_id: str
    name: str
    email: str
    role: UserRole
    role_label: str
    avatar: Optional[str]
    group_id: Optional[str]
    squad_id: Optional[str]
    is_ceo: bool
    is_admin: bool
    can_manage_users: bool
    can_create_tabs: bool
    can_move_freely: bool

    @classmethod
    def from_principal(cls, principal: Principal) -> "SessionState":
        return cls(
            user_id=principal.id,
            name=principal.name,
            email=principal.email,
            role=principal.role,
            role_label=ROLE_LABELS[principal.role],
            avatar=principal.avatar,
            group_id=principal.group_id,
            squad_id=principal.squad_id,
            is_ceo=principal.is_ceo,
            is_admin=principal.is_admin,
            can_manage_users=principal.can_manage_users,
            can_create_tabs=principal.can_create_tabs,
            can_move_freely=principal.can_move_freely,
        )


class LoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    session: SessionState
