"""
Shared permission model for role-based visibility and capabilities.

This module provides the board/role visibility rules and the capability
sets used across all domains in the application.

Usage:
    from src.shared.permissions import Capability
    from src.shared.permissions.dependencies import require_capability

    @router.post("/boards")
    async def create_board(
        principal: Principal = Depends(
            require_capability(Capability.CREATE_TABS)
        )
    ):
        pass
"""

from .models import (
    BOARD_VISIBILITY,
    CAPABILITY_ROLES,
    ROLE_LABELS,
    Capability,
    UserRole,
)
from .services import (
    PermissionPolicy,
    can_view_resource,
    can_view_role,
    has_capability,
)

__all__ = [
    "BOARD_VISIBILITY",
    "CAPABILITY_ROLES",
    "ROLE_LABELS",
    "Capability",
    "PermissionPolicy",
    "UserRole",
    "can_view_resource",
    "can_view_role",
    "has_capability",
]
