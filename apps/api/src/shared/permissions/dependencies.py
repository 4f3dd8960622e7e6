from typing import Awaitable, Callable

from fastapi import Depends, HTTPException, status

from src.domains.auth.dependencies import get_current_principal
from src.domains.auth.models import Principal

from .models import Capability, UserRole
from .services import has_capability


def require_capability(
    capability: Capability,
) -> Callable[..., Awaitable[Principal]]:
    """
    Dependency factory for capability-based authorization.

    Creates a dependency that validates the current principal's role holds
    the specified capability.

    Args:
        capability: The capability required to access the endpoint

    Returns:
        Async dependency function that validates the capability and returns
        the principal
    """

    async def check_capability(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not has_capability(principal.role, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions: {capability.value} required",
            )
        return principal

    return check_capability


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory restricting an endpoint to an explicit role list."""
    allowed = frozenset(roles)

    async def check_role(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Your role does not have access to this resource",
            )
        return principal

    return check_role
