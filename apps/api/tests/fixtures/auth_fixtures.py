"""
Principal and identity fixtures shared across domain tests.
"""

from typing import Callable, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from src.core.identity import IdentityProvider
from src.domains.auth.models import Principal
from src.shared.permissions.models import UserRole


@pytest.fixture
def make_principal() -> Callable[..., Principal]:
    """Factory building a principal for a given role."""

    def _make(
        role: UserRole = UserRole.DESIGN,
        user_id: Optional[str] = None,
        group_id: Optional[str] = "group-1",
        name: Optional[str] = None,
    ) -> Principal:
        return Principal(
            id=user_id or f"user-{role.value}",
            name=name or f"Test {role.value}",
            email=f"{role.value}@example.com",
            role=role,
            group_id=group_id,
        )

    return _make


@pytest.fixture
def ceo_principal(make_principal: Callable[..., Principal]) -> Principal:
    return make_principal(UserRole.CEO)


@pytest.fixture
def mock_identity() -> Mock:
    """Mock identity provider; create_user returns a fixed auth id."""
    identity = Mock(spec=IdentityProvider)
    identity.sign_in = AsyncMock()
    identity.sign_out = AsyncMock()
    identity.create_user = AsyncMock(return_value="new-user-id")
    identity.update_user = AsyncMock()
    identity.delete_user = AsyncMock()
    return identity
