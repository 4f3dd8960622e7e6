"""
Tests for shared permissions dependencies (require_capability, require_roles).
"""

import pytest
from fastapi import HTTPException

from src.shared.permissions.dependencies import require_capability, require_roles
from src.shared.permissions.models import Capability, UserRole


class TestRequireCapability:
    """Test the require_capability dependency factory."""

    @pytest.mark.asyncio
    async def test_admin_passes(self, make_principal):
        principal = make_principal(UserRole.GESTOR_PROJETOS)
        dependency = require_capability(Capability.CREATE_TABS)

        result = await dependency(principal=principal)

        assert result is principal

    @pytest.mark.asyncio
    async def test_missing_capability_is_forbidden(self, make_principal):
        dependency = require_capability(Capability.CREATE_TABS)

        with pytest.raises(HTTPException) as exc_info:
            await dependency(principal=make_principal(UserRole.DESIGN))

        assert exc_info.value.status_code == 403
        assert "create_tabs" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_customer_success_can_manage_users(self, make_principal):
        principal = make_principal(UserRole.SUCESSO_CLIENTE)
        dependency = require_capability(Capability.MANAGE_USERS)

        assert await dependency(principal=principal) is principal


class TestRequireRoles:
    @pytest.mark.asyncio
    async def test_listed_role_passes(self, make_principal):
        principal = make_principal(UserRole.FINANCEIRO)
        dependency = require_roles(UserRole.CEO, UserRole.FINANCEIRO)

        assert await dependency(principal=principal) is principal

    @pytest.mark.asyncio
    async def test_unlisted_role_is_forbidden(self, make_principal):
        dependency = require_roles(UserRole.CEO, UserRole.FINANCEIRO)

        with pytest.raises(HTTPException) as exc_info:
            await dependency(principal=make_principal(UserRole.GESTOR_ADS))

        assert exc_info.value.status_code == 403
