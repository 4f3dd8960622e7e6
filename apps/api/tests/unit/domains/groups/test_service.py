"""
Tests for GroupService in src/domains/groups/service.py
"""

import pytest

from src.domains.groups.service import GroupService
from src.shared.permissions.models import UserRole


@pytest.fixture
def organization(memory_db):
    memory_db.seed(
        "organization_groups",
        {"id": "group-1", "name": "Grupo 1", "position": 1},
        {"id": "group-2", "name": "Grupo 2", "position": 2},
    )
    memory_db.seed(
        "squads",
        {"id": "squad-a", "group_id": "group-1", "name": "Squad A", "position": 1},
    )
    memory_db.seed(
        "kanban_boards",
        {"id": "b-1", "name": "Design A", "slug": "design-a", "group_id": "group-1", "squad_id": "squad-a"},
        {"id": "b-2", "name": "Coringa", "slug": "coringa", "group_id": "group-1", "squad_id": None},
    )
    memory_db.seed(
        "profiles",
        {"user_id": "u-1", "group_id": "group-1", "squad_id": "squad-a", "is_coringa": False},
        {"user_id": "u-2", "group_id": "group-1", "squad_id": "squad-a", "is_coringa": False},
        {"user_id": "u-3", "group_id": "group-1", "squad_id": None, "is_coringa": True},
    )
    memory_db.seed(
        "user_roles",
        {"user_id": "u-1", "role": "design"},
        {"user_id": "u-2", "role": "financeiro"},
        {"user_id": "u-3", "role": "gestor_ads"},
    )


class TestListVisible:
    @pytest.mark.asyncio
    async def test_ceo_sees_all_groups(self, memory_db, ceo_principal, organization):
        groups = await GroupService(memory_db).list_visible(ceo_principal)

        assert [g.id for g in groups] == ["group-1", "group-2"]

    @pytest.mark.asyncio
    async def test_member_sees_own_group_with_squads(
        self, memory_db, make_principal, organization
    ):
        (group,) = await GroupService(memory_db).list_visible(
            make_principal(UserRole.DESIGN, group_id="group-1")
        )

        assert [s.name for s in group.squads] == ["Squad A"]
        assert [b.slug for b in group.squads[0].boards] == ["design-a"]
        assert [b.slug for b in group.coringa_boards] == ["coringa"]

    @pytest.mark.asyncio
    async def test_member_without_group_sees_nothing(
        self, memory_db, make_principal, organization
    ):
        principal = make_principal(UserRole.DESIGN, group_id=None)

        assert await GroupService(memory_db).list_visible(principal) == []


class TestGroupRoles:
    @pytest.mark.asyncio
    async def test_roles_filtered_by_viewer(self, memory_db, make_principal, organization):
        viewer = make_principal(UserRole.GESTOR_ADS, group_id="group-1")

        result = await GroupService(memory_db).group_roles(viewer, "group-1")

        assert result.roles == [UserRole.DESIGN, UserRole.GESTOR_ADS]
        assert result.squad_roles == {"squad-a": [UserRole.DESIGN]}
        assert result.coringa_roles == [UserRole.GESTOR_ADS]

    @pytest.mark.asyncio
    async def test_other_group_is_hidden(self, memory_db, make_principal, organization):
        viewer = make_principal(UserRole.GESTOR_ADS, group_id="group-2")

        assert await GroupService(memory_db).group_roles(viewer, "group-1") is None

    def test_visible_roles_deduplicates(self, memory_db, make_principal):
        members = [{"role": "design"}, {"role": "design"}, {"role": "intern"}, {"role": "rh"}]

        roles = GroupService(memory_db).visible_roles(
            make_principal(UserRole.SUCESSO_CLIENTE), members
        )

        assert roles == [UserRole.DESIGN, UserRole.RH]
