# apps/api/src/domains/groups/service.py
import logging
from typing import Any, Iterable, Optional

from src.core.database import Database, Record, StoreError
from src.domains.auth.models import Principal
from src.domains.groups.models import (
    BoardLink,
    GroupResponse,
    GroupRolesResponse,
    SquadResponse,
)
from src.shared.permissions.models import UserRole
from src.shared.permissions.services import PermissionPolicy, coerce_role, default_policy

logger = logging.getLogger(__name__)


def _board_link(board: Record) -> BoardLink:
    return BoardLink(
        id=str(board["id"]),
        name=board.get("name") or "",
        slug=board.get("slug") or "",
        description=board.get("description"),
    )


class GroupService:
    """Organization groups and squads, scoped to what the principal may see."""

    def __init__(self, db: Database, policy: PermissionPolicy = default_policy):
        self.db = db
        self.policy = policy

    async def _load(self, table: str, **kwargs: Any) -> list[Record]:
        try:
            return await self.db.find_many(table, **kwargs)
        except StoreError as e:
            logger.error(f"Failed to list {table}: {e.message}")
            return []

    async def list_visible(self, principal: Principal) -> list[GroupResponse]:
        """
        Groups with their squads and boards.

        The CEO sees every group; everyone else only their own.
        """
        groups = await self._load("organization_groups", order_by="position")
        if not principal.is_ceo:
            groups = [g for g in groups if g["id"] == principal.group_id]
        if not groups:
            return []

        squads = await self._load("squads", order_by="position")
        boards = await self._load(
            "kanban_boards",
            columns="id, name, slug, description, group_id, squad_id",
            order_by="name",
        )

        squad_responses = [
            SquadResponse(
                id=str(squad["id"]),
                group_id=str(squad["group_id"]),
                name=squad.get("name") or "",
                slug=squad.get("slug"),
                description=squad.get("description"),
                position=squad.get("position"),
                boards=[_board_link(b) for b in boards if b.get("squad_id") == squad["id"]],
            )
            for squad in squads
        ]

        return [
            GroupResponse(
                id=str(group["id"]),
                name=group.get("name") or "",
                slug=group.get("slug"),
                description=group.get("description"),
                position=group.get("position"),
                squads=[s for s in squad_responses if s.group_id == str(group["id"])],
                coringa_boards=[
                    _board_link(b)
                    for b in boards
                    if b.get("group_id") == group["id"] and not b.get("squad_id")
                ],
            )
            for group in groups
        ]

    def visible_roles(
        self, principal: Principal, members: Iterable[Record]
    ) -> list[UserRole]:
        """Distinct member roles the principal is allowed to see, in first-seen order."""
        roles: list[UserRole] = []
        for member in members:
            role = coerce_role(member.get("role"))
            if role is None or role in roles:
                continue
            if self.policy.can_view_role(principal.role, role):
                roles.append(role)
        return roles

    async def group_roles(
        self, principal: Principal, group_id: str
    ) -> Optional[GroupRolesResponse]:
        if not principal.is_ceo and principal.group_id != group_id:
            return None

        profiles = await self._load(
            "profiles",
            where={"group_id": group_id},
            columns="user_id, squad_id, is_coringa",
        )
        role_rows = (
            await self._load(
                "user_roles",
                where={"user_id": sorted(p["user_id"] for p in profiles)},
                columns="user_id, role",
            )
            if profiles
            else []
        )
        role_by_user = {r["user_id"]: r.get("role") for r in role_rows}
        members = [{**p, "role": role_by_user.get(p["user_id"])} for p in profiles]

        squad_ids = sorted({m["squad_id"] for m in members if m.get("squad_id")})
        return GroupRolesResponse(
            group_id=group_id,
            roles=self.visible_roles(principal, members),
            squad_roles={
                squad_id: self.visible_roles(
                    principal, [m for m in members if m.get("squad_id") == squad_id]
                )
                for squad_id in squad_ids
            },
            coringa_roles=self.visible_roles(
                principal,
                [m for m in members if m.get("is_coringa") and not m.get("squad_id")],
            ),
        )
