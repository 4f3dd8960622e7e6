# apps/api/src/domains/boards/service.py
import logging

from src.core.database import Database, Record, StoreError
from src.domains.auth.models import Principal
from src.domains.boards.models import (
    BoardCreate,
    BoardResponse,
    CategoryResponse,
    NavigationResponse,
    SpecialRouteResponse,
)
from src.domains.boards.navigation import SPECIAL_ROUTES, role_boards, role_kanban_path
from src.shared.permissions.services import PermissionPolicy, default_policy
from src.shared.resources import ResourceService

logger = logging.getLogger(__name__)


class BoardService(ResourceService):
    table = "kanban_boards"
    resource_name = "Board"
    soft_delete_column = None
    duplicate_message = "A board with this slug already exists"

    def __init__(self, db: Database, policy: PermissionPolicy = default_policy):
        super().__init__(db)
        self.policy = policy

    def is_visible(self, principal: Principal, board: Record) -> bool:
        return self.policy.can_view_resource(
            principal.role, board.get("slug") or ""
        ) or self.policy.can_view_resource(principal.role, board.get("name") or "")

    async def list_visible(self, principal: Principal) -> list[Record]:
        boards = await self.list(order_by="name", descending=False)
        return [board for board in boards if self.is_visible(principal, board)]

    async def _categories(
        self, principal: Principal, boards: list[Record]
    ) -> list[CategoryResponse]:
        try:
            categories = await self.db.find_many(
                "independent_categories", order_by="position"
            )
        except StoreError as e:
            logger.error(f"Failed to list independent categories: {e.message}")
            return []

        return [
            CategoryResponse(
                id=str(category["id"]),
                name=category.get("name") or "",
                slug=category.get("slug") or "",
                icon=category.get("icon"),
                boards=[
                    BoardResponse.from_record(board)
                    for board in boards
                    if board.get("category_id") == category["id"]
                ],
            )
            for category in categories
            if self.policy.can_view_category(principal.role, category.get("slug") or "")
        ]

    async def navigation(self, principal: Principal) -> NavigationResponse:
        boards = await self.list(order_by="name", descending=False)
        special = SPECIAL_ROUTES.get(principal.role)
        return NavigationResponse(
            special_route=(
                SpecialRouteResponse(path=special.path, label=special.label)
                if special
                else None
            ),
            kanban_path=role_kanban_path(principal.role, boards),
            boards=[
                BoardResponse.from_record(board)
                for board in role_boards(principal.role, boards)
            ],
            categories=await self._categories(principal, boards),
            admin_view=principal.is_admin,
        )

    async def create_board(self, board: BoardCreate) -> Record:
        return await self.create(board.model_dump())
