# apps/api/src/domains/boards/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from src.core.database import Database, get_db
from src.domains.auth.dependencies import get_current_principal
from src.domains.auth.models import Principal
from src.domains.boards.models import (
    BoardCreate,
    BoardMutationResponse,
    BoardResponse,
    NavigationResponse,
)
from src.domains.boards.service import BoardService
from src.shared.permissions.dependencies import require_capability
from src.shared.permissions.models import Capability

router = APIRouter(prefix="/boards", tags=["Boards"])


@router.get("", response_model=List[BoardResponse], operation_id="getBoards")
async def get_boards(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> List[BoardResponse]:
    """Boards whose slug or name matches one of the viewer's visibility patterns."""
    boards = await BoardService(db).list_visible(principal)
    return [BoardResponse.from_record(board) for board in boards]


@router.get(
    "/navigation", response_model=NavigationResponse, operation_id="getNavigation"
)
async def get_navigation(
    principal: Principal = Depends(get_current_principal),
    db: Database = Depends(get_db),
) -> NavigationResponse:
    return await BoardService(db).navigation(principal)


@router.post(
    "",
    response_model=BoardMutationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createBoard",
)
async def create_board(
    board: BoardCreate,
    principal: Principal = Depends(require_capability(Capability.CREATE_TABS)),
    db: Database = Depends(get_db),
) -> BoardMutationResponse:
    record = await BoardService(db).create_board(board)
    return BoardMutationResponse(
        message="Board created", board=BoardResponse.from_record(record)
    )
