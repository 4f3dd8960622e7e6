# apps/api/src/domains/boards/navigation.py
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from src.core.database import Record
from src.shared.permissions.models import ROLE_LABELS, UserRole

ADS_PRO_PATH = "/gestor-ads"
ADS_PRO_LABEL = "Gestão de Tráfego PRO+"


@dataclass(frozen=True)
class SpecialRoute:
    path: str
    label: str


# Dedicated workspaces that replace the generic kanban for a role
SPECIAL_ROUTES: Mapping[UserRole, SpecialRoute] = MappingProxyType(
    {
        UserRole.GESTOR_ADS: SpecialRoute(ADS_PRO_PATH, ADS_PRO_LABEL),
        UserRole.SUCESSO_CLIENTE: SpecialRoute(
            "/sucesso-cliente", "Sucesso do Cliente PRO+"
        ),
        UserRole.CONSULTOR_COMERCIAL: SpecialRoute(
            "/consultor-comercial", "Comercial PRO+"
        ),
        UserRole.FINANCEIRO: SpecialRoute("/financeiro", "Financeiro PRO+"),
        UserRole.GESTOR_PROJETOS: SpecialRoute(
            "/gestor-projetos", "Gestão de Projetos PRO+"
        ),
        UserRole.GESTOR_CRM: SpecialRoute("/gestor-crm", "CRM PRO+"),
        UserRole.DESIGN: SpecialRoute("/design", "Design PRO+"),
        UserRole.EDITOR_VIDEO: SpecialRoute("/editor-video", "Editor de Vídeo PRO+"),
        UserRole.DEVS: SpecialRoute("/devs", "Desenvolvedor PRO+"),
        UserRole.ATRIZES_GRAVACAO: SpecialRoute("/atrizes-gravacao", "Gravação PRO+"),
    }
)

# Canonical boards per role. Each inner tuple is one board; its entries are
# accepted slug variants, tried in order.
ROLE_BOARD_SLUGS: Mapping[UserRole, tuple[tuple[str, ...], ...]] = MappingProxyType(
    {
        UserRole.CEO: (("ceo",),),
        # Admin view shows everything
        UserRole.GESTOR_PROJETOS: (),
        UserRole.GESTOR_ADS: (
            ("ads",),
            ("design",),
            ("editor-video",),
            ("devs",),
            ("crm", "grupo-1-crm", "grupo-2-crm"),
            ("comercial", "grupo-1-comercial", "grupo-2-comercial"),
        ),
        UserRole.SUCESSO_CLIENTE: (
            ("sucesso",),
            ("ads",),
            ("design",),
            ("editor-video",),
            ("devs",),
            ("crm", "grupo-1-crm", "grupo-2-crm"),
            ("comercial", "grupo-1-comercial", "grupo-2-comercial"),
            ("rh", "rh-board"),
        ),
        UserRole.DESIGN: (("design",),),
        UserRole.EDITOR_VIDEO: (("editor-video",),),
        UserRole.DEVS: (("devs",), ("design",)),
        UserRole.ATRIZES_GRAVACAO: (("atrizes",),),
        # Production only has its independent category
        UserRole.PRODUTORA: (),
        UserRole.GESTOR_CRM: (("crm", "grupo-1-crm", "grupo-2-crm"),),
        UserRole.CONSULTOR_COMERCIAL: (
            ("comercial", "grupo-1-comercial", "grupo-2-comercial"),
        ),
        UserRole.FINANCEIRO: (("financeiro", "financeiro-board"),),
        UserRole.RH: (("rh", "rh-board"),),
    }
)


def is_ads_board(board: Record) -> bool:
    """Ads boards are served by the ads manager's PRO+ workspace."""
    slug = board.get("slug") or ""
    name = (board.get("name") or "").lower()
    return "ads" in slug or "gestor de ads" in name or "gestão de tráfego" in name


def board_path(board: Record) -> str:
    if is_ads_board(board):
        return ADS_PRO_PATH
    return f"/kanban/{board.get('slug')}"


def board_label(board: Record) -> str:
    if is_ads_board(board):
        return ADS_PRO_LABEL
    return board.get("name") or ""


def _pick(boards: Sequence[Record], variants: tuple[str, ...]) -> Optional[Record]:
    for slug in variants:
        for board in boards:
            if board.get("slug") == slug:
                return board
        for board in boards:
            if slug in (board.get("slug") or ""):
                return board
    return None


def role_boards(role: UserRole, boards: Sequence[Record]) -> list[Record]:
    """
    Canonical boards for a role, limited to boards that exist.

    Exact slug matches win over partial ones; a board picked by two entries
    is listed once. Admin roles get an empty list since they browse every
    board through the admin view.
    """
    if role in (UserRole.CEO, UserRole.GESTOR_PROJETOS):
        return []

    picked: list[Record] = []
    seen: set[str] = set()
    for variants in ROLE_BOARD_SLUGS.get(role, ()):
        board = _pick(boards, variants)
        if board is None or board["id"] in seen:
            continue
        seen.add(board["id"])
        picked.append(board)
    return picked


def role_kanban_path(role: UserRole, boards: Sequence[Record]) -> str:
    special = SPECIAL_ROUTES.get(role)
    if special:
        return special.path

    role_slug = role.value.replace("_", "-")
    label = ROLE_LABELS[role].lower()
    for board in boards:
        slug = board.get("slug") or ""
        if role_slug in slug or label in (board.get("name") or "").lower():
            return f"/kanban/{slug}"
    return f"/kanban/{role_slug}"
