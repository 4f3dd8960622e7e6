from enum import Enum
from types import MappingProxyType
from typing import Mapping


class UserRole(str, Enum):
    """
    Organizational roles.

    Values are the identifiers stored in the `user_roles` table; they double
    as visibility patterns, so they must not be renamed.
    """

    CEO = "ceo"
    GESTOR_PROJETOS = "gestor_projetos"  # Project manager
    GESTOR_ADS = "gestor_ads"  # Ads / traffic manager
    SUCESSO_CLIENTE = "sucesso_cliente"  # Customer success
    DESIGN = "design"
    EDITOR_VIDEO = "editor_video"
    DEVS = "devs"
    ATRIZES_GRAVACAO = "atrizes_gravacao"  # Talent coordination
    PRODUTORA = "produtora"  # Production
    GESTOR_CRM = "gestor_crm"
    CONSULTOR_COMERCIAL = "consultor_comercial"  # Sales consultant
    FINANCEIRO = "financeiro"  # Finance
    RH = "rh"  # Human resources


class Capability(Enum):
    """
    Coarse-grained capabilities derived from the role alone.

    Capabilities follow the pattern: ACTION_RESOURCE
    """

    ADMIN = "admin"
    MANAGE_USERS = "manage_users"
    CREATE_TABS = "create_tabs"
    CREATE_WORKBENCHES = "create_workbenches"
    MOVE_CARDS_FREELY = "move_cards_freely"
    REGISTER_CLIENTS = "register_clients"


WILDCARD = "*"

ROLE_LABELS: Mapping[UserRole, str] = MappingProxyType(
    {
        UserRole.CEO: "CEO",
        UserRole.GESTOR_PROJETOS: "Gestor de Projetos",
        UserRole.GESTOR_ADS: "Gestor de Ads",
        UserRole.SUCESSO_CLIENTE: "Sucesso do Cliente",
        UserRole.DESIGN: "Design",
        UserRole.EDITOR_VIDEO: "Editor de Vídeo",
        UserRole.DEVS: "Desenvolvedor",
        UserRole.ATRIZES_GRAVACAO: "Atrizes para Gravação",
        UserRole.PRODUTORA: "Produtora",
        UserRole.GESTOR_CRM: "Gestor de CRM",
        UserRole.CONSULTOR_COMERCIAL: "Consultor Comercial",
        UserRole.FINANCEIRO: "Financeiro",
        UserRole.RH: "RH",
    }
)

ROLE_HIERARCHY: Mapping[UserRole, int] = MappingProxyType(
    {
        UserRole.CEO: 100,
        UserRole.GESTOR_PROJETOS: 90,
        UserRole.GESTOR_ADS: 60,
        UserRole.SUCESSO_CLIENTE: 50,
        UserRole.DESIGN: 40,
        UserRole.EDITOR_VIDEO: 40,
        UserRole.DEVS: 40,
        UserRole.ATRIZES_GRAVACAO: 40,
        UserRole.PRODUTORA: 40,
        UserRole.GESTOR_CRM: 40,
        UserRole.CONSULTOR_COMERCIAL: 40,
        UserRole.FINANCEIRO: 40,
        UserRole.RH: 40,
    }
)

# Board / role visibility patterns. A pattern grants visibility when it is a
# case-insensitive substring of the board slug, board name or role label.
BOARD_VISIBILITY: Mapping[UserRole, tuple[str, ...]] = MappingProxyType(
    {
        UserRole.CEO: (WILDCARD,),
        UserRole.GESTOR_PROJETOS: (WILDCARD,),
        UserRole.GESTOR_ADS: (
            # Own role (ads manager = traffic manager)
            "gestor_ads",
            "ads",
            "trafego",
            "design",
            "editor_video",
            "video",
            "editor",
            "devs",
            # Independent areas
            "produtora",
            "atrizes_gravacao",
            "atrizes",
            "gestor_crm",
            "crm",
            "consultor_comercial",
            "comercial",
        ),
        UserRole.SUCESSO_CLIENTE: (
            "sucesso_cliente",
            "sucesso",
            "gestor_ads",
            "ads",
            "trafego",
            "design",
            "editor_video",
            "video",
            "editor",
            "devs",
            "produtora",
            "atrizes_gravacao",
            "atrizes",
            "gestor_crm",
            "crm",
            "consultor_comercial",
            "comercial",
            "rh",
        ),
        UserRole.DESIGN: ("design",),
        UserRole.EDITOR_VIDEO: ("editor_video", "video", "editor"),
        UserRole.DEVS: ("devs", "design"),
        UserRole.ATRIZES_GRAVACAO: (
            "atrizes_gravacao",
            "atrizes",
            "editor_video",
            "video",
            "editor",
        ),
        UserRole.PRODUTORA: ("produtora",),
        UserRole.GESTOR_CRM: ("gestor_crm", "crm"),
        UserRole.CONSULTOR_COMERCIAL: ("consultor_comercial", "comercial"),
        UserRole.FINANCEIRO: ("financeiro",),
        UserRole.RH: ("rh",),
    }
)

# Independent categories (production, recording talent, ...) each role may open
ROLE_INDEPENDENT_CATEGORIES: Mapping[UserRole, tuple[str, ...]] = MappingProxyType(
    {
        UserRole.CEO: (WILDCARD,),
        UserRole.GESTOR_PROJETOS: (WILDCARD,),
        UserRole.GESTOR_ADS: ("produtora", "atrizes"),
        UserRole.SUCESSO_CLIENTE: ("produtora", "atrizes"),
        UserRole.DESIGN: (),
        UserRole.EDITOR_VIDEO: ("atrizes",),
        UserRole.DEVS: (),
        UserRole.ATRIZES_GRAVACAO: ("atrizes",),
        UserRole.PRODUTORA: ("produtora",),
        UserRole.GESTOR_CRM: (),
        UserRole.CONSULTOR_COMERCIAL: (),
        UserRole.FINANCEIRO: (),
        UserRole.RH: (),
    }
)

ADMIN_ROLES = frozenset({UserRole.CEO, UserRole.GESTOR_PROJETOS})

CAPABILITY_ROLES: Mapping[Capability, frozenset[UserRole]] = MappingProxyType(
    {
        Capability.ADMIN: ADMIN_ROLES,
        Capability.MANAGE_USERS: frozenset(
            {UserRole.CEO, UserRole.GESTOR_PROJETOS, UserRole.SUCESSO_CLIENTE}
        ),
        Capability.CREATE_TABS: ADMIN_ROLES,
        Capability.CREATE_WORKBENCHES: ADMIN_ROLES,
        Capability.MOVE_CARDS_FREELY: ADMIN_ROLES,
        Capability.REGISTER_CLIENTS: frozenset(
            {UserRole.CEO, UserRole.GESTOR_PROJETOS, UserRole.SUCESSO_CLIENTE}
        ),
    }
)
