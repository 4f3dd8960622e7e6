from typing import Mapping, Optional, Union

from .models import (
    BOARD_VISIBILITY,
    CAPABILITY_ROLES,
    ROLE_INDEPENDENT_CATEGORIES,
    ROLE_LABELS,
    WILDCARD,
    Capability,
    UserRole,
)

RoleLike = Union[UserRole, str, None]


def coerce_role(role: RoleLike) -> Optional[UserRole]:
    """
    Convert a raw role value into a UserRole.

    Args:
        role: A UserRole, its string value, or None

    Returns:
        The matching UserRole, or None for anything outside the enumeration
    """
    if isinstance(role, UserRole):
        return role
    if isinstance(role, str):
        try:
            return UserRole(role)
        except ValueError:
            return None
    return None


def _matches_any(patterns: tuple[str, ...], *targets: str) -> bool:
    # Plain substring containment, no anchoring
    for pattern in patterns:
        needle = pattern.lower()
        if any(needle in target for target in targets):
            return True
    return False


class PermissionPolicy:
    """
    Role-based visibility and capability checks over an injected rule set.

    All checks are pure and never raise: unknown roles resolve to an empty
    pattern set and no capabilities.
    """

    def __init__(
        self,
        visibility: Mapping[UserRole, tuple[str, ...]] = BOARD_VISIBILITY,
        categories: Mapping[UserRole, tuple[str, ...]] = ROLE_INDEPENDENT_CATEGORIES,
        capabilities: Mapping[Capability, frozenset[UserRole]] = CAPABILITY_ROLES,
    ) -> None:
        self.visibility = visibility
        self.categories = categories
        self.capabilities = capabilities

    def patterns_for(self, role: RoleLike) -> tuple[str, ...]:
        resolved = coerce_role(role)
        if resolved is None:
            return ()
        return self.visibility.get(resolved, ())

    def sees_everything(self, role: RoleLike) -> bool:
        return WILDCARD in self.patterns_for(role)

    def can_view_resource(self, role: RoleLike, resource_identifier: str) -> bool:
        """
        Check if a role may view a board / department identified by slug or name.

        Args:
            role: The viewer's role
            resource_identifier: Free-form board slug or display name

        Returns:
            True if the role is a wildcard role or any of its patterns is a
            case-insensitive substring of the identifier
        """
        patterns = self.patterns_for(role)
        if WILDCARD in patterns:
            return True
        if not resource_identifier:
            return False
        return _matches_any(patterns, resource_identifier.lower())

    def can_view_role(self, viewer_role: RoleLike, target_role: RoleLike) -> bool:
        """
        Check if a role may see another role's kanban / people.

        The target is compared through its label, hyphenated slug and raw
        value; a pattern hit on any of the three grants visibility.
        """
        viewer = coerce_role(viewer_role)
        if viewer is None:
            return False
        if viewer in (UserRole.CEO, UserRole.GESTOR_PROJETOS):
            return True

        patterns = self.patterns_for(viewer)
        if WILDCARD in patterns:
            return True

        target = coerce_role(target_role)
        if target is None:
            return False

        target_label = ROLE_LABELS[target].lower()
        target_slug = target.value.lower().replace("_", "-")
        return _matches_any(patterns, target_label, target_slug, target.value)

    def can_view_tab(self, role: RoleLike, tab_id: str) -> bool:
        return self.can_view_resource(role, tab_id)

    def can_view_category(self, role: RoleLike, category_slug: str) -> bool:
        resolved = coerce_role(role)
        if resolved is None:
            return False
        allowed = self.categories.get(resolved, ())
        if WILDCARD in allowed:
            return True
        if not category_slug:
            return False
        return _matches_any(allowed, category_slug.lower())

    def has_capability(self, role: RoleLike, capability: Capability) -> bool:
        resolved = coerce_role(role)
        if resolved is None:
            return False
        return resolved in self.capabilities.get(capability, frozenset())


default_policy = PermissionPolicy()


def can_view_resource(role: RoleLike, resource_identifier: str) -> bool:
    return default_policy.can_view_resource(role, resource_identifier)


def can_view_role(viewer_role: RoleLike, target_role: RoleLike) -> bool:
    return default_policy.can_view_role(viewer_role, target_role)


def can_view_tab(role: RoleLike, tab_id: str) -> bool:
    return default_policy.can_view_tab(role, tab_id)


def can_view_category(role: RoleLike, category_slug: str) -> bool:
    return default_policy.can_view_category(role, category_slug)


def has_capability(role: RoleLike, capability: Capability) -> bool:
    """
    Check if a role holds a capability.

    Args:
        role: The role to check
        capability: The capability to validate

    Returns:
        True if the role is in the capability's fixed role set, False otherwise
    """
    return default_policy.has_capability(role, capability)


def is_admin(role: RoleLike) -> bool:
    return has_capability(role, Capability.ADMIN)


def can_manage_users(role: RoleLike) -> bool:
    return has_capability(role, Capability.MANAGE_USERS)


def can_create_tabs(role: RoleLike) -> bool:
    return has_capability(role, Capability.CREATE_TABS)


def can_create_workbenches(role: RoleLike) -> bool:
    return has_capability(role, Capability.CREATE_WORKBENCHES)


def can_move_cards_freely(role: RoleLike) -> bool:
    return has_capability(role, Capability.MOVE_CARDS_FREELY)


def can_register_clients(role: RoleLike) -> bool:
    return has_capability(role, Capability.REGISTER_CLIENTS)
