import logging
from typing import Optional

from src.core.database import Database, StoreError
from src.core.identity import IdentityError, IdentityProvider
from src.domains.auth.models import LoginResponse, Principal, SessionState
from src.shared.exceptions import InvalidCredentialsError

logger = logging.getLogger(__name__)


class SessionService:
    """Service for resolving and describing the authenticated principal"""

    def __init__(self, db: Database, identity: Optional[IdentityProvider] = None):
        self.db = db
        self.identity = identity

    async def resolve_principal(self, user_id: str) -> Optional[Principal]:
        """
        Resolve an auth user id into a principal.

        Both the profile row and the role row must exist and the role must be
        a known value; otherwise there is no usable session.

        Args:
            user_id: Auth user id (the JWT `sub` claim)

        Returns:
            Principal, or None when the user has no usable profile/role
        """
        try:
            profile = await self.db.find_first("profiles", {"user_id": user_id})
            if not profile:
                logger.warning(f"No profile found for user {user_id}")
                return None

            role_row = await self.db.find_first(
                "user_roles", {"user_id": user_id}, columns="role"
            )
        except StoreError as e:
            logger.error(f"Error fetching user data for {user_id}: {e.message}")
            return None

        if not role_row:
            logger.warning(f"No role assigned to user {user_id}")
            return None

        principal = Principal.from_rows(profile, role_row)
        if principal is None:
            logger.warning(f"Unknown role {role_row.get('role')!r} for user {user_id}")
        return principal

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Exchange email + password for a session.

        Succeeds only when the auth service accepts the credentials AND the
        user resolves to a principal.
        """
        if self.identity is None:
            raise RuntimeError("SessionService.login requires an identity provider")

        try:
            auth_session = await self.identity.sign_in(email, password)
        except IdentityError as e:
            logger.info(f"Login rejected for {email}: {e.message}")
            raise InvalidCredentialsError()

        principal = await self.resolve_principal(auth_session.user_id)
        if principal is None:
            raise InvalidCredentialsError()

        return LoginResponse(
            access_token=auth_session.access_token,
            refresh_token=auth_session.refresh_token,
            expires_in=auth_session.expires_in,
            session=self.get_session_state(principal),
        )

    async def logout(self, access_token: str) -> None:
        if self.identity is None:
            raise RuntimeError("SessionService.logout requires an identity provider")
        try:
            await self.identity.sign_out(access_token)
        except IdentityError as e:
            # Token already revoked or expired; the session is gone either way
            logger.info(f"Sign-out reported: {e.message}")

    @staticmethod
    def get_session_state(principal: Principal) -> SessionState:
        return SessionState.from_principal(principal)
