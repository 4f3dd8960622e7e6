# apps/api/src/core/identity.py
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from supabase import AsyncClient, AuthError, acreate_client

from src.core.database import supabase_connection
from src.core.settings import settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Raised when the auth service rejects an operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class IdentityProvider:
    """
    Wrapper around Supabase auth.

    Admin operations go through the service-role client. Password sign-in
    runs on a fresh anon client so the shared client never switches its
    session to an end user.
    """

    def __init__(self, admin_client: AsyncClient) -> None:
        self.admin_client = admin_client

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
            raise IdentityError("Supabase auth is not configured")
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        try:
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            raise IdentityError(e.message) from e
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or type(e).__name__) from e
        if not response.user or not response.session:
            raise IdentityError("Invalid login credentials")
        return AuthSession(
            user_id=response.user.id,
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            expires_in=response.session.expires_in,
        )

    async def sign_out(self, access_token: str) -> None:
        try:
            await self.admin_client.auth.admin.sign_out(access_token)
        except AuthError as e:
            raise IdentityError(e.message) from e
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or type(e).__name__) from e

    async def create_user(
        self, email: str, password: str, metadata: Optional[dict[str, Any]] = None
    ) -> str:
        try:
            response = await self.admin_client.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": metadata or {},
                }
            )
        except AuthError as e:
            raise IdentityError(e.message) from e
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or type(e).__name__) from e
        return response.user.id

    async def update_user(self, user_id: str, attributes: dict[str, Any]) -> None:
        try:
            await self.admin_client.auth.admin.update_user_by_id(user_id, attributes)
        except AuthError as e:
            raise IdentityError(e.message) from e
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or type(e).__name__) from e

    async def delete_user(self, user_id: str) -> None:
        try:
            await self.admin_client.auth.admin.delete_user(user_id)
        except AuthError as e:
            raise IdentityError(e.message) from e
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or type(e).__name__) from e


async def get_identity() -> IdentityProvider:
    """Identity provider dependency for FastAPI dependency injection."""
    return IdentityProvider(supabase_connection.client)
