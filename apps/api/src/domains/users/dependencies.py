# apps/api/src/domains/users/dependencies.py
from fastapi import Depends

from src.core.database import Database, get_db
from src.core.identity import IdentityProvider, get_identity
from src.domains.auth.dependencies import get_auth_id
from src.domains.users.exceptions import CeoRequiredError
from src.domains.users.service import UserAdminService


async def get_user_admin_service(
    db: Database = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
) -> UserAdminService:
    return UserAdminService(db, identity)


async def require_ceo(
    auth_id: str = Depends(get_auth_id),
    service: UserAdminService = Depends(get_user_admin_service),
) -> str:
    """
    Gate privileged endpoints on the server-side `is_ceo` predicate.

    The check runs against the database rather than the role in the token,
    so a stale or forged role claim cannot unlock these endpoints.
    """
    if not await service.is_ceo(auth_id):
        raise CeoRequiredError()
    return auth_id
