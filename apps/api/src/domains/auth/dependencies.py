# apps/api/src/domains/auth/dependencies.py
import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient

from src.core.database import Database, get_db
from src.core.settings import settings
from src.shared.exceptions import UnlinkedProfileError

from .models import Principal
from .service import SessionService
from .types import SupabaseJwtPayload

JWKS_URL = f"{settings.SUPABASE_URL}/auth/v1/jwks" if settings.SUPABASE_URL else None

_jwks_client = PyJWKClient(JWKS_URL) if JWKS_URL else None


def decode_supabase_jwt(token: str) -> SupabaseJwtPayload:
    """
    Verifies JWT token. Uses JWT_SECRET for development mode if available,
    otherwise falls back to Supabase JWKS for production.
    """
    if settings.JWT_SECRET:
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=["HS256"],
                options={"verify_aud": False},
            )
            return SupabaseJwtPayload(**dict(payload))
        except jwt.PyJWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )

    if not _jwks_client:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase not configured",
        )
    try:
        signing_key = _jwks_client.get_signing_key_from_jwt(token).key
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=["RS256", "ES256"],
            options={"verify_aud": False},
        )
        return SupabaseJwtPayload(**dict(payload))
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_bearer_token(authorization: str = Header(None)) -> str:
    """Extracts the raw token from the Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token"
        )
    return authorization.split(" ")[1]


def get_auth_id(token: str = Depends(get_bearer_token)) -> str:
    """
    Validates the Supabase JWT and returns the user's UUID (the `sub` claim).
    """
    payload = decode_supabase_jwt(token)
    if not payload.sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )
    return payload.sub


async def get_current_principal(
    auth_id: str = Depends(get_auth_id), db: Database = Depends(get_db)
) -> Principal:
    """
    Resolves the authenticated user into a principal with role and placement.
    """
    principal = await SessionService(db).resolve_principal(auth_id)
    if principal is None:
        raise UnlinkedProfileError()
    return principal
