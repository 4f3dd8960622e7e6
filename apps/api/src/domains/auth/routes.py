# apps/api/src/domains/auth/routes.py
from fastapi import APIRouter, Depends

from src.core.database import Database, get_db
from src.core.identity import IdentityProvider, get_identity
from src.domains.auth.dependencies import get_bearer_token, get_current_principal
from src.domains.auth.models import (
    LoginRequest,
    LoginResponse,
    Principal,
    SessionState,
)
from src.domains.auth.service import SessionService

router = APIRouter(prefix="/session", tags=["Sessions"])


@router.post("/login", response_model=LoginResponse, operation_id="login")
async def login(
    credentials: LoginRequest,
    db: Database = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
) -> LoginResponse:
    service = SessionService(db, identity)
    return await service.login(credentials.email, credentials.password)


@router.get(
    "",
    response_model=SessionState,
    operation_id="getSessionState",
)
async def get_session_state(
    principal: Principal = Depends(get_current_principal),
) -> SessionState:
    return SessionService.get_session_state(principal)


@router.post("/logout", operation_id="logout")
async def logout(
    token: str = Depends(get_bearer_token),
    db: Database = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
) -> dict[str, str]:
    await SessionService(db, identity).logout(token)
    return {"message": "Signed out"}
