# apps/api/src/domains/scheduled_checks/routes.py
import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel

from src.core.database import Database, get_db
from src.core.settings import settings
from src.domains.scheduled_checks.service import run_scheduled_checks, utc_timestamp

router = APIRouter(prefix="/scheduled-checks", tags=["Scheduled Checks"])


class ScheduledChecksResponse(BaseModel):
    success: bool
    message: str
    results: dict[str, bool]
    timestamp: str


def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)) -> None:
    """Require the shared cron secret when one is configured."""
    expected = settings.SCHEDULED_CHECKS_SECRET
    if not expected:
        return
    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron secret"
        )


@router.post(
    "/run",
    response_model=ScheduledChecksResponse,
    dependencies=[Depends(verify_cron_secret)],
    operation_id="runScheduledChecks",
)
async def run_checks(db: Database = Depends(get_db)) -> ScheduledChecksResponse:
    """
    Invoked by an external scheduler. Individual check failures are reported
    in `results` and never fail the whole run.
    """
    results = await run_scheduled_checks(db)
    return ScheduledChecksResponse(
        success=True,
        message="Scheduled notifications checked",
        results=results,
        timestamp=utc_timestamp(),
    )
