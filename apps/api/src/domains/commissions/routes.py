# apps/api/src/domains/commissions/routes.py
from fastapi import APIRouter, Depends

from src.core.database import Database, get_db
from src.domains.auth.models import Principal
from src.domains.commissions.models import CommissionSummaryResponse
from src.domains.commissions.service import CommissionService
from src.shared.permissions.dependencies import require_roles
from src.shared.permissions.models import UserRole

router = APIRouter(prefix="/commissions", tags=["Commissions"])

require_finance = require_roles(
    UserRole.CEO, UserRole.GESTOR_PROJETOS, UserRole.FINANCEIRO
)


@router.get(
    "", response_model=CommissionSummaryResponse, operation_id="getCommissions"
)
async def get_commissions(
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
) -> CommissionSummaryResponse:
    """All sale and upsell commissions grouped per user."""
    return await CommissionService(db).summary()


@router.post("/upsell/{commission_id}/paid", operation_id="markUpsellCommissionPaid")
async def mark_upsell_commission_paid(
    commission_id: str,
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
) -> dict[str, str]:
    await CommissionService(db).mark_upsell_paid(commission_id)
    return {"message": "Commission marked as paid"}
