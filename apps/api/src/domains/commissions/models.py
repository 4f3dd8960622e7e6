# apps/api/src/domains/commissions/models.py
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel

CommissionType = Literal["sale", "upsell"]
CommissionStatus = Literal["pending", "paid"]


class CommissionResponse(BaseModel):
    id: str
    type: CommissionType
    user_id: str
    commission_value: Decimal
    status: CommissionStatus
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    product_name: Optional[str] = None


class UserCommissionGroup(BaseModel):
    user_id: str
    user_name: str
    user_role: str
    total: Decimal
    pending: Decimal
    paid: Decimal
    commissions: List[CommissionResponse]


class CommissionTotals(BaseModel):
    total: Decimal
    pending: Decimal
    paid: Decimal


class CommissionSummaryResponse(BaseModel):
    groups: List[UserCommissionGroup]
    totals: CommissionTotals
