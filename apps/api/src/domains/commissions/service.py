# apps/api/src/domains/commissions/service.py
import logging
from decimal import Decimal
from typing import Any, Iterable

from src.core.database import Database, Record, StoreError
from src.domains.commissions.models import (
    CommissionResponse,
    CommissionSummaryResponse,
    CommissionTotals,
    UserCommissionGroup,
)
from src.shared.permissions.models import UserRole
from src.shared.resources import ResourceService, utcnow

logger = logging.getLogger(__name__)

DEFAULT_USER_NAME = "User"

# Upsell commissions are always earned by customer success
UPSELL_COMMISSION_ROLE = UserRole.SUCESSO_CLIENTE.value


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value or 0))


def _upsell_commission(record: Record) -> CommissionResponse:
    upsell = record.get("upsell") or {}
    client = upsell.get("client") or {}
    return CommissionResponse(
        id=str(record["id"]),
        type="upsell",
        user_id=record["user_id"],
        commission_value=_decimal(record.get("commission_value")),
        status="paid" if record.get("status") == "paid" else "pending",
        paid_at=record.get("paid_at"),
        created_at=record.get("created_at"),
        client_id=upsell.get("client_id"),
        client_name=client.get("name"),
        product_name=upsell.get("product_name"),
    )


def _sale_commission(record: Record) -> CommissionResponse:
    client = record.get("client") or {}
    # Sale commission records carry no payment status yet
    return CommissionResponse(
        id=str(record["id"]),
        type="sale",
        user_id=record["user_id"],
        commission_value=_decimal(record.get("commission_value")),
        status="pending",
        created_at=record.get("created_at"),
        client_id=record.get("client_id"),
        client_name=client.get("name"),
    )


def group_commissions(
    upsells: Iterable[Record],
    sales: Iterable[Record],
    user_names: dict[str, str],
) -> CommissionSummaryResponse:
    """
    Group commissions from both sources per user.

    Groups are sorted by total descending; the first record seen for a user
    fixes the group's name and role.
    """
    groups: dict[str, UserCommissionGroup] = {}

    entries = [
        (_upsell_commission(r), r.get("user_name"), UPSELL_COMMISSION_ROLE)
        for r in upsells
    ] + [
        (_sale_commission(r), None, r.get("user_role") or "")
        for r in sales
    ]

    for commission, name, role in entries:
        group = groups.get(commission.user_id)
        if group is None:
            group = UserCommissionGroup(
                user_id=commission.user_id,
                user_name=name or user_names.get(commission.user_id) or DEFAULT_USER_NAME,
                user_role=role,
                total=Decimal("0"),
                pending=Decimal("0"),
                paid=Decimal("0"),
                commissions=[],
            )
            groups[commission.user_id] = group

        group.total += commission.commission_value
        if commission.status == "paid":
            group.paid += commission.commission_value
        else:
            group.pending += commission.commission_value
        group.commissions.append(commission)

    ordered = sorted(groups.values(), key=lambda g: g.total, reverse=True)
    return CommissionSummaryResponse(
        groups=ordered,
        totals=CommissionTotals(
            total=sum((g.total for g in ordered), Decimal("0")),
            pending=sum((g.pending for g in ordered), Decimal("0")),
            paid=sum((g.paid for g in ordered), Decimal("0")),
        ),
    )


class UpsellCommissionService(ResourceService):
    table = "upsell_commissions"
    resource_name = "Commission"
    soft_delete_column = None


class CommissionService:
    def __init__(self, db: Database):
        self.db = db
        self.upsell_commissions = UpsellCommissionService(db)

    async def summary(self) -> CommissionSummaryResponse:
        try:
            upsells = await self.db.find_many(
                "upsell_commissions",
                columns=(
                    "*, upsell:upsells(id, client_id, product_name, monthly_value, "
                    "sold_by_name, client:clients(id, name))"
                ),
                order_by="created_at",
                descending=True,
            )
            sales = await self.db.find_many(
                "commission_records",
                columns=(
                    "id, commission_value, user_id, user_role, created_at, "
                    "client_id, sale_id, client:clients(id, name)"
                ),
                order_by="created_at",
                descending=True,
            )
            user_ids = sorted({r["user_id"] for r in sales})
            profiles = (
                await self.db.find_many(
                    "profiles", {"user_id": user_ids}, columns="user_id, name"
                )
                if user_ids
                else []
            )
        except StoreError as e:
            logger.error(f"Failed to load commissions: {e.message}")
            upsells, sales, profiles = [], [], []

        names = {p["user_id"]: p.get("name") or DEFAULT_USER_NAME for p in profiles}
        return group_commissions(upsells, sales, names)

    async def mark_upsell_paid(self, commission_id: str) -> Record:
        return await self.upsell_commissions.update(
            commission_id, {"status": "paid", "paid_at": utcnow().isoformat()}
        )
