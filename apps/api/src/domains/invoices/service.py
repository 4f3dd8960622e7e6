# apps/api/src/domains/invoices/service.py
import math
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from src.core.database import Record
from src.domains.auth.models import Principal
from src.domains.invoices.models import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceStatus,
    InvoiceTotals,
    PaginationMetadata,
)
from src.shared.resources import ResourceService, utcnow

OPEN_STATUSES = ("pending", "overdue")


def calculate_totals(records: Iterable[Record]) -> InvoiceTotals:
    """Sum invoice values overall, paid, and still receivable."""
    total = paid = pending = Decimal("0")
    for record in records:
        value = Decimal(str(record.get("invoice_value") or 0))
        total += value
        if record.get("status") == "paid":
            paid += value
        elif record.get("status") in OPEN_STATUSES:
            pending += value
    return InvoiceTotals(total=total, paid=paid, pending=pending)


class ClientInvoiceService(ResourceService):
    table = "client_invoices"
    resource_name = "Invoice"
    soft_delete_column = None
    allow_hard_delete = True
    duplicate_message = "An invoice already exists for this client in this month"

    async def list_invoices(
        self,
        page: int = 1,
        limit: int = 50,
        status: Optional[InvoiceStatus] = None,
        invoice_month: Optional[date] = None,
        client_id: Optional[str] = None,
    ) -> InvoiceListResponse:
        """
        Get invoices with filtering and pagination

        Args:
            page: Page number (1-based)
            limit: Number of records per page
            status: Filter by invoice status
            invoice_month: Only invoices billed for this month
            client_id: Filter by specific client ID

        Returns:
            InvoiceListResponse with invoices, totals over every match and
            pagination metadata
        """
        where: dict[str, Any] = {}
        if status:
            where["status"] = status
        if invoice_month:
            where["invoice_month"] = invoice_month.replace(day=1).isoformat()
        if client_id:
            where["client_id"] = client_id

        records = await self.list(where or None, order_by="invoice_month")

        total_count = len(records)
        offset = (page - 1) * limit
        pages = math.ceil(total_count / limit) if total_count > 0 else 0

        return InvoiceListResponse(
            invoices=[
                InvoiceResponse.from_record(record)
                for record in records[offset : offset + limit]
            ],
            totals=calculate_totals(records),
            pagination=PaginationMetadata(
                page=page,
                limit=limit,
                total=total_count,
                pages=pages,
                has_next=page < pages,
                has_prev=page > 1,
            ),
        )

    async def create_invoice(
        self, principal: Principal, invoice: InvoiceCreate
    ) -> Record:
        return await self.create(
            {
                "client_id": invoice.client_id,
                # One invoice per client and month, keyed on the month's first day
                "invoice_month": invoice.invoice_month.replace(day=1).isoformat(),
                "invoice_value": str(invoice.invoice_value),
                "invoice_number": invoice.invoice_number,
                "due_date": invoice.due_date.isoformat() if invoice.due_date else None,
                "notes": invoice.notes,
                "created_by": principal.id,
                "status": "pending",
            }
        )

    async def set_status(self, invoice_id: str, status: InvoiceStatus) -> Record:
        fields: dict[str, Any] = {"status": status}
        if status == "paid":
            fields["paid_at"] = utcnow().isoformat()
        return await self.update(invoice_id, fields)
