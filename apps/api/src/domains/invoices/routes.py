# apps/api/src/domains/invoices/routes.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.core.database import Database, get_db
from src.domains.auth.models import Principal
from src.domains.invoices.models import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceMutationResponse,
    InvoiceResponse,
    InvoiceStatus,
    InvoiceStatusUpdate,
)
from src.domains.invoices.service import ClientInvoiceService
from src.shared.permissions.dependencies import require_roles
from src.shared.permissions.models import UserRole

# Create router with prefix and tags
router = APIRouter(prefix="/invoices", tags=["Invoices"])

require_finance = require_roles(
    UserRole.CEO, UserRole.GESTOR_PROJETOS, UserRole.FINANCEIRO
)


@router.get("", response_model=InvoiceListResponse, operation_id="getInvoices")
async def get_invoices(
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
    page: int = Query(1, description="Page number for pagination", ge=1, le=1000),
    limit: int = Query(50, description="Number of records per page", ge=1, le=500),
    status: Optional[InvoiceStatus] = Query(
        None, description="Filter by invoice status"
    ),
    invoice_month: Optional[date] = Query(
        None, description="Only invoices for this month (YYYY-MM-DD)"
    ),
    client_id: Optional[str] = Query(None, description="Filter by specific client ID"),
) -> InvoiceListResponse:
    """
    Get client invoices with filtering and pagination

    Restricted to finance and administrators.
    """
    return await ClientInvoiceService(db).list_invoices(
        page=page,
        limit=limit,
        status=status,
        invoice_month=invoice_month,
        client_id=client_id,
    )


@router.post(
    "",
    response_model=InvoiceMutationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createInvoice",
)
async def create_invoice(
    invoice: InvoiceCreate,
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
) -> InvoiceMutationResponse:
    record = await ClientInvoiceService(db).create_invoice(principal, invoice)
    return InvoiceMutationResponse(
        message="Invoice created", invoice=InvoiceResponse.from_record(record)
    )


@router.patch(
    "/{invoice_id}/status",
    response_model=InvoiceMutationResponse,
    operation_id="updateInvoiceStatus",
)
async def update_invoice_status(
    invoice_id: str,
    update: InvoiceStatusUpdate,
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
) -> InvoiceMutationResponse:
    record = await ClientInvoiceService(db).set_status(invoice_id, update.status)
    return InvoiceMutationResponse(
        message="Status updated", invoice=InvoiceResponse.from_record(record)
    )


@router.delete(
    "/{invoice_id}",
    response_model=InvoiceMutationResponse,
    operation_id="deleteInvoice",
)
async def delete_invoice(
    invoice_id: str,
    principal: Principal = Depends(require_finance),
    db: Database = Depends(get_db),
) -> InvoiceMutationResponse:
    await ClientInvoiceService(db).delete(invoice_id)
    return InvoiceMutationResponse(message="Invoice removed")
