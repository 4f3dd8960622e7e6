# apps/api/src/domains/invoices/models.py
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

InvoiceStatus = Literal["pending", "paid", "overdue", "cancelled"]


class InvoiceCreate(BaseModel):
    """Request model for registering a client's monthly invoice"""

    client_id: str
    invoice_month: date = Field(description="First day of the billed month")
    invoice_value: Decimal = Field(gt=0)
    invoice_number: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceResponse(BaseModel):
    """Response model for invoice data"""

    id: str
    client_id: str
    client_name: Optional[str] = None
    invoice_month: date
    invoice_value: Decimal
    invoice_number: Optional[str] = None
    status: InvoiceStatus
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "InvoiceResponse":
        client = record.get("client") or {}
        return cls(
            id=str(record["id"]),
            client_id=record["client_id"],
            client_name=client.get("name"),
            invoice_month=record["invoice_month"],
            invoice_value=record["invoice_value"],
            invoice_number=record.get("invoice_number"),
            status=record.get("status") or "pending",
            due_date=record.get("due_date"),
            paid_at=record.get("paid_at"),
            notes=record.get("notes"),
            created_by=record.get("created_by"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


class InvoiceTotals(BaseModel):
    total: Decimal
    paid: Decimal
    pending: Decimal


class PaginationMetadata(BaseModel):
    """Pagination metadata for list responses"""

    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool


class InvoiceListResponse(BaseModel):
    """Response model for invoice list with pagination"""

    invoices: List[InvoiceResponse]
    totals: InvoiceTotals
    pagination: PaginationMetadata


class InvoiceMutationResponse(BaseModel):
    message: str
    invoice: Optional[InvoiceResponse] = None
