from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, StrictStr

from .common import Number, Record, WireModel


class InvoiceLineItem(WireModel):
    """Invoice line."""
    description: StrictStr = Field(...)
    quantity: Number = Field(...)
    unit_price: Number = Field(...)
    total: Number = Field(...)


class Invoice(Record):
    """Invoice read model; amounts are in the organization's currency."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    invoice_id: StrictStr = Field(..., description="Invoice ID")
    customer_id: StrictStr = Field(...)
    invoice_number: StrictStr = Field(...)
    invoice_date: StrictStr = Field(..., description="ISO date; sort key of the customer index")
    due_date: StrictStr = Field(...)
    subtotal: Number = Field(...)
    tax: Number = Field(...)
    total: Number = Field(...)
    status: Literal["draft", "sent", "paid", "overdue", "cancelled"] = Field(...)
    line_items: Optional[List[InvoiceLineItem]] = Field(None)
    paid_at: Optional[StrictStr] = Field(None)


class InvoiceSchedule(Record):
    """Recurring invoicing setup for a customer."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    invoice_schedule_id: StrictStr = Field(..., description="Invoice schedule ID")
    customer_id: StrictStr = Field(...)
    frequency: Literal["monthly", "quarterly", "annually"] = Field(...)
    next_invoice_date: StrictStr = Field(...)
    day_of_month: Optional[Number] = Field(None)


class Cost(Record):
    """Cost incurred against a property service."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    cost_id: StrictStr = Field(..., description="Cost ID")
    service_id: StrictStr = Field(...)
    cost_type_id: StrictStr = Field(...)
    amount: Number = Field(...)
    description: Optional[StrictStr] = Field(None)
    effective_date: Optional[StrictStr] = Field(None)


class CostType(Record):
    cost_type_id: StrictStr = Field(..., description="Cost type ID")
    name: StrictStr = Field(...)
    description: Optional[StrictStr] = Field(None)
