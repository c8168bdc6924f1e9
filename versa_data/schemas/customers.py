from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, StrictBool, StrictStr

from .common import Number, Record


class Customer(Record):
    """Customer read model."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    customer_id: StrictStr = Field(..., description="Customer ID")
    first_name: StrictStr = Field(...)
    last_name: StrictStr = Field(...)
    email: StrictStr = Field(...)
    status: Literal["active", "inactive", "suspended"] = Field(...)
    phone: Optional[StrictStr] = Field(None)
    notes: Optional[StrictStr] = Field(None)


class PaymentMethod(Record):
    """Stored payment instrument; only the last four digits are kept."""
    payment_method_id: StrictStr = Field(..., description="Payment method ID")
    customer_id: StrictStr = Field(...)
    type: Literal["credit_card", "debit_card", "bank_account", "ach"] = Field(...)
    last4: StrictStr = Field(...)
    status: Literal["active", "inactive"] = Field(...)
    is_default: Optional[StrictBool] = Field(None)


class Property(Record):
    """Serviced location owned by a customer."""
    property_id: StrictStr = Field(..., description="Property ID")
    customer_id: StrictStr = Field(...)
    property_type_id: StrictStr = Field(...)
    name: StrictStr = Field(...)
    address: StrictStr = Field(...)
    city: StrictStr = Field(...)
    state: StrictStr = Field(...)
    zip: StrictStr = Field(...)
    status: Literal["active", "inactive"] = Field(...)
    lat: Optional[Number] = Field(None)
    lng: Optional[Number] = Field(None)
    lot_size: Optional[Number] = Field(None)
    notes: Optional[StrictStr] = Field(None)


class PropertyType(Record):
    organization_id: StrictStr = Field(..., description="Organization ID")
    property_type_id: StrictStr = Field(..., description="Property type ID")
    name: StrictStr = Field(...)
    description: Optional[StrictStr] = Field(None)
