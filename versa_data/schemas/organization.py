from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, StrictStr

from .common import Number, Record, WireModel


class OrganizationConfig(WireModel):
    """Per-organization settings stored inline on the organization record."""
    google_maps_api_key: Optional[StrictStr] = Field(None)
    default_plan_id: Optional[StrictStr] = Field(None, description="Plan offered to new customers")
    invoice_day_of_month: Optional[Number] = Field(None, description="Day of month invoices are issued")
    brand_color: Optional[StrictStr] = Field(None)
    logo_url: Optional[StrictStr] = Field(None)


class Organization(Record):
    """Tenant. Every tenant-scoped record carries its organization_id."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    name: StrictStr = Field(..., description="Display name")
    slug: StrictStr = Field(..., description="URL slug (lookup key)")
    status: Literal["active", "inactive", "suspended"] = Field(..., description="Lifecycle status")
    owner_user_id: StrictStr = Field(..., description="User that owns the organization")
    billing_email: StrictStr = Field(..., description="Billing contact email")
    phone: Optional[StrictStr] = Field(None)
    address: Optional[StrictStr] = Field(None)
    city: Optional[StrictStr] = Field(None)
    state: Optional[StrictStr] = Field(None)
    zip: Optional[StrictStr] = Field(None)
    timezone: Optional[StrictStr] = Field(None, description="IANA timezone name")
    config: Optional[OrganizationConfig] = Field(None)
    secrets_arn: Optional[StrictStr] = Field(None, description="ARN of the organization's secret bundle")


class Account(Record):
    """Customer login account."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    account_id: StrictStr = Field(..., description="Account ID")
    customer_id: StrictStr = Field(..., description="Owning customer")
    status: Literal["active", "inactive", "suspended"] = Field(...)
    cognito_user_id: Optional[StrictStr] = Field(None)
    plan_id: Optional[StrictStr] = Field(None)
    billing_email: Optional[StrictStr] = Field(None)


class Delegate(Record):
    """Person granted access to an account on the customer's behalf."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    delegate_id: StrictStr = Field(..., description="Delegate ID")
    account_id: StrictStr = Field(..., description="Account the delegate acts for")
    email: StrictStr = Field(...)
    name: StrictStr = Field(...)
    status: Literal["active", "inactive"] = Field(...)
    permissions: Optional[List[StrictStr]] = Field(None)
