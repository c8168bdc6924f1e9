from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, StrictStr

from .common import Number, Record


class ServiceType(Record):
    """Kind of work offered (e.g. mowing, snow removal)."""
    service_type_id: StrictStr = Field(..., description="Service type ID")
    name: StrictStr = Field(...)
    description: Optional[StrictStr] = Field(None)
    category: Optional[StrictStr] = Field(None)


class Plan(Record):
    """Subscription plan bundling service types."""
    plan_id: StrictStr = Field(..., description="Plan ID")
    name: StrictStr = Field(...)
    monthly_price: Number = Field(...)
    status: Literal["active", "inactive"] = Field(...)
    description: Optional[StrictStr] = Field(None)
    annual_price: Optional[Number] = Field(None)


class PlanService(Record):
    """Membership of a service type in a plan (one record per pair)."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    plan_id: StrictStr = Field(...)
    service_type_id: StrictStr = Field(...)
    included_visits: Optional[Number] = Field(None)
    frequency: Optional[StrictStr] = Field(None)


class PropertyService(Record):
    """Service subscribed for a property."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    service_id: StrictStr = Field(..., description="Property service ID")
    property_id: StrictStr = Field(...)
    service_type_id: StrictStr = Field(...)
    status: Literal["active", "inactive", "cancelled"] = Field(...)
    plan_id: Optional[StrictStr] = Field(None)
    start_date: Optional[StrictStr] = Field(None)
    end_date: Optional[StrictStr] = Field(None)
    frequency: Optional[StrictStr] = Field(None)


class ServiceSchedule(Record):
    """Scheduled visit of a servicer for a property service."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    service_schedule_id: StrictStr = Field(..., description="Service schedule ID")
    service_id: StrictStr = Field(...)
    servicer_id: StrictStr = Field(...)
    scheduled_date: StrictStr = Field(..., description="ISO date; sort key of the servicer index")
    status: Literal["scheduled", "in_progress", "completed", "cancelled"] = Field(...)
    scheduled_time: Optional[StrictStr] = Field(None)
    estimated_duration: Optional[Number] = Field(None)
    completed_at: Optional[StrictStr] = Field(None)
