from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, StrictStr

from .common import Number, Record


class Employee(Record):
    """Employee read model."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    employee_id: StrictStr = Field(..., description="Employee ID")
    first_name: StrictStr = Field(...)
    last_name: StrictStr = Field(...)
    email: StrictStr = Field(...)
    role: StrictStr = Field(..., description="Free-form role, e.g. tech or manager")
    status: Literal["active", "inactive", "terminated"] = Field(...)
    phone: Optional[StrictStr] = Field(None)
    hire_date: Optional[StrictStr] = Field(None)


class Capability(Record):
    """Service type an employee is qualified for."""
    organization_id: StrictStr = Field(..., description="Organization ID")
    capability_id: StrictStr = Field(..., description="Capability ID")
    employee_id: StrictStr = Field(...)
    service_type_id: StrictStr = Field(...)
    level: Literal["beginner", "intermediate", "expert"] = Field(...)
    certification_date: Optional[StrictStr] = Field(None)


class Servicer(Record):
    """Field profile of an employee who performs services."""
    servicer_id: StrictStr = Field(..., description="Servicer ID")
    employee_id: StrictStr = Field(...)
    status: Literal["active", "inactive"] = Field(...)
    service_area: Optional[StrictStr] = Field(None)
    max_daily_jobs: Optional[Number] = Field(None)
    rating: Optional[Number] = Field(None)


class Pay(Record):
    """Compensation record for an employee."""
    pay_id: StrictStr = Field(..., description="Pay ID")
    employee_id: StrictStr = Field(...)
    pay_type: Literal["hourly", "salary", "commission", "bonus"] = Field(...)
    rate: Number = Field(...)
    effective_date: StrictStr = Field(...)
    pay_schedule_id: Optional[StrictStr] = Field(None)


class PaySchedule(Record):
    pay_schedule_id: StrictStr = Field(..., description="Pay schedule ID")
    name: StrictStr = Field(...)
    frequency: Literal["weekly", "biweekly", "semimonthly", "monthly"] = Field(...)
    day_of_week: Optional[Number] = Field(None)
    day_of_month: Optional[Number] = Field(None)
