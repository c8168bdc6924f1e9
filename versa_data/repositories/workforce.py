from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from versa_data.schemas.common import Page, PaginationOptions
from versa_data.schemas.workforce import Capability, Employee, Pay, PaySchedule, Servicer

from .base import EntityRepository


class EmployeeRepository(EntityRepository[Employee]):
    """Repository for Employees."""

    kind = "employee"
    model = Employee

    async def get(self, organization_id: str, employee_id: str) -> Optional[Employee]:
        return await self._get(organizationId=organization_id, employeeId=employee_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Employee]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def list_by_status(
        self, organization_id: str, status: str, options: Optional[PaginationOptions] = None
    ) -> Page[Employee]:
        return await self._list("by_status", options, organizationId=organization_id, status=status)

    async def update(
        self, organization_id: str, employee_id: str, data: Union[Employee, Mapping[str, Any]]
    ) -> Employee:
        return await self._update({"organizationId": organization_id, "employeeId": employee_id}, data)

    async def delete(self, organization_id: str, employee_id: str) -> None:
        await self._delete(organizationId=organization_id, employeeId=employee_id)


class CapabilityRepository(EntityRepository[Capability]):
    """Repository for employee Capabilities."""

    kind = "capability"
    model = Capability

    async def get(self, organization_id: str, capability_id: str) -> Optional[Capability]:
        return await self._get(organizationId=organization_id, capabilityId=capability_id)

    async def list_by_employee_id(
        self, organization_id: str, employee_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Capability]:
        return await self._list("by_employee_id", options, organizationId=organization_id, employeeId=employee_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Capability]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def delete(self, organization_id: str, capability_id: str) -> None:
        await self._delete(organizationId=organization_id, capabilityId=capability_id)


class ServicerRepository(EntityRepository[Servicer]):
    """Repository for Servicers (field profiles of employees)."""

    kind = "servicer"
    model = Servicer

    async def get(self, servicer_id: str) -> Optional[Servicer]:
        return await self._get(servicerId=servicer_id)

    async def list_by_employee_id(
        self, employee_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Servicer]:
        return await self._list("by_employee_id", options, employeeId=employee_id)

    async def update(self, servicer_id: str, data: Union[Servicer, Mapping[str, Any]]) -> Servicer:
        return await self._update({"servicerId": servicer_id}, data)

    async def delete(self, servicer_id: str) -> None:
        await self._delete(servicerId=servicer_id)


class PayRepository(EntityRepository[Pay]):
    """Repository for employee Pay records."""

    kind = "pay"
    model = Pay

    async def get(self, pay_id: str) -> Optional[Pay]:
        return await self._get(payId=pay_id)

    async def list_by_employee_id(
        self, employee_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Pay]:
        return await self._list("by_employee_id", options, employeeId=employee_id)

    async def update(self, pay_id: str, data: Union[Pay, Mapping[str, Any]]) -> Pay:
        return await self._update({"payId": pay_id}, data)

    async def delete(self, pay_id: str) -> None:
        await self._delete(payId=pay_id)


class PayScheduleRepository(EntityRepository[PaySchedule]):
    """Repository for PaySchedules."""

    kind = "paySchedule"
    model = PaySchedule

    async def get(self, pay_schedule_id: str) -> Optional[PaySchedule]:
        return await self._get(payScheduleId=pay_schedule_id)

    async def list(self, options: Optional[PaginationOptions] = None) -> Page[PaySchedule]:
        return await self._list("all", options)

    async def update(
        self, pay_schedule_id: str, data: Union[PaySchedule, Mapping[str, Any]]
    ) -> PaySchedule:
        return await self._update({"payScheduleId": pay_schedule_id}, data)

    async def delete(self, pay_schedule_id: str) -> None:
        await self._delete(payScheduleId=pay_schedule_id)
