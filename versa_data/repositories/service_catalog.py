from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from versa_data.schemas.common import Page, PaginationOptions
from versa_data.schemas.service_catalog import (
    Plan,
    PlanService,
    PropertyService,
    ServiceSchedule,
    ServiceType,
)

from .base import EntityRepository


class ServiceTypeRepository(EntityRepository[ServiceType]):
    """Repository for ServiceTypes."""

    kind = "serviceType"
    model = ServiceType

    async def get(self, service_type_id: str) -> Optional[ServiceType]:
        return await self._get(serviceTypeId=service_type_id)

    async def list(self, options: Optional[PaginationOptions] = None) -> Page[ServiceType]:
        return await self._list("all", options)

    async def update(
        self, service_type_id: str, data: Union[ServiceType, Mapping[str, Any]]
    ) -> ServiceType:
        return await self._update({"serviceTypeId": service_type_id}, data)

    async def delete(self, service_type_id: str) -> None:
        await self._delete(serviceTypeId=service_type_id)


class PlanRepository(EntityRepository[Plan]):
    """Repository for subscription Plans."""

    kind = "plan"
    model = Plan

    async def get(self, plan_id: str) -> Optional[Plan]:
        return await self._get(planId=plan_id)

    async def list(self, options: Optional[PaginationOptions] = None) -> Page[Plan]:
        return await self._list("all", options)

    async def update(self, plan_id: str, data: Union[Plan, Mapping[str, Any]]) -> Plan:
        return await self._update({"planId": plan_id}, data)

    async def delete(self, plan_id: str) -> None:
        await self._delete(planId=plan_id)


class PlanServiceRepository(EntityRepository[PlanService]):
    """
    Repository for PlanServices.

    One record per (plan, service type) pair, stored in the plan's partition so
    list_by_plan_id is a primary-key query.
    """

    kind = "planService"
    model = PlanService

    async def get(
        self, organization_id: str, plan_id: str, service_type_id: str
    ) -> Optional[PlanService]:
        return await self._get(organizationId=organization_id, planId=plan_id, serviceTypeId=service_type_id)

    async def list_by_plan_id(
        self, organization_id: str, plan_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PlanService]:
        return await self._list("primary", options, organizationId=organization_id, planId=plan_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PlanService]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def delete(self, organization_id: str, plan_id: str, service_type_id: str) -> None:
        await self._delete(organizationId=organization_id, planId=plan_id, serviceTypeId=service_type_id)


class PropertyServiceRepository(EntityRepository[PropertyService]):
    """Repository for PropertyServices (services subscribed per property)."""

    kind = "propertyService"
    model = PropertyService

    async def get(self, organization_id: str, service_id: str) -> Optional[PropertyService]:
        return await self._get(organizationId=organization_id, serviceId=service_id)

    async def list_by_property_id(
        self, organization_id: str, property_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PropertyService]:
        return await self._list("by_property_id", options, organizationId=organization_id, propertyId=property_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PropertyService]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, service_id: str, data: Union[PropertyService, Mapping[str, Any]]
    ) -> PropertyService:
        return await self._update({"organizationId": organization_id, "serviceId": service_id}, data)

    async def delete(self, organization_id: str, service_id: str) -> None:
        await self._delete(organizationId=organization_id, serviceId=service_id)


class ServiceScheduleRepository(EntityRepository[ServiceSchedule]):
    """Repository for ServiceSchedules."""

    kind = "serviceSchedule"
    model = ServiceSchedule

    async def get(self, organization_id: str, service_schedule_id: str) -> Optional[ServiceSchedule]:
        return await self._get(organizationId=organization_id, serviceScheduleId=service_schedule_id)

    async def list_by_servicer_id(
        self, organization_id: str, servicer_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[ServiceSchedule]:
        """A servicer's visits, ordered by scheduled date."""
        return await self._list("by_servicer_id", options, organizationId=organization_id, servicerId=servicer_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[ServiceSchedule]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, service_schedule_id: str, data: Union[ServiceSchedule, Mapping[str, Any]]
    ) -> ServiceSchedule:
        return await self._update(
            {"organizationId": organization_id, "serviceScheduleId": service_schedule_id}, data
        )

    async def delete(self, organization_id: str, service_schedule_id: str) -> None:
        await self._delete(organizationId=organization_id, serviceScheduleId=service_schedule_id)
