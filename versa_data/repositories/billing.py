from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from versa_data.schemas.billing import Cost, CostType, Invoice, InvoiceSchedule
from versa_data.schemas.common import Page, PaginationOptions

from .base import EntityRepository


class InvoiceRepository(EntityRepository[Invoice]):
    """Repository for Invoices."""

    kind = "invoice"
    model = Invoice

    async def get(self, organization_id: str, invoice_id: str) -> Optional[Invoice]:
        return await self._get(organizationId=organization_id, invoiceId=invoice_id)

    async def list_by_customer_id(
        self, organization_id: str, customer_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Invoice]:
        """A customer's invoices, ordered by invoice date."""
        return await self._list("by_customer_id", options, organizationId=organization_id, customerId=customer_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Invoice]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, invoice_id: str, data: Union[Invoice, Mapping[str, Any]]
    ) -> Invoice:
        return await self._update({"organizationId": organization_id, "invoiceId": invoice_id}, data)

    async def delete(self, organization_id: str, invoice_id: str) -> None:
        await self._delete(organizationId=organization_id, invoiceId=invoice_id)


class InvoiceScheduleRepository(EntityRepository[InvoiceSchedule]):
    """Repository for InvoiceSchedules."""

    kind = "invoiceSchedule"
    model = InvoiceSchedule

    async def get(self, organization_id: str, invoice_schedule_id: str) -> Optional[InvoiceSchedule]:
        return await self._get(organizationId=organization_id, invoiceScheduleId=invoice_schedule_id)

    async def list_by_customer_id(
        self, organization_id: str, customer_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[InvoiceSchedule]:
        return await self._list("by_customer_id", options, organizationId=organization_id, customerId=customer_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[InvoiceSchedule]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, invoice_schedule_id: str, data: Union[InvoiceSchedule, Mapping[str, Any]]
    ) -> InvoiceSchedule:
        return await self._update(
            {"organizationId": organization_id, "invoiceScheduleId": invoice_schedule_id}, data
        )

    async def delete(self, organization_id: str, invoice_schedule_id: str) -> None:
        await self._delete(organizationId=organization_id, invoiceScheduleId=invoice_schedule_id)


class CostRepository(EntityRepository[Cost]):
    """Repository for Costs recorded against property services."""

    kind = "cost"
    model = Cost

    async def get(self, organization_id: str, cost_id: str) -> Optional[Cost]:
        return await self._get(organizationId=organization_id, costId=cost_id)

    async def list_by_service_id(
        self, organization_id: str, service_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Cost]:
        return await self._list("by_service_id", options, organizationId=organization_id, serviceId=service_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Cost]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def delete(self, organization_id: str, cost_id: str) -> None:
        await self._delete(organizationId=organization_id, costId=cost_id)


class CostTypeRepository(EntityRepository[CostType]):
    """Repository for CostTypes."""

    kind = "costType"
    model = CostType

    async def get(self, cost_type_id: str) -> Optional[CostType]:
        return await self._get(costTypeId=cost_type_id)

    async def list(self, options: Optional[PaginationOptions] = None) -> Page[CostType]:
        return await self._list("all", options)

    async def update(self, cost_type_id: str, data: Union[CostType, Mapping[str, Any]]) -> CostType:
        return await self._update({"costTypeId": cost_type_id}, data)

    async def delete(self, cost_type_id: str) -> None:
        await self._delete(costTypeId=cost_type_id)
