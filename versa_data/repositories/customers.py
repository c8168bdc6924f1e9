from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from versa_data.schemas.common import Page, PaginationOptions
from versa_data.schemas.customers import Customer, PaymentMethod, Property, PropertyType

from .base import EntityRepository


class CustomerRepository(EntityRepository[Customer]):
    """Repository for Customers."""

    kind = "customer"
    model = Customer

    async def get(self, organization_id: str, customer_id: str) -> Optional[Customer]:
        return await self._get(organizationId=organization_id, customerId=customer_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Customer]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def list_by_status(
        self, organization_id: str, status: str, options: Optional[PaginationOptions] = None
    ) -> Page[Customer]:
        return await self._list("by_status", options, organizationId=organization_id, status=status)

    async def update(
        self, organization_id: str, customer_id: str, data: Union[Customer, Mapping[str, Any]]
    ) -> Customer:
        return await self._update({"organizationId": organization_id, "customerId": customer_id}, data)

    async def delete(self, organization_id: str, customer_id: str) -> None:
        await self._delete(organizationId=organization_id, customerId=customer_id)


class PaymentMethodRepository(EntityRepository[PaymentMethod]):
    """Repository for customer PaymentMethods. Records are replaced, never updated."""

    kind = "paymentMethod"
    model = PaymentMethod

    async def get(self, payment_method_id: str) -> Optional[PaymentMethod]:
        return await self._get(paymentMethodId=payment_method_id)

    async def list_by_customer_id(
        self, customer_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PaymentMethod]:
        return await self._list("by_customer_id", options, customerId=customer_id)

    async def delete(self, payment_method_id: str) -> None:
        await self._delete(paymentMethodId=payment_method_id)


class PropertyRepository(EntityRepository[Property]):
    """Repository for customer Properties."""

    kind = "property"
    model = Property

    async def get(self, property_id: str) -> Optional[Property]:
        return await self._get(propertyId=property_id)

    async def list_by_customer_id(
        self, customer_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Property]:
        return await self._list("by_customer_id", options, customerId=customer_id)

    async def update(self, property_id: str, data: Union[Property, Mapping[str, Any]]) -> Property:
        return await self._update({"propertyId": property_id}, data)

    async def delete(self, property_id: str) -> None:
        await self._delete(propertyId=property_id)


class PropertyTypeRepository(EntityRepository[PropertyType]):
    """Repository for PropertyTypes."""

    kind = "propertyType"
    model = PropertyType

    async def get(self, organization_id: str, property_type_id: str) -> Optional[PropertyType]:
        return await self._get(organizationId=organization_id, propertyTypeId=property_type_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[PropertyType]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, property_type_id: str, data: Union[PropertyType, Mapping[str, Any]]
    ) -> PropertyType:
        return await self._update({"organizationId": organization_id, "propertyTypeId": property_type_id}, data)

    async def delete(self, organization_id: str, property_type_id: str) -> None:
        await self._delete(organizationId=organization_id, propertyTypeId=property_type_id)
