from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from versa_data.schemas.common import Page, PaginationOptions
from versa_data.schemas.organization import Account, Delegate, Organization, OrganizationConfig

from .base import EntityRepository


class OrganizationRepository(EntityRepository[Organization]):
    """Repository for Organizations (tenants)."""

    kind = "organization"
    model = Organization

    async def get(self, organization_id: str) -> Optional[Organization]:
        return await self._get(organizationId=organization_id)

    async def get_by_slug(self, slug: str) -> Optional[Organization]:
        """Resolve an organization from its URL slug."""
        return await self._first("by_slug", slug=slug)

    async def list(self, options: Optional[PaginationOptions] = None) -> Page[Organization]:
        """
        List every organization.

        Note:
          Organizations are not partitioned under a common key, so this is a
          filtered table scan; use list_by_status where possible.
        """
        return await self._scan(options)

    async def list_by_status(
        self, status: str, options: Optional[PaginationOptions] = None
    ) -> Page[Organization]:
        return await self._list("by_status", options, status=status)

    async def update(
        self, organization_id: str, data: Union[Organization, Mapping[str, Any]]
    ) -> Organization:
        return await self._update({"organizationId": organization_id}, data)

    # PUBLIC_INTERFACE
    async def update_config(
        self, organization_id: str, config: Union[OrganizationConfig, Mapping[str, Any]]
    ) -> Organization:
        """
        Replace the organization's inline config block.

        Parameters:
            organization_id: target organization
            config: OrganizationConfig or mapping (snake_case or camelCase keys)
        Returns:
            Updated Organization
        """
        if not isinstance(config, OrganizationConfig):
            config = OrganizationConfig.model_validate(config)
        return await self._update({"organizationId": organization_id}, {"config": config.to_item()})

    async def delete(self, organization_id: str) -> None:
        await self._delete(organizationId=organization_id)


class AccountRepository(EntityRepository[Account]):
    """Repository for customer Accounts."""

    kind = "account"
    model = Account

    async def get(self, organization_id: str, account_id: str) -> Optional[Account]:
        return await self._get(organizationId=organization_id, accountId=account_id)

    async def get_by_customer_id(self, organization_id: str, customer_id: str) -> Optional[Account]:
        """Return the customer's account (a customer has at most one)."""
        return await self._first("by_customer_id", organizationId=organization_id, customerId=customer_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Account]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def update(
        self, organization_id: str, account_id: str, data: Union[Account, Mapping[str, Any]]
    ) -> Account:
        return await self._update({"organizationId": organization_id, "accountId": account_id}, data)

    async def delete(self, organization_id: str, account_id: str) -> None:
        await self._delete(organizationId=organization_id, accountId=account_id)


class DelegateRepository(EntityRepository[Delegate]):
    """Repository for account Delegates."""

    kind = "delegate"
    model = Delegate

    async def get(self, organization_id: str, delegate_id: str) -> Optional[Delegate]:
        return await self._get(organizationId=organization_id, delegateId=delegate_id)

    async def list_by_account_id(
        self, organization_id: str, account_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Delegate]:
        return await self._list("by_account_id", options, organizationId=organization_id, accountId=account_id)

    async def list_by_org(
        self, organization_id: str, options: Optional[PaginationOptions] = None
    ) -> Page[Delegate]:
        return await self._list("by_org", options, organizationId=organization_id)

    async def delete(self, organization_id: str, delegate_id: str) -> None:
        await self._delete(organizationId=organization_id, delegateId=delegate_id)
