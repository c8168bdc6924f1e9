"""
Repository layer for data access.

One repository per record kind, each a thin typed surface over the shared
SingleTableStore. Tenant-scoped repositories take the organization id as their
first argument; the key schema registry guarantees their queries never leave
that organization's partitions.
"""

from .billing import CostRepository, CostTypeRepository, InvoiceRepository, InvoiceScheduleRepository
from .customers import CustomerRepository, PaymentMethodRepository, PropertyRepository, PropertyTypeRepository
from .organization import AccountRepository, DelegateRepository, OrganizationRepository
from .service_catalog import (
    PlanRepository,
    PlanServiceRepository,
    PropertyServiceRepository,
    ServiceScheduleRepository,
    ServiceTypeRepository,
)
from .workforce import (
    CapabilityRepository,
    EmployeeRepository,
    PayRepository,
    PayScheduleRepository,
    ServicerRepository,
)

# Every registered kind has exactly one repository.
REPOSITORIES = {
    repository.kind: repository
    for repository in (
        OrganizationRepository,
        AccountRepository,
        DelegateRepository,
        EmployeeRepository,
        CapabilityRepository,
        ServicerRepository,
        PayRepository,
        PayScheduleRepository,
        CustomerRepository,
        PaymentMethodRepository,
        PropertyRepository,
        PropertyTypeRepository,
        ServiceTypeRepository,
        PlanRepository,
        PlanServiceRepository,
        PropertyServiceRepository,
        ServiceScheduleRepository,
        InvoiceRepository,
        InvoiceScheduleRepository,
        CostRepository,
        CostTypeRepository,
    )
}

__all__ = [repository.__name__ for repository in REPOSITORIES.values()] + ["REPOSITORIES"]
