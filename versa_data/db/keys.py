"""
Key schema registry for the Versa single table.

Every record kind is described once here: its primary key, the secondary
index slots it occupies, and its write-time defaults. Key values use the
ElectroDB layout already present in the table:

    pk  = "$versa#organizationid_org-1#employeeid_e-1"
    sk  = "$employee_1"

Partition values are "$<service>" followed by "#<attr lowercased>_<value>" for
each composite attribute; sort values are "$<entity>_<version>" followed by the
same pairs. Records also carry the "__edb_e__"/"__edb_v__" discriminators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from versa_data.core.errors import KeySchemaError

SERVICE = "versa"
ENTITY_FIELD = "__edb_e__"
VERSION_FIELD = "__edb_v__"


@dataclass(frozen=True)
class IndexSlot:
    """A physical key pair: the table itself (index_name None) or a GSI."""

    index_name: Optional[str]
    pk_field: str
    sk_field: str


TABLE = IndexSlot(None, "pk", "sk")
GSI1 = IndexSlot("gsi1", "gsi1pk", "gsi1sk")
GSI2 = IndexSlot("gsi2", "gsi2pk", "gsi2sk")
SLOTS: Tuple[IndexSlot, ...] = (TABLE, GSI1, GSI2)

# Attributes the table owns; never returned to callers.
KEY_FIELDS: Tuple[str, ...] = tuple(
    name for slot in SLOTS for name in (slot.pk_field, slot.sk_field)
) + (ENTITY_FIELD, VERSION_FIELD)


@dataclass(frozen=True)
class AccessPattern:
    """Named lookup: which slot it uses and which attributes compose its keys."""

    name: str
    slot: IndexSlot
    pk: Tuple[str, ...]
    sk: Tuple[str, ...] = ()

    @property
    def attributes(self) -> Tuple[str, ...]:
        return self.pk + self.sk


@dataclass(frozen=True)
class KeyCondition:
    """
    Resolved key condition for a query.

    sk_value is either the complete sort key (sk_is_prefix False) or a prefix to
    match with begins_with.
    """

    index_name: Optional[str]
    pk_field: str
    pk_value: str
    sk_field: str
    sk_value: str
    sk_is_prefix: bool


def _format_value(attribute: str, value: Any) -> str:
    if value is None or value == "":
        raise KeySchemaError(f"Missing value for key attribute {attribute!r}")
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise KeySchemaError(
            f"Key attribute {attribute!r} must be a string, got {type(value).__name__}"
        )
    return str(value)


def _compose(prefix: str, attributes: Iterable[str], values: Mapping[str, Any]) -> str:
    parts = [prefix]
    for attribute in attributes:
        parts.append(f"#{attribute.lower()}_{_format_value(attribute, values.get(attribute))}")
    return "".join(parts)


@dataclass(frozen=True)
class EntityDefinition:
    """Key layout and write-time defaults of one record kind."""

    name: str
    id_attribute: str
    primary: AccessPattern
    indexes: Tuple[AccessPattern, ...] = ()
    defaults: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    version: str = "1"
    # False when the id attribute references another record instead of naming this one.
    generate_id: bool = True

    @property
    def tenant_scoped(self) -> bool:
        """True when organizationId leads the primary partition key."""
        return bool(self.primary.pk) and self.primary.pk[0] == "organizationId"

    @property
    def sort_prefix(self) -> str:
        return f"${self.name}_{self.version}"

    @property
    def discriminator(self) -> Dict[str, str]:
        return {ENTITY_FIELD: self.name, VERSION_FIELD: self.version}

    @property
    def key_attributes(self) -> Tuple[str, ...]:
        """Attributes that form the primary key; immutable after create."""
        return self.primary.attributes

    @property
    def patterns(self) -> Tuple[AccessPattern, ...]:
        return (self.primary,) + self.indexes

    # PUBLIC_INTERFACE
    def pattern(self, name: str) -> AccessPattern:
        """Look up an access pattern by name ("primary" or a secondary index pattern)."""
        for candidate in self.patterns:
            if candidate.name == name:
                return candidate
        raise KeySchemaError(f"Unknown access pattern {name!r} for {self.name}")

    def index_attributes(self, name: str) -> Tuple[str, ...]:
        return self.pattern(name).attributes

    def pattern_keys(self, pattern: AccessPattern, values: Mapping[str, Any]) -> Dict[str, str]:
        """Key fields of one pattern; raises KeySchemaError if a composite is missing."""
        slot = pattern.slot
        return {
            slot.pk_field: _compose(f"${SERVICE}", pattern.pk, values),
            slot.sk_field: _compose(self.sort_prefix, pattern.sk, values),
        }

    # PUBLIC_INTERFACE
    def primary_key(self, values: Mapping[str, Any]) -> Dict[str, str]:
        """
        Build the table key ({"pk", "sk"}) of a record.

        Parameters:
          values: mapping holding every primary composite attribute
        Returns:
          dict usable as the Key argument of get_item/update_item/delete_item
        """
        return self.pattern_keys(self.primary, values)

    # PUBLIC_INTERFACE
    def index_keys(self, item: Mapping[str, Any]) -> Dict[str, str]:
        """
        Derive every key field of a full record.

        The primary key must be complete. A secondary index whose composites are not
        all present is skipped, leaving the record absent from that index.
        """
        keys = self.primary_key(item)
        for pattern in self.indexes:
            if all(item.get(attribute) not in (None, "") for attribute in pattern.attributes):
                keys.update(self.pattern_keys(pattern, item))
        return keys

    # PUBLIC_INTERFACE
    def key_condition(self, name: str, values: Mapping[str, Any]) -> KeyCondition:
        """
        Resolve a query on an access pattern.

        All partition composites are required. Sort composites are used in order;
        when every one is given the sort key must match exactly, otherwise the given
        leading composites form a prefix ending in "#" so that "org-1" never matches
        "org-10". A gap in the leading composites is an error.
        """
        pattern = self.pattern(name)
        slot = pattern.slot
        pk_value = _compose(f"${SERVICE}", pattern.pk, values)

        given: List[str] = []
        for attribute in pattern.sk:
            if values.get(attribute) in (None, ""):
                break
            given.append(attribute)
        skipped = [a for a in pattern.sk[len(given):] if values.get(a) not in (None, "")]
        if skipped:
            raise KeySchemaError(
                f"Sort attributes {skipped} given without the preceding {pattern.sk[len(given)]!r}"
            )

        sk_value = _compose(self.sort_prefix, given, values)
        if len(given) == len(pattern.sk):
            return KeyCondition(slot.index_name, slot.pk_field, pk_value, slot.sk_field, sk_value, False)
        return KeyCondition(slot.index_name, slot.pk_field, pk_value, slot.sk_field, sk_value + "#", True)


def _scoped(
    name: str,
    id_attribute: str,
    *,
    lookup: Optional[Tuple[str, str, Tuple[str, ...]]] = None,
    sort: Tuple[str, ...] = (),
    defaults: Optional[Mapping[str, Any]] = None,
    generate_id: bool = True,
) -> EntityDefinition:
    """
    Organization-scoped kind: pk [organizationId, <id>], optional gsi1 lookup
    within the organization, and gsi2 "by_org" listing every record of the kind
    for the organization.

    lookup is (pattern name, partition attribute, sort attributes).
    """
    primary_pk = ("organizationId", id_attribute)
    indexes = []
    if lookup is not None:
        pattern_name, partition_attribute, sort_attributes = lookup
        indexes.append(
            AccessPattern(pattern_name, GSI1, ("organizationId", partition_attribute), sort_attributes)
        )
    indexes.append(AccessPattern("by_org", GSI2, (), primary_pk))
    return EntityDefinition(
        name=name,
        id_attribute=id_attribute,
        primary=AccessPattern("primary", TABLE, primary_pk, sort),
        indexes=tuple(indexes),
        defaults=MappingProxyType(dict(defaults or {})),
        generate_id=generate_id,
    )


def _global(
    name: str,
    id_attribute: str,
    *,
    lookup: Optional[Tuple[str, str]] = None,
    listable: bool = False,
    defaults: Optional[Mapping[str, Any]] = None,
) -> EntityDefinition:
    """
    Kind keyed by its own id only. lookup is (pattern name, partition attribute) on
    gsi1; listable adds the gsi2 "all" pattern listing every record of the kind.
    """
    indexes = []
    if lookup is not None:
        pattern_name, partition_attribute = lookup
        indexes.append(AccessPattern(pattern_name, GSI1, (partition_attribute,), (id_attribute,)))
    if listable:
        indexes.append(AccessPattern("all", GSI2, (), (id_attribute,)))
    return EntityDefinition(
        name=name,
        id_attribute=id_attribute,
        primary=AccessPattern("primary", TABLE, (id_attribute,)),
        indexes=tuple(indexes),
        defaults=MappingProxyType(dict(defaults or {})),
    )


_ACTIVE = {"status": "active"}

ENTITIES: Tuple[EntityDefinition, ...] = (
    EntityDefinition(
        name="organization",
        id_attribute="organizationId",
        primary=AccessPattern("primary", TABLE, ("organizationId",)),
        indexes=(
            AccessPattern("by_slug", GSI1, ("slug",), ("organizationId",)),
            AccessPattern("by_status", GSI2, ("status",), ("organizationId",)),
        ),
        defaults=MappingProxyType({"status": "active", "timezone": "America/Denver"}),
    ),
    _scoped("employee", "employeeId", lookup=("by_status", "status", ("employeeId",)), defaults=_ACTIVE),
    _scoped("customer", "customerId", lookup=("by_status", "status", ("customerId",)), defaults=_ACTIVE),
    _scoped("account", "accountId", lookup=("by_customer_id", "customerId", ("accountId",)), defaults=_ACTIVE),
    _scoped("delegate", "delegateId", lookup=("by_account_id", "accountId", ("delegateId",)), defaults=_ACTIVE),
    _scoped("capability", "capabilityId", lookup=("by_employee_id", "employeeId", ("capabilityId",))),
    _scoped("cost", "costId", lookup=("by_service_id", "serviceId", ("costId",))),
    _scoped(
        "invoice",
        "invoiceId",
        lookup=("by_customer_id", "customerId", ("invoiceDate",)),
        defaults={"status": "draft"},
    ),
    _scoped(
        "invoiceSchedule",
        "invoiceScheduleId",
        lookup=("by_customer_id", "customerId", ("invoiceScheduleId",)),
    ),
    # One record per (plan, service type); the primary partition lists a plan's services.
    _scoped("planService", "planId", sort=("serviceTypeId",), generate_id=False),
    _scoped(
        "propertyService",
        "serviceId",
        lookup=("by_property_id", "propertyId", ("serviceId",)),
        defaults=_ACTIVE,
    ),
    _scoped("propertyType", "propertyTypeId"),
    _scoped(
        "serviceSchedule",
        "serviceScheduleId",
        lookup=("by_servicer_id", "servicerId", ("scheduledDate",)),
        defaults={"status": "scheduled"},
    ),
    _global("serviceType", "serviceTypeId", listable=True),
    _global("costType", "costTypeId", listable=True),
    _global("plan", "planId", listable=True, defaults=_ACTIVE),
    _global("property", "propertyId", lookup=("by_customer_id", "customerId"), defaults=_ACTIVE),
    _global("servicer", "servicerId", lookup=("by_employee_id", "employeeId"), defaults=_ACTIVE),
    _global("pay", "payId", lookup=("by_employee_id", "employeeId")),
    _global("paySchedule", "payScheduleId", listable=True),
    _global(
        "paymentMethod",
        "paymentMethodId",
        lookup=("by_customer_id", "customerId"),
        defaults={"status": "active", "isDefault": False},
    ),
)

_BY_NAME: Dict[str, EntityDefinition] = {definition.name: definition for definition in ENTITIES}


# PUBLIC_INTERFACE
def get_entity(kind: str) -> EntityDefinition:
    """Return the definition of a record kind; KeySchemaError if unknown."""
    try:
        return _BY_NAME[kind]
    except KeyError:
        raise KeySchemaError(f"Unknown entity kind {kind!r}") from None


# PUBLIC_INTERFACE
def entities() -> Tuple[EntityDefinition, ...]:
    """All registered kinds, in a fixed order."""
    return ENTITIES
