from __future__ import annotations

from decimal import Decimal

import pytest

from versa_data.core.errors import ConditionalWriteFailure, ImmutableAttributeError, InvalidCursorError
from versa_data.db.store import SingleTableStore


def _employee(org: str, employee_id: str, **extra):
    return {
        "organizationId": org,
        "employeeId": employee_id,
        "firstName": "Jane",
        "lastName": "Doe",
        "email": f"{employee_id}@x.com",
        "role": "tech",
        "status": "active",
        **extra,
    }


@pytest.mark.anyio
async def test_put_writes_keys_discriminators_and_timestamps(store: SingleTableStore, table):
    record = await store.put("employee", _employee("org-1", "e-1", createdAt=5))

    raw = table.raw("$versa#organizationid_org-1#employeeid_e-1", "$employee_1")
    assert raw["__edb_e__"] == "employee"
    assert raw["__edb_v__"] == "1"
    assert raw["gsi1pk"] == "$versa#organizationid_org-1#status_active"
    assert raw["gsi2sk"] == "$employee_1#organizationid_org-1#employeeid_e-1"
    assert raw["createdAt"] == raw["updatedAt"]
    assert raw["createdAt"] != 5

    assert "pk" not in record and "__edb_e__" not in record
    assert record["createdAt"] == raw["createdAt"]
    assert record["role"] == "tech"


@pytest.mark.anyio
async def test_put_if_not_exists_rejects_duplicates(store: SingleTableStore):
    await store.put("employee", _employee("org-1", "e-1"), if_not_exists=True)
    with pytest.raises(ConditionalWriteFailure):
        await store.put("employee", _employee("org-1", "e-1"), if_not_exists=True)


@pytest.mark.anyio
async def test_floats_are_stored_as_decimal_and_read_back_as_numbers(store: SingleTableStore, table):
    await store.put(
        "plan", {"planId": "p-1", "name": "Basic", "monthlyPrice": 19.99, "annualPrice": 200.0, "status": "active"}
    )
    raw = table.raw("$versa#planid_p-1", "$plan_1")
    assert raw["monthlyPrice"] == Decimal("19.99")

    record = await store.get("plan", {"planId": "p-1"})
    assert record["monthlyPrice"] == 19.99
    assert isinstance(record["monthlyPrice"], float)
    assert record["annualPrice"] == 200


@pytest.mark.anyio
async def test_get_missing_returns_none(store: SingleTableStore):
    assert await store.get("employee", {"organizationId": "org-1", "employeeId": "nope"}) is None


@pytest.mark.anyio
async def test_query_by_org_never_leaks_prefix_sharing_tenants(store: SingleTableStore):
    await store.put("employee", _employee("org-1", "e-1"))
    await store.put("employee", _employee("org-10", "e-2"))
    await store.put("customer", {"organizationId": "org-1", "customerId": "c-1"})

    result = await store.query("employee", "by_org", {"organizationId": "org-1"})

    assert [item["employeeId"] for item in result.items] == ["e-1"]
    assert result.cursor is None


@pytest.mark.anyio
async def test_query_pages_through_every_record(store: SingleTableStore):
    for n in range(5):
        await store.put("employee", _employee("org-1", f"e-{n}"))

    seen = []
    cursor = None
    pages = 0
    while True:
        result = await store.query("employee", "by_org", {"organizationId": "org-1"}, limit=2, cursor=cursor)
        assert len(result.items) <= 2
        seen.extend(item["employeeId"] for item in result.items)
        pages += 1
        cursor = result.cursor
        if cursor is None:
            break

    assert sorted(seen) == [f"e-{n}" for n in range(5)]
    assert len(seen) == len(set(seen))
    assert pages == 3


@pytest.mark.anyio
async def test_query_fills_page_when_filter_discards_items(store: SingleTableStore, table):
    await store.put("employee", _employee("org-1", "e-1"))
    # Items sharing the key prefix but written by something else.
    for n in range(3):
        table.put_raw(
            {
                "pk": f"legacy-{n}",
                "sk": "x",
                "gsi2pk": "$versa",
                "gsi2sk": f"$employee_1#organizationid_org-1#employeeid_a-{n}",
                "__edb_e__": "legacyEmployee",
                "__edb_v__": "1",
            }
        )
    await store.put("employee", _employee("org-1", "e-2"))

    result = await store.query("employee", "by_org", {"organizationId": "org-1"}, limit=2)

    assert [item["employeeId"] for item in result.items] == ["e-1", "e-2"]
    assert len([c for c in table.calls if c[0] == "query"]) > 1


@pytest.mark.anyio
async def test_cursor_cannot_be_replayed_against_another_tenant(store: SingleTableStore):
    for n in range(3):
        await store.put("employee", _employee("org-1", f"e-{n}"))
    await store.put("employee", _employee("org-2", "e-9"))

    first = await store.query("employee", "by_status", {"organizationId": "org-1", "status": "active"}, limit=1)
    assert first.cursor is not None

    with pytest.raises(InvalidCursorError):
        await store.query(
            "employee", "by_status", {"organizationId": "org-2", "status": "active"}, limit=1, cursor=first.cursor
        )
    with pytest.raises(InvalidCursorError):
        await store.query("employee", "by_org", {"organizationId": "org-1"}, cursor="garbage")


@pytest.mark.anyio
@pytest.mark.parametrize("limit", [0, -1, 1001])
async def test_limit_out_of_range_is_rejected(store: SingleTableStore, limit):
    with pytest.raises(ValueError):
        await store.query("employee", "by_org", {"organizationId": "org-1"}, limit=limit)


@pytest.mark.anyio
async def test_scan_returns_only_the_requested_kind(store: SingleTableStore):
    await store.put("organization", {"organizationId": "org-1", "slug": "a", "status": "active"})
    await store.put("organization", {"organizationId": "org-2", "slug": "b", "status": "active"})
    await store.put("employee", _employee("org-1", "e-1"))

    result = await store.scan("organization", limit=10)

    assert sorted(item["organizationId"] for item in result.items) == ["org-1", "org-2"]


@pytest.mark.anyio
async def test_update_sets_and_removes_attributes(store: SingleTableStore):
    created = await store.put("employee", _employee("org-1", "e-1", phone="555"))
    key = {"organizationId": "org-1", "employeeId": "e-1"}

    updated = await store.update("employee", key, {"role": "manager", "phone": None})

    assert updated["role"] == "manager"
    assert "phone" not in updated
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] >= created["updatedAt"]
    assert updated["firstName"] == "Jane"


@pytest.mark.anyio
async def test_update_moves_record_between_index_partitions(store: SingleTableStore, table):
    await store.put("employee", _employee("org-1", "e-1"))
    key = {"organizationId": "org-1", "employeeId": "e-1"}

    await store.update("employee", key, {"status": "inactive"})

    raw = table.raw("$versa#organizationid_org-1#employeeid_e-1", "$employee_1")
    assert raw["gsi1pk"] == "$versa#organizationid_org-1#status_inactive"
    active = await store.query("employee", "by_status", {"organizationId": "org-1", "status": "active"})
    inactive = await store.query("employee", "by_status", {"organizationId": "org-1", "status": "inactive"})
    assert active.items == []
    assert [item["employeeId"] for item in inactive.items] == ["e-1"]


@pytest.mark.anyio
async def test_update_removing_index_composite_drops_index_keys(store: SingleTableStore, table):
    await store.put("employee", _employee("org-1", "e-1"))

    await store.update("employee", {"organizationId": "org-1", "employeeId": "e-1"}, {"status": None})

    raw = table.raw("$versa#organizationid_org-1#employeeid_e-1", "$employee_1")
    assert "gsi1pk" not in raw and "gsi1sk" not in raw
    assert raw["gsi2pk"] == "$versa"


@pytest.mark.anyio
async def test_update_missing_record_fails(store: SingleTableStore, table):
    with pytest.raises(ConditionalWriteFailure):
        await store.update("employee", {"organizationId": "org-1", "employeeId": "ghost"}, {"role": "x"})
    with pytest.raises(ConditionalWriteFailure):
        await store.update("employee", {"organizationId": "org-1", "employeeId": "ghost"}, {"status": "inactive"})
    assert table.items == {}


@pytest.mark.anyio
@pytest.mark.parametrize("field", ["organizationId", "employeeId", "createdAt"])
async def test_update_rejects_immutable_attributes(store: SingleTableStore, field):
    await store.put("employee", _employee("org-1", "e-1"))
    with pytest.raises(ImmutableAttributeError):
        await store.update("employee", {"organizationId": "org-1", "employeeId": "e-1"}, {field: "other"})


@pytest.mark.anyio
async def test_delete_is_idempotent(store: SingleTableStore):
    await store.put("employee", _employee("org-1", "e-1"))
    key = {"organizationId": "org-1", "employeeId": "e-1"}

    await store.delete("employee", key)
    await store.delete("employee", key)

    assert await store.get("employee", key) is None
