from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

import anyio
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from versa_data.core.errors import ConditionalWriteFailure, ImmutableAttributeError
from versa_data.core.settings import AppSettings, get_app_settings

from .client import get_table
from .config import Settings
from .cursor import decode_cursor, encode_cursor
from .keys import ENTITY_FIELD, KEY_FIELDS, VERSION_FIELD, EntityDefinition, get_entity

logger = logging.getLogger(__name__)

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


class QueryResult(NamedTuple):
    """One page of raw records plus the cursor for the next page (None when done)."""

    items: List[Dict[str, Any]]
    cursor: Optional[str]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def to_store_value(value: Any) -> Any:
    """Convert a Python value to something boto3 can serialize (floats become Decimal)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: to_store_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_store_value(v) for v in value]
    return value


def from_store_value(value: Any) -> Any:
    """Convert a value read from DynamoDB back to plain Python (Decimal becomes int or float)."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, Mapping):
        return {k: from_store_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [from_store_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [from_store_value(v) for v in sorted(value)]
    return value


def _strip(item: Mapping[str, Any]) -> Dict[str, Any]:
    """Raw table item to a caller-facing record: no key fields, plain numbers."""
    return {k: from_store_value(v) for k, v in item.items() if k not in KEY_FIELDS}


def _kind_filter(definition: EntityDefinition):
    return Attr(ENTITY_FIELD).eq(definition.name) & Attr(VERSION_FIELD).eq(definition.version)


def _update_expression(changes: Mapping[str, Any]) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """
    Build SET/REMOVE clauses for a partial update; None values are removed.

    Placeholders use the #attrN/:valN names so they never collide with the #nN/:vN
    names boto3 generates for condition objects.
    """
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    sets: List[str] = []
    removes: List[str] = []
    for position, (attribute, value) in enumerate(changes.items()):
        name = f"#attr{position}"
        names[name] = attribute
        if value is None:
            removes.append(name)
        else:
            placeholder = f":val{position}"
            values[placeholder] = to_store_value(value)
            sets.append(f"{name} = {placeholder}")
    clauses = []
    if sets:
        clauses.append("SET " + ", ".join(sets))
    if removes:
        clauses.append("REMOVE " + ", ".join(removes))
    return " ".join(clauses), names, values


class SingleTableStore:
    """
    Generic CRUD/query client over the single table.

    Callers speak in record kinds and attribute maps; this class derives every
    key, discriminator and audit timestamp from the registry in versa_data.db.keys.
    Blocking boto3 calls run in a worker thread via anyio.

    Note:
      Pass `table` to use an explicit boto3 Table (or a test double); otherwise
      each worker thread resolves its own Table from versa_data.db.client.
    """

    def __init__(
        self,
        table: Any = None,
        settings: Optional[AppSettings] = None,
        db_settings: Optional[Settings] = None,
    ) -> None:
        self._table = table
        self.settings = settings or get_app_settings()
        self.db_settings = db_settings

    def _resolve_table(self) -> Any:
        if self._table is not None:
            return self._table
        return get_table(self.db_settings)

    async def _call(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        def _run() -> Dict[str, Any]:
            return getattr(self._resolve_table(), operation)(**kwargs)

        return await anyio.to_thread.run_sync(_run)

    def _page_size(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.settings.DEFAULT_PAGE_SIZE
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= self.settings.MAX_PAGE_SIZE:
            raise ValueError(f"limit must be an integer between 1 and {self.settings.MAX_PAGE_SIZE}")
        return limit

    # PUBLIC_INTERFACE
    async def get(self, kind: str, key: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Fetch one record by its primary-key attributes.

        Returns:
          the record without key fields, or None if nothing of this kind is stored there
        """
        definition = get_entity(kind)
        response = await self._call("get_item", Key=definition.primary_key(key), ConsistentRead=True)
        item = response.get("Item")
        if not item or item.get(ENTITY_FIELD) != definition.name:
            return None
        return _strip(item)

    # PUBLIC_INTERFACE
    async def put(self, kind: str, item: Mapping[str, Any], *, if_not_exists: bool = False) -> Dict[str, Any]:
        """
        Write a full record, deriving keys and discriminators.

        createdAt and updatedAt are set to now (epoch ms), replacing any value the
        caller passed.

        Parameters:
          kind: registered record kind
          item: every attribute of the record (primary composites required)
          if_not_exists: fail with ConditionalWriteFailure if a record already
                         exists at the same primary key
        Returns:
          the stored record without key fields
        """
        definition = get_entity(kind)
        now = _now_ms()
        record = {k: v for k, v in item.items() if k not in KEY_FIELDS}
        record[CREATED_AT] = now
        record[UPDATED_AT] = now
        stored = to_store_value({**record, **definition.index_keys(record), **definition.discriminator})

        kwargs: Dict[str, Any] = {"Item": stored}
        if if_not_exists:
            kwargs["ConditionExpression"] = Attr("pk").not_exists()
        try:
            await self._call("put_item", **kwargs)
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise ConditionalWriteFailure(f"{kind} already exists at {definition.primary_key(record)}") from exc
            raise
        return _strip(stored)

    # PUBLIC_INTERFACE
    async def query(
        self,
        kind: str,
        pattern: str,
        values: Mapping[str, Any],
        *,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> QueryResult:
        """
        Query one access pattern of a kind.

        Parameters:
          kind: registered record kind
          pattern: access pattern name ("primary", "by_org", ...)
          values: partition composites (all required) and optional leading sort composites
          limit: page size, 1..MAX_PAGE_SIZE (default DEFAULT_PAGE_SIZE)
          cursor: token returned with the previous page of the same query
        Returns:
          QueryResult(items, cursor); items are in ascending sort-key order
        """
        definition = get_entity(kind)
        condition = definition.key_condition(pattern, values)
        page_size = self._page_size(limit)

        key_expression = Key(condition.pk_field).eq(condition.pk_value)
        if condition.sk_is_prefix:
            key_expression = key_expression & Key(condition.sk_field).begins_with(condition.sk_value)
        else:
            key_expression = key_expression & Key(condition.sk_field).eq(condition.sk_value)

        request: Dict[str, Any] = {
            "KeyConditionExpression": key_expression,
            "FilterExpression": _kind_filter(definition),
        }
        if condition.index_name:
            request["IndexName"] = condition.index_name
        start = None
        if cursor is not None:
            start = decode_cursor(cursor, partition=(condition.pk_field, condition.pk_value))
        return await self._paginate("query", request, page_size, start)

    # PUBLIC_INTERFACE
    async def scan(self, kind: str, *, limit: Optional[int] = None, cursor: Optional[str] = None) -> QueryResult:
        """
        Scan the whole table for records of one kind.

        Only used for kinds listed without a partition (organizations); prefer query.
        """
        definition = get_entity(kind)
        page_size = self._page_size(limit)
        request: Dict[str, Any] = {"FilterExpression": _kind_filter(definition)}
        start = decode_cursor(cursor) if cursor is not None else None
        return await self._paginate("scan", request, page_size, start)

    async def _paginate(
        self,
        operation: str,
        request: Dict[str, Any],
        page_size: int,
        start: Optional[Dict[str, Any]],
    ) -> QueryResult:
        # The kind filter runs after Limit is applied, so keep reading until the
        # page is full or DynamoDB reports no more items.
        items: List[Dict[str, Any]] = []
        while True:
            kwargs = dict(request, Limit=page_size - len(items))
            if start:
                kwargs["ExclusiveStartKey"] = start
            response = await self._call(operation, **kwargs)
            items.extend(_strip(item) for item in response.get("Items", []))
            start = response.get("LastEvaluatedKey")
            logger.debug(
                "%s evaluated %s item(s), kept %d of %d", operation, response.get("ScannedCount", "?"), len(items), page_size
            )
            if not start or len(items) >= page_size:
                break
        return QueryResult(items=items, cursor=encode_cursor(start) if start else None)

    # PUBLIC_INTERFACE
    async def update(self, kind: str, key: Mapping[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update to an existing record and return the merged record.

        - None values remove the attribute.
        - updatedAt is refreshed; createdAt and primary-key attributes are immutable.
        - Secondary index keys follow any change to their composite attributes; an
          index whose composites are no longer all present is removed (sparse).

        Raises:
          ImmutableAttributeError: fields touch a primary-key attribute or createdAt
          ConditionalWriteFailure: no record exists at key
        """
        definition = get_entity(kind)
        immutable = sorted(set(fields) & (set(definition.key_attributes) | {CREATED_AT}))
        if immutable:
            raise ImmutableAttributeError(f"Cannot update immutable attribute(s) {immutable} of {kind}")

        primary = definition.primary_key(key)
        changes: Dict[str, Any] = {k: v for k, v in fields.items() if k not in KEY_FIELDS and k != UPDATED_AT}
        changes[UPDATED_AT] = _now_ms()

        affected = [p for p in definition.indexes if set(p.attributes) & set(changes)]
        if affected:
            current = await self.get(kind, key)
            if current is None:
                raise ConditionalWriteFailure(f"{kind} at {primary} does not exist")
            merged = {k: v for k, v in {**current, **changes}.items() if v is not None}
            for pattern in affected:
                if all(merged.get(a) not in (None, "") for a in pattern.attributes):
                    changes.update(definition.pattern_keys(pattern, merged))
                else:
                    changes[pattern.slot.pk_field] = None
                    changes[pattern.slot.sk_field] = None

        expression, names, values = _update_expression(changes)
        kwargs: Dict[str, Any] = {
            "Key": primary,
            "UpdateExpression": expression,
            "ExpressionAttributeNames": names,
            "ConditionExpression": Attr("pk").exists(),
            "ReturnValues": "ALL_NEW",
        }
        if values:
            kwargs["ExpressionAttributeValues"] = values
        try:
            response = await self._call("update_item", **kwargs)
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise ConditionalWriteFailure(f"{kind} at {primary} does not exist") from exc
            raise
        return _strip(response.get("Attributes", {}))

    # PUBLIC_INTERFACE
    async def delete(self, kind: str, key: Mapping[str, Any]) -> None:
        """Delete one record by primary key. Deleting a missing record is not an error."""
        definition = get_entity(kind)
        await self._call("delete_item", Key=definition.primary_key(key))
