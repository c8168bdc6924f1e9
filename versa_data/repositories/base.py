from __future__ import annotations

import logging
from typing import Annotated, Any, ClassVar, Dict, Generic, Mapping, Optional, Type, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel, TypeAdapter, ValidationError

from versa_data.core.errors import DataIntegrityError
from versa_data.db.keys import EntityDefinition, get_entity
from versa_data.db.store import CREATED_AT, UPDATED_AT, QueryResult, SingleTableStore
from versa_data.schemas.common import Page, PaginationOptions, Record

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)

AUDIT_FIELDS = (CREATED_AT, UPDATED_AT)


class EntityRepository(Generic[RecordT]):
    """
    Base class for repositories providing common helpers.

    Subclasses set `kind` (a registry entity name) and `model` (its record model)
    and expose the kind's public surface with snake_case arguments, delegating to
    the helpers here.

    Note:
      Records are validated on the way in (before any write) and on the way out.
      A stored record that no longer matches its model raises DataIntegrityError;
      one bad item fails the whole page.
    """

    kind: ClassVar[str]
    model: ClassVar[Type[Record]]

    def __init__(self, store: Optional[SingleTableStore] = None) -> None:
        self.store = store or SingleTableStore()
        self.definition: EntityDefinition = get_entity(self.kind)
        self._aliases: Dict[str, str] = {
            name: info.alias or name for name, info in self.model.model_fields.items()
        }
        self._adapters: Dict[str, TypeAdapter] = {}

    def parse(self, data: Any) -> RecordT:
        """Validate a stored record; DataIntegrityError if it does not match the model."""
        try:
            return self.model.model_validate(data)  # type: ignore[return-value]
        except ValidationError as exc:
            errors = exc.errors(include_url=False)
            logger.error(
                "Stored %s failed validation: %s; payload=%r",
                self.kind,
                errors,
                data,
                extra={"kind": self.kind, "payload": data},
            )
            raise DataIntegrityError(self.kind, errors, data) from exc

    def _page(self, result: QueryResult) -> Page[RecordT]:
        return Page[self.model](items=[self.parse(item) for item in result.items], cursor=result.cursor)  # type: ignore[index]

    def _wire_attributes(self, data: Union[BaseModel, Mapping[str, Any]], *, partial: bool) -> Dict[str, Any]:
        """
        Turn a model instance or mapping into stored (camelCase) attribute names.

        Mapping keys may be model field names or wire names; anything else passes
        through untouched.
        """
        if isinstance(data, BaseModel):
            if partial:
                return data.model_dump(by_alias=True, exclude_unset=True)
            return data.model_dump(by_alias=True, exclude_none=True)
        return {self._aliases.get(key, key): value for key, value in data.items()}

    def _adapter(self, alias: str) -> Optional[TypeAdapter]:
        if alias not in self._adapters:
            for name, info in self.model.model_fields.items():
                if (info.alias or name) == alias:
                    annotation = info.annotation
                    if info.metadata:
                        annotation = Annotated[(annotation, *info.metadata)]
                    self._adapters[alias] = TypeAdapter(annotation)
                    break
            else:
                return None
        return self._adapters[alias]

    async def create(self, entity: Union[RecordT, Mapping[str, Any]]) -> RecordT:
        """
        Create a record of this kind.

        Parameters:
          entity: model instance or mapping (snake_case or camelCase keys). The id
                  attribute is generated (UUID4) when absent, unless the kind keys on a
                  reference it does not own; createdAt/updatedAt are assigned by the store.
        Returns:
          the stored record
        Raises:
          pydantic.ValidationError: the entity is not a valid record of this kind
          ConditionalWriteFailure: a record with the same key already exists
        """
        attributes = self._wire_attributes(entity, partial=False)
        for name in AUDIT_FIELDS:
            attributes.pop(name, None)
        attributes = {k: v for k, v in attributes.items() if v is not None}
        if self.definition.generate_id and not attributes.get(self.definition.id_attribute):
            attributes[self.definition.id_attribute] = str(uuid4())
        for name, value in self.definition.defaults.items():
            attributes.setdefault(name, value)

        # Validate as it will be stored; the store assigns the real timestamp.
        candidate = self.model.model_validate({**attributes, CREATED_AT: 0})
        attributes = candidate.to_item()
        for name in AUDIT_FIELDS:
            attributes.pop(name, None)

        stored = await self.store.put(self.kind, attributes, if_not_exists=True)
        return self.parse(stored)

    async def _get(self, **key: Any) -> Optional[RecordT]:
        item = await self.store.get(self.kind, key)
        if item is None:
            return None
        return self.parse(item)

    async def _list(
        self, pattern: str, options: Optional[PaginationOptions] = None, **values: Any
    ) -> Page[RecordT]:
        options = options or PaginationOptions()
        result = await self.store.query(
            self.kind, pattern, values, limit=options.limit, cursor=options.cursor
        )
        return self._page(result)

    async def _first(self, pattern: str, **values: Any) -> Optional[RecordT]:
        result = await self.store.query(self.kind, pattern, values, limit=1)
        if not result.items:
            return None
        return self.parse(result.items[0])

    async def _scan(self, options: Optional[PaginationOptions] = None) -> Page[RecordT]:
        options = options or PaginationOptions()
        result = await self.store.scan(self.kind, limit=options.limit, cursor=options.cursor)
        return self._page(result)

    async def _update(
        self, key: Mapping[str, Any], data: Union[BaseModel, Mapping[str, Any]]
    ) -> RecordT:
        """
        Partially update a record; None removes an optional attribute.

        Raises:
          pydantic.ValidationError: a changed value does not fit the model
          ImmutableAttributeError: data changes a key attribute
          ConditionalWriteFailure: the record does not exist
        """
        changes = self._wire_attributes(data, partial=True)
        for name in AUDIT_FIELDS:
            changes.pop(name, None)
        # A fetched record carries its own key; only a different value is a change.
        for name in self.definition.key_attributes:
            if name in changes and changes[name] == key.get(name):
                del changes[name]
        for alias, value in list(changes.items()):
            adapter = self._adapter(alias)
            if adapter is not None:
                changes[alias] = adapter.dump_python(
                    adapter.validate_python(value), by_alias=True, exclude_none=True
                )
        stored = await self.store.update(self.kind, key, changes)
        return self.parse(stored)

    async def _delete(self, **key: Any) -> None:
        await self.store.delete(self.kind, key)
