from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel

# Numbers read back from DynamoDB come out as int when integral, float otherwise.
Number = Union[StrictInt, StrictFloat]

_EPOCH_MS = re.compile(r"^-?\d+(\.\d+)?$")


# PUBLIC_INTERFACE
def canonical_timestamp(value: Any) -> Optional[str]:
    """
    Normalise an audit timestamp to ISO-8601 UTC with millisecond precision.

    Accepts epoch milliseconds (int, float, Decimal or a numeric string) or an
    ISO-8601 string; naive ISO strings are taken as UTC.

    Returns:
      e.g. "2026-01-02T03:04:05.678Z", or None for None
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("timestamp must be epoch milliseconds or an ISO-8601 string")
    if isinstance(value, str) and _EPOCH_MS.match(value.strip()):
        value = Decimal(value.strip())
    if isinstance(value, (int, float, Decimal)):
        try:
            millis = int(round(value))
            moment = datetime.fromtimestamp(millis // 1000, tz=timezone.utc).replace(
                microsecond=(millis % 1000) * 1000
            )
        except (OverflowError, OSError) as exc:
            raise ValueError(f"timestamp {value!r} is out of range") from exc
    elif isinstance(value, str):
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
    else:
        raise ValueError("timestamp must be epoch milliseconds or an ISO-8601 string")
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class WireModel(BaseModel):
    """Base for models stored in the table: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_item(self) -> dict:
        """Dump with wire (camelCase) names, omitting unset optional attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Record(WireModel):
    """Common audit fields present on every stored record."""

    created_at: str = Field(..., description="Creation timestamp (UTC, ISO-8601)")
    updated_at: Optional[str] = Field(None, description="Last update timestamp (UTC, ISO-8601)")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _canonical_timestamps(cls, v):
        return canonical_timestamp(v)


class PaginationOptions(BaseModel):
    """Pagination parameters for list operations."""

    limit: Optional[int] = Field(
        None, ge=1, description="Max number of records to return (default: DEFAULT_PAGE_SIZE, at most MAX_PAGE_SIZE)"
    )
    cursor: Optional[str] = Field(None, description="Opaque cursor returned with the previous page")


RecordT = TypeVar("RecordT", bound=Record)


# PUBLIC_INTERFACE
class Page(BaseModel, Generic[RecordT]):
    """One page of validated records; cursor is None on the last page."""

    items: List[RecordT] = Field(default_factory=list, description="Records in index order")
    cursor: Optional[str] = Field(None, description="Cursor for the next page")
