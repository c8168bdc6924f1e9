from __future__ import annotations

import base64
import json
from typing import Any, Dict, Mapping, Optional, Tuple

from versa_data.core.errors import InvalidCursorError


# PUBLIC_INTERFACE
def encode_cursor(last_evaluated_key: Mapping[str, Any]) -> str:
    """Encode a DynamoDB LastEvaluatedKey as an opaque URL-safe token."""
    raw = json.dumps(dict(last_evaluated_key), separators=(",", ":"), sort_keys=True)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


# PUBLIC_INTERFACE
def decode_cursor(token: str, *, partition: Optional[Tuple[str, str]] = None) -> Dict[str, str]:
    """
    Decode a token produced by encode_cursor back into an ExclusiveStartKey.

    Parameters:
      token: the opaque cursor string returned with a previous page
      partition: (key field, value) the cursor must belong to, e.g. ("gsi2pk", "$versa");
                 a cursor from another partition is rejected
    Returns:
      dict of key attribute name to string value
    Raises:
      InvalidCursorError for anything this module did not produce
    """
    if not isinstance(token, str) or not token:
        raise InvalidCursorError("Cursor must be a non-empty string")
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        raise InvalidCursorError("Cursor is not a valid pagination token") from exc

    if (
        not isinstance(data, dict)
        or not data
        or not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items())
    ):
        raise InvalidCursorError("Cursor is not a valid pagination token")

    if partition is not None:
        field, value = partition
        if data.get(field) != value:
            raise InvalidCursorError("Cursor does not belong to this query")
    return data
