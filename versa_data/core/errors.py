from __future__ import annotations

from typing import Any, List, Optional


class VersaDataError(Exception):
    """Base class for errors raised by the data layer."""


class DataIntegrityError(VersaDataError):
    """
    A record read back from the table does not satisfy its schema.

    Carries the entity kind, the validation errors and the raw payload so the
    caller can report the offending record.
    """

    def __init__(self, kind: str, errors: List[Any], payload: Any) -> None:
        self.kind = kind
        self.errors = errors
        self.payload = payload
        super().__init__(f"Stored {kind} record failed validation ({len(errors)} error(s))")


class StoreError(VersaDataError):
    """Infrastructure failure surfaced by the data layer."""


class ConditionalWriteFailure(StoreError):
    """A conditional put or update was rejected by the table."""


class SecretWriteConflict(StoreError):
    """The secret bundle kept changing while it was being rewritten."""

    def __init__(self, secret_name: str, attempts: int) -> None:
        self.secret_name = secret_name
        self.attempts = attempts
        super().__init__(
            f"Secret {secret_name} changed concurrently; gave up after {attempts} attempt(s)"
        )


class KeySchemaError(ValueError, VersaDataError):
    """A key could not be built for the requested kind or access pattern."""


class ImmutableAttributeError(KeySchemaError):
    """An update tried to change a primary-key attribute or createdAt."""


class InvalidCursorError(ValueError, VersaDataError):
    """A pagination cursor is malformed or belongs to a different query."""


class SecretNotFound(VersaDataError):
    """The organization has no secret bundle yet."""

    def __init__(self, secret_name: str, detail: Optional[str] = None) -> None:
        self.secret_name = secret_name
        super().__init__(detail or f"Secret {secret_name} does not exist")
