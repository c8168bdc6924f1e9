from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union


# Context variables for enriched logging
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
organization_id_var: ContextVar[Optional[str]] = ContextVar("organization_id", default=None)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | org=%(organization_id)s | %(message)s"


class LoggingContextFilter(logging.Filter):
    """
    Stamp each record with the correlation and organization ids bound by log_context.

    An id passed explicitly through `extra=` wins over the bound one; "-" marks
    an id that is not known.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for attribute, var in (("correlation_id", correlation_id_var), ("organization_id", organization_id_var)):
            if not getattr(record, attribute, None):
                setattr(record, attribute, var.get() or "-")
        return True


# PUBLIC_INTERFACE
def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure root logging with a structured format and context filter.

    Parameters:
      level: int or level name; defaults to AppSettings.LOG_LEVEL.
    """
    if level is None:
        from versa_data.core.settings import get_app_settings

        level = get_app_settings().LOG_LEVEL

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    # One handler only; calling this twice must not duplicate output.
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# PUBLIC_INTERFACE
@contextmanager
def log_context(
    *, correlation_id: Optional[str] = None, organization_id: Optional[str] = None
) -> Iterator[None]:
    """
    Bind a correlation id and/or organization id for log records emitted inside the block.

    Usage:
        with log_context(correlation_id=request_id, organization_id=org_id):
            await repo.list_by_org(org_id)

    Values that are not given keep whatever the enclosing context had.
    """
    tokens = []
    if correlation_id is not None:
        tokens.append((correlation_id_var, correlation_id_var.set(correlation_id)))
    if organization_id is not None:
        tokens.append((organization_id_var, organization_id_var.set(organization_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
