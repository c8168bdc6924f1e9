"""
Pydantic record models for every kind stored in the single table.

Models use snake_case attributes with camelCase aliases (the stored attribute
names), keep unknown attributes (extra="allow"), and are grouped by domain area.
Common pieces (pagination, audit timestamps) live in schemas.common.
"""

from .common import Page, PaginationOptions, Record  # noqa: F401
