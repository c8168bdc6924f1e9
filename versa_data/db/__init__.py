"""
DynamoDB package initializer exposing the key schema registry, the store client
and configuration for the single table.
"""

from .config import get_settings, Settings
from .client import get_dynamodb_resource, get_table
from .keys import EntityDefinition, entities, get_entity
from .store import QueryResult, SingleTableStore
from .table import create_table, table_definition

__all__ = [
    "Settings",
    "get_settings",
    "get_dynamodb_resource",
    "get_table",
    "EntityDefinition",
    "entities",
    "get_entity",
    "QueryResult",
    "SingleTableStore",
    "create_table",
    "table_definition",
]
