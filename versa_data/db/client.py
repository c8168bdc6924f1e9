from __future__ import annotations

import threading
from typing import Any, Optional

import boto3
from botocore.config import Config

from .config import Settings, get_settings


# boto3 resources are not thread safe and store calls run in worker threads,
# so each thread lazily builds its own session/resource/table.
_LOCAL = threading.local()


def _ensure_table_initialized(settings: Settings) -> None:
    """
    Lazily initialize the boto3 session, DynamoDB resource and Table for this thread.
    """
    if getattr(_LOCAL, "table", None) is not None and _LOCAL.table_name == settings.TABLE_NAME:
        return
    session = boto3.session.Session(region_name=settings.AWS_REGION)
    resource = session.resource(
        "dynamodb",
        endpoint_url=settings.dynamodb_endpoint_url,
        config=Config(max_pool_connections=settings.DYNAMODB_MAX_POOL_CONNECTIONS),
    )
    _LOCAL.resource = resource
    _LOCAL.table = resource.Table(settings.TABLE_NAME)
    _LOCAL.table_name = settings.TABLE_NAME


# PUBLIC_INTERFACE
def get_dynamodb_resource(settings: Optional[Settings] = None) -> Any:
    """Return the DynamoDB service resource for the calling thread."""
    _ensure_table_initialized(settings or get_settings())
    return _LOCAL.resource


# PUBLIC_INTERFACE
def get_table(settings: Optional[Settings] = None) -> Any:
    """
    Return the boto3 Table for the single table, bound to the calling thread.

    Parameters:
      settings: Settings - optional override; defaults to environment settings
    Returns:
      boto3.resources.factory.dynamodb.Table
    """
    _ensure_table_initialized(settings or get_settings())
    return _LOCAL.table
