from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from .client import get_dynamodb_resource
from .config import Settings, get_settings
from .keys import GSI1, GSI2, TABLE

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def table_definition(table_name: str) -> Dict[str, Any]:
    """
    Return CreateTable arguments for the single table.

    Both GSIs project all attributes; billing is on-demand.
    """
    key_fields = [TABLE.pk_field, TABLE.sk_field, GSI1.pk_field, GSI1.sk_field, GSI2.pk_field, GSI2.sk_field]
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": TABLE.pk_field, "KeyType": "HASH"},
            {"AttributeName": TABLE.sk_field, "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": "S"} for name in key_fields
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": slot.index_name,
                "KeySchema": [
                    {"AttributeName": slot.pk_field, "KeyType": "HASH"},
                    {"AttributeName": slot.sk_field, "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
            for slot in (GSI1, GSI2)
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


# PUBLIC_INTERFACE
def create_table(resource: Any = None, settings: Optional[Settings] = None) -> Any:
    """
    Create the single table if it does not exist yet and wait until it is active.

    Intended for DynamoDB Local during development and integration tests.

    Parameters:
      resource: boto3 DynamoDB service resource; defaults to the configured one
      settings: Settings - table name and connection options
    Returns:
      boto3 Table
    """
    settings = settings or get_settings()
    resource = resource or get_dynamodb_resource(settings)
    try:
        table = resource.create_table(**table_definition(settings.TABLE_NAME))
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") != "ResourceInUseException":
            raise
        logger.info("Table %s already exists", settings.TABLE_NAME)
        return resource.Table(settings.TABLE_NAME)
    table.wait_until_exists()
    logger.info("Created table %s", settings.TABLE_NAME)
    return table
