"""
DynamoDB-backed record store for authorization codes, access tokens and users.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import boto3

from idp.core.config import AWSSettings
from idp.models import RecordCollection


class DynamoDBRecordStore:
    """Get/put/pop on one DynamoDB table per record collection."""

    def __init__(self, settings: AWSSettings) -> None:
        self._settings = settings
        self._resource = boto3.resource(
            "dynamodb",
            region_name=settings.region_name,
            endpoint_url=settings.dynamodb_endpoint_url,
        )
        self._tables = {
            RecordCollection.AUTHORIZATION_CODES: self._resource.Table(
                settings.auth_code_table_name
            ),
            RecordCollection.ACCESS_TOKENS: self._resource.Table(
                settings.access_token_table_name
            ),
            RecordCollection.USERS: self._resource.Table(settings.user_table_name),
        }

    def put(self, collection: RecordCollection, record: Dict[str, Any]) -> None:
        """Write a record, replacing any item with the same key."""
        if not record.get(collection.key_attribute):
            raise ValueError(
                f"Record for {collection.value} must include '{collection.key_attribute}'"
            )
        self._tables[collection].put_item(Item=record)

    def get(self, collection: RecordCollection, key: str) -> Optional[Dict[str, Any]]:
        """Retrieve a record by its primary key."""
        response = self._tables[collection].get_item(
            Key={collection.key_attribute: key},
            ConsistentRead=True,
        )
        return response.get("Item")

    def pop(self, collection: RecordCollection, key: str) -> Optional[Dict[str, Any]]:
        """
        Delete a record and return what was deleted.

        DynamoDB deletes are atomic per item, so of several concurrent pops of
        the same key exactly one sees the old attributes.
        """
        response = self._tables[collection].delete_item(
            Key={collection.key_attribute: key},
            ReturnValues="ALL_OLD",
        )
        return response.get("Attributes")


__all__ = ["DynamoDBRecordStore"]
