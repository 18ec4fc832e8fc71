"""Expose constructed client wrappers."""

from .dynamodb import DynamoDBRecordStore
from .sqlite_store import SQLiteRecordStore
from .velux import VeluxApiError, VeluxClient, VeluxSession

__all__ = [
    "DynamoDBRecordStore",
    "SQLiteRecordStore",
    "VeluxApiError",
    "VeluxClient",
    "VeluxSession",
]
