"""Integrations package - External store clients"""
from app.integrations.store_client import (
    StoreClient,
    StoreException,
    DynamoDBStoreClient,
    LocalStoreClient,
    create_store_client,
)

__all__ = [
    "StoreClient",
    "StoreException",
    "DynamoDBStoreClient",
    "LocalStoreClient",
    "create_store_client",
]
