"""
Store clients for persisting feedback records to a key-value table
"""
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from app.storage.local_storage import LocalStorage

logger = logging.getLogger(__name__)


class StoreException(Exception):
    """Store write failure (connectivity, throttling, permission, serialization, filesystem)"""
    pass


class StoreClient:
    """Base key-value store client. Implementations must be safe to share between invocations."""

    backend = "unknown"

    def put_item(self, table_name: str, item: Dict[str, Any]) -> None:
        """
        Insert or replace ``item`` keyed by its ``id`` in ``table_name``

        Raises:
            StoreException: If the write fails for any reason
        """
        raise NotImplementedError


class DynamoDBStoreClient(StoreClient):
    """DynamoDB table store backed by a low-level boto3 client, shared across executor threads"""

    backend = "dynamodb"

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ):
        self.client = client or boto3.client(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )
        self.serializer = TypeSerializer()

    def _to_dynamodb_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        # boto3 rejects float attributes; numbers must be Decimal
        plain = json.loads(json.dumps(item), parse_float=Decimal)
        return {name: self.serializer.serialize(value) for name, value in plain.items()}

    def put_item(self, table_name: str, item: Dict[str, Any]) -> None:
        if not table_name:
            raise StoreException("Failed to put item: no table name configured")

        try:
            self.client.put_item(TableName=table_name, Item=self._to_dynamodb_item(item))
        except (ClientError, BotoCoreError) as e:
            raise StoreException(f"Failed to put item into {table_name}: {str(e)}") from e
        except (TypeError, ValueError) as e:
            raise StoreException(f"Failed to serialize item for {table_name}: {str(e)}") from e


class LocalStoreClient(StoreClient):
    """Store client over the local JSON-file storage"""

    backend = "local"

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def put_item(self, table_name: str, item: Dict[str, Any]) -> None:
        try:
            self.storage.put_item(table_name, item)
        except (OSError, TypeError, ValueError) as e:
            raise StoreException(f"Failed to put item into {table_name}: {str(e)}") from e


def create_store_client(settings) -> StoreClient:
    """
    Build the store client selected by ``settings.STORE_BACKEND``.

    Called once per process; the result is injected into the handler.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.STORE_BACKEND

    if backend == "dynamodb":
        logger.info(f"Using DynamoDB store (region={settings.AWS_REGION or 'default'})")
        return DynamoDBStoreClient(
            region_name=settings.AWS_REGION,
            endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
        )

    if backend == "local":
        storage_dir = Path(settings.LOCAL_STORAGE_DIR) if settings.LOCAL_STORAGE_DIR else None
        storage = LocalStorage(storage_dir)
        logger.info(f"Using local store at {storage.storage_dir}")
        return LocalStoreClient(storage)

    raise ValueError(f"Unknown store backend: {backend}")
