"""DynamoDB-backed key-value store for the tithi cache."""
import gzip
import logging

import boto3
from boto3.dynamodb.types import Binary
from botocore.exceptions import BotoCoreError, ClientError

from processor.models import StorageResult
from storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class DynamoDBKeyValueStore(KeyValueStore):
    """
    Stores each key as one item: {cache_key: <key>, payload: <gzip bytes>}.

    Payloads are gzip-compressed UTF-8 so a full event snapshot stays well
    under the 400 KB item limit. Plain string payloads are still readable.
    """

    KEY_ATTRIBUTE = 'cache_key'
    VALUE_ATTRIBUTE = 'payload'

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBKeyValueStore for table: {table_name}")

    def get(self, key: str) -> StorageResult:
        try:
            response = self.table.get_item(Key={self.KEY_ATTRIBUTE: key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error reading key {key} from DynamoDB: {e}")
            return StorageResult.failure(str(e))

        item = response.get('Item')
        if item is None:
            return StorageResult.ok(None)

        payload = item.get(self.VALUE_ATTRIBUTE)
        if isinstance(payload, Binary):
            payload = payload.value
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = gzip.decompress(bytes(payload)).decode('utf-8')
            except (OSError, EOFError, UnicodeDecodeError) as e:
                logger.error(f"Error decoding payload for key {key}: {e}")
                return StorageResult.failure(str(e))
        return StorageResult.ok(payload)

    def set(self, key: str, value: str) -> StorageResult:
        compressed = gzip.compress(value.encode('utf-8'))
        try:
            self.table.put_item(
                Item={self.KEY_ATTRIBUTE: key, self.VALUE_ATTRIBUTE: Binary(compressed)}
            )
        except (ClientError, BotoCoreError) as e:
            # Items over 400 KB are rejected with a ValidationException
            logger.error(
                f"Error writing key {key} to DynamoDB "
                f"({len(compressed)} bytes compressed): {e}"
            )
            return StorageResult.failure(str(e))
        return StorageResult.ok()

    def remove(self, key: str) -> StorageResult:
        try:
            self.table.delete_item(Key={self.KEY_ATTRIBUTE: key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting key {key} from DynamoDB: {e}")
            return StorageResult.failure(str(e))
        return StorageResult.ok()

    def keys(self) -> StorageResult:
        """
        List all keys using a paginated Scan.

        Returns:
            StorageResult whose value is the list of keys
        """
        scan_kwargs = {'ProjectionExpression': self.KEY_ATTRIBUTE}
        keys = []

        try:
            response = self.table.scan(**scan_kwargs)
            keys.extend(item[self.KEY_ATTRIBUTE] for item in response.get('Items', []))

            # Handle pagination
            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **scan_kwargs
                )
                keys.extend(item[self.KEY_ATTRIBUTE] for item in response.get('Items', []))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error scanning DynamoDB table: {e}")
            return StorageResult.failure(str(e))

        return StorageResult.ok(keys)
