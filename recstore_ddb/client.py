"""Storage client boundary and its default aiobotocore-backed implementation."""

import asyncio
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol, Tuple

from aiobotocore.session import AioSession
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from recstore_ddb.types import Key, KeyValue, Record

WriteRequest = Dict[str, Any]
Page = Tuple[List[Record], Optional[Key]]


class StorageClient(Protocol):
    """Primitives the adapter needs from a backend; items are plain Python values."""

    async def put_item(self, table: str, item: Record) -> None: ...

    async def get_item(self, table: str, key: Key) -> Optional[Record]: ...

    async def delete_item(self, table: str, key: Key) -> None: ...

    async def update_item(
        self,
        table: str,
        key: Key,
        update_expression: str,
        attribute_names: Dict[str, str],
        attribute_values: Dict[str, Any],
    ) -> Record: ...

    async def batch_write(self, table: str, requests: List[WriteRequest]) -> List[WriteRequest]: ...

    async def batch_get(self, table: str, keys: List[Key]) -> Tuple[List[Record], List[Key]]: ...

    async def query_by_index(
        self, table: str, index: str, key_field: str, key_value: KeyValue, cursor: Optional[Key] = None
    ) -> Page: ...

    async def scan(self, table: str, cursor: Optional[Key] = None) -> Page: ...


def to_dynamo_value(value: Any) -> Any:
    """Floats are not accepted by the serializer anywhere in a value tree."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: to_dynamo_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return {to_dynamo_value(item) for item in value}
    return value


def from_dynamo_value(value: Any) -> Any:
    """Integral numbers become ``int``; any other ``Decimal`` is kept exact."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else value
    if isinstance(value, dict):
        return {key: from_dynamo_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [from_dynamo_value(item) for item in value]
    if isinstance(value, set):
        return {from_dynamo_value(item) for item in value}
    return value


class DynamodbClient:
    """Async DynamoDB client opened lazily on first use.

    Errors raised by botocore propagate unchanged; retries are whatever the
    botocore configuration provides.
    """

    def __init__(self, **kwargs: Any) -> None:
        self.endpoint: Optional[str] = kwargs.get("endpoint")
        self.region: Optional[str] = kwargs.get("region")
        self.botocore_config: Any = kwargs.get("botocore_config")
        self._session: AioSession = kwargs.get("session") or AioSession()
        self._client: Any = None
        self._client_context: Any = None
        self._lock = asyncio.Lock()
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    async def close(self) -> None:
        if self._client is not None:
            await self._client_context.__aexit__(None, None, None)
            self._client = None
            self._client_context = None

    async def put_item(self, table: str, item: Record) -> None:
        client = await self._get_client()
        await client.put_item(TableName=table, Item=self.serialize_item(item))

    async def get_item(self, table: str, key: Key) -> Optional[Record]:
        client = await self._get_client()
        response = await client.get_item(TableName=table, Key=self.serialize_item(key))
        item = response.get("Item")
        return self.deserialize_item(item) if item else None

    async def delete_item(self, table: str, key: Key) -> None:
        client = await self._get_client()
        await client.delete_item(TableName=table, Key=self.serialize_item(key))

    async def update_item(
        self,
        table: str,
        key: Key,
        update_expression: str,
        attribute_names: Dict[str, str],
        attribute_values: Dict[str, Any],
    ) -> Record:
        client = await self._get_client()
        response = await client.update_item(
            TableName=table,
            Key=self.serialize_item(key),
            UpdateExpression=update_expression,
            ExpressionAttributeNames=attribute_names,
            ExpressionAttributeValues=self.serialize_item(attribute_values),
            ReturnValues="ALL_NEW",
        )
        return self.deserialize_item(response.get("Attributes", {}))

    async def batch_write(self, table: str, requests: List[WriteRequest]) -> List[WriteRequest]:
        """Issue one BatchWriteItem call and return the requests DynamoDB left unprocessed."""
        client = await self._get_client()
        response = await client.batch_write_item(
            RequestItems={table: [self.__convert_request(request, self.serialize_item) for request in requests]}
        )
        unprocessed = response.get("UnprocessedItems", {}).get(table, [])
        return [self.__convert_request(request, self.deserialize_item) for request in unprocessed]

    async def batch_get(self, table: str, keys: List[Key]) -> Tuple[List[Record], List[Key]]:
        client = await self._get_client()
        response = await client.batch_get_item(
            RequestItems={table: {"Keys": [self.serialize_item(key) for key in keys]}}
        )
        items = response.get("Responses", {}).get(table, [])
        unprocessed = response.get("UnprocessedKeys", {}).get(table, {}).get("Keys", [])
        return [self.deserialize_item(item) for item in items], [self.deserialize_item(key) for key in unprocessed]

    async def query_by_index(
        self, table: str, index: str, key_field: str, key_value: KeyValue, cursor: Optional[Key] = None
    ) -> Page:
        client = await self._get_client()
        params: Dict[str, Any] = {
            "TableName": table,
            "IndexName": index,
            "KeyConditionExpression": "#key = :value",
            "ExpressionAttributeNames": {"#key": key_field},
            "ExpressionAttributeValues": {":value": self.serialize_value(key_value)},
        }
        if cursor:
            params["ExclusiveStartKey"] = self.serialize_item(cursor)
        return self.__to_page(await client.query(**params))

    async def scan(self, table: str, cursor: Optional[Key] = None) -> Page:
        client = await self._get_client()
        params: Dict[str, Any] = {"TableName": table}
        if cursor:
            params["ExclusiveStartKey"] = self.serialize_item(cursor)
        return self.__to_page(await client.scan(**params))

    def serialize_value(self, value: Any) -> Dict[str, Any]:
        return self._serializer.serialize(to_dynamo_value(value))

    def serialize_item(self, item: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        return {key: self.serialize_value(value) for key, value in item.items()}

    def deserialize_item(self, item: Dict[str, Dict[str, Any]]) -> Record:
        if not item:
            return {}
        return {key: from_dynamo_value(self._deserializer.deserialize(value)) for key, value in item.items()}

    async def _get_client(self) -> Any:
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client_context = self._session.create_client(
                        "dynamodb",
                        region_name=self.region,
                        endpoint_url=self.endpoint,
                        config=self.botocore_config,
                    )
                    self._client = await self._client_context.__aenter__()
        return self._client

    def __to_page(self, response: Dict[str, Any]) -> Page:
        items = [self.deserialize_item(item) for item in response.get("Items", [])]
        last_key = response.get("LastEvaluatedKey")
        return items, self.deserialize_item(last_key) if last_key else None

    def __convert_request(self, request: WriteRequest, convert: Any) -> WriteRequest:
        if "PutRequest" in request:
            return {"PutRequest": {"Item": convert(request["PutRequest"]["Item"])}}
        return {"DeleteRequest": {"Key": convert(request["DeleteRequest"]["Key"])}}
