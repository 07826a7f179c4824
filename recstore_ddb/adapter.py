"""DynamoDB adapter exposing validated, timestamped CRUD over one table."""

from typing import Any, Optional

from recstore_ddb.client import DynamodbClient, StorageClient
from recstore_ddb.logger import Logger, LoguruLogger
from recstore_ddb.operations import BatchRecordOperations, QueryOperations
from recstore_ddb.schema import (
    DEFAULT_INDEX_NAME,
    DEFAULT_PARTITION_FIELD,
    DEFAULT_SORT_FIELD,
    KeySchema,
)


class DynamodbAdapter(BatchRecordOperations, QueryOperations):
    """Single-record, batch and index verbs bound to one table.

    Holds no per-call state, so one instance can serve concurrent callers.
    """

    def __init__(self, **kwargs: Any) -> None:
        schema = KeySchema(
            table_name=kwargs.get("table_name", ""),
            partition_field=kwargs.get("partition_field") or DEFAULT_PARTITION_FIELD,
            sort_field=kwargs.get("sort_field", DEFAULT_SORT_FIELD),
            index_name=kwargs.get("index_name") or DEFAULT_INDEX_NAME,
        )
        logger: Logger = kwargs.get("logger") or LoguruLogger()
        client: Optional[StorageClient] = kwargs.get("client")
        self.owns_client = client is None
        if client is None:
            client = DynamodbClient(endpoint=kwargs.get("endpoint"), region=kwargs.get("region"))
        super().__init__(schema, client, logger)
        self.logger.info(
            "DynamoDB adapter created",
            self.context(
                partition_field=schema.partition_field,
                sort_field=schema.sort_field,
                index_name=schema.index_name,
            ),
        )

    async def close(self) -> None:
        """Release the default client; a caller-supplied client is left open."""
        if self.owns_client and isinstance(self.client, DynamodbClient):
            await self.client.close()

    async def __aenter__(self) -> "DynamodbAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
