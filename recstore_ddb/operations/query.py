"""Index lookups and full-table enumeration, drained to completion."""

from typing import Any, List, Optional

from recstore_ddb.client import Page
from recstore_ddb.common import BaseOperations, logged_operation
from recstore_ddb.paginator import drain
from recstore_ddb.types import Key, KeyValue, Record


class FetchAll:
    """Reusable fetch bound to an index and an optional fixed sort-key value.

    Awaiting the instance queries ``index_name`` for ``sort_value``; without a
    value it scans the whole table instead.
    """

    def __init__(self, operations: "QueryOperations", index_name: str, sort_value: Optional[KeyValue]) -> None:
        self.operations = operations
        self.index_name = index_name
        self.sort_value = sort_value

    @property
    def is_scan(self) -> bool:
        return self.sort_value is None or self.sort_value == ""

    async def __call__(self) -> List[Record]:
        if self.is_scan:
            return await self.operations.fetch_all_records()
        return await self.operations.fetch_all_by_index_value(self.sort_value, index_name=self.index_name)


class QueryOperations(BaseOperations):

    @logged_operation("fetch_all_by_index_value")
    async def fetch_all_by_index_value(self, value: Any, index_name: Optional[str] = None) -> List[Record]:
        sort_value = self.validator.validate_index_value(value)
        index = index_name or self.schema.index_name
        sort_field = self.schema.sort_field
        self.logger.debug("Fetching all records by sort key", self.context(index=index, sk=sort_value))

        async def fetch_page(cursor: Optional[Key]) -> Page:
            return await self.client.query_by_index(self.table_name, index, sort_field, sort_value, cursor)

        items = await drain(fetch_page)
        self.logger.info(
            "Records fetched successfully", self.context(index=index, sk=sort_value, count=len(items))
        )
        return items

    @logged_operation("fetch_all_records")
    async def fetch_all_records(self) -> List[Record]:
        self.logger.debug("Scanning all records", self.context())

        async def fetch_page(cursor: Optional[Key]) -> Page:
            return await self.client.scan(self.table_name, cursor)

        items = await drain(fetch_page)
        self.logger.info("All records fetched successfully", self.context(count=len(items)))
        return items

    def build_fetch_all(self, index_name: Optional[str] = None, sort_value: Optional[KeyValue] = None) -> FetchAll:
        fetch = FetchAll(self, index_name or self.schema.index_name, sort_value)
        self.logger.debug(
            "Built reusable fetch",
            self.context(index=fetch.index_name, sk=sort_value, mode="scan" if fetch.is_scan else "query"),
        )
        return fetch
