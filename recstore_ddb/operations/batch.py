"""Multi-record verbs built on the chunker and on concurrent single patches."""

import asyncio
from typing import Any, List, Sequence

from recstore_ddb.batching import apply_in_chunks
from recstore_ddb.client import WriteRequest
from recstore_ddb.common import logged_operation
from recstore_ddb.schema import BATCH_GET_LIMIT, BATCH_WRITE_LIMIT
from recstore_ddb.timestamps import with_timestamps_if_missing
from recstore_ddb.types import Key, Record

from .single import SingleRecordOperations


class BatchRecordOperations(SingleRecordOperations):

    @logged_operation("create_many")
    async def create_many(self, records: Sequence[Any]) -> List[Record]:
        validated = self.validator.validate_batch_records(records)
        if not validated:
            self.logger.debug("No records provided for batch create", self.context())
            return []
        stamped = [with_timestamps_if_missing(record) for record in validated]
        self.logger.debug("Creating multiple records", self.context(count=len(stamped)))
        await self._write_in_chunks([{"PutRequest": {"Item": item}} for item in stamped])
        self.logger.info("Multiple records created successfully", self.context(count=len(stamped)))
        return stamped

    @logged_operation("delete_many")
    async def delete_many(self, keys_list: Sequence[Any]) -> None:
        validated = self.validator.validate_batch_keys(keys_list)
        if not validated:
            self.logger.debug("No keys provided for batch delete", self.context())
            return
        self.logger.debug("Deleting multiple records", self.context(count=len(validated)))
        await self._write_in_chunks([{"DeleteRequest": {"Key": keys}} for keys in validated])
        self.logger.info("Multiple records deleted successfully", self.context(count=len(validated)))

    @logged_operation("fetch_many")
    async def fetch_many(self, keys_list: Sequence[Any]) -> List[Record]:
        """Return the records that exist among ``keys_list``; missing keys are omitted."""
        validated = self.validator.validate_batch_keys(keys_list)
        if not validated:
            self.logger.debug("No keys provided for batch fetch", self.context())
            return []
        self.logger.debug("Fetching multiple records by keys", self.context(count=len(validated)))

        async def fetch_chunk(found: List[Record], batch: List[Key]) -> List[Record]:
            items, unprocessed = await self.client.batch_get(self.table_name, batch)
            if unprocessed:
                self.logger.warn(
                    "Some keys were not processed", self.context(unprocessed_count=len(unprocessed))
                )
            return found + items

        results = await apply_in_chunks(validated, BATCH_GET_LIMIT, fetch_chunk, [])
        self.logger.info(
            "Multiple records fetched by keys", self.context(requested=len(validated), found=len(results))
        )
        return results

    @logged_operation("patch_many")
    async def patch_many(self, requests: Sequence[Any]) -> List[Record]:
        """Patch every request concurrently, in request order.

        All requests are validated before any is sent. If any patch fails, the
        first failure is raised once every in-flight patch has settled.
        """
        validated = self.validator.validate_batch_patch_updates(requests)
        if not validated:
            return []
        self.logger.debug("Patching multiple records", self.context(count=len(validated)))
        outcomes = await asyncio.gather(
            *(self._patch_validated(request["keys"], request["updates"]) for request in validated),
            return_exceptions=True,
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            raise failures[0]
        self.logger.info("Multiple records patched successfully", self.context(count=len(outcomes)))
        return list(outcomes)

    async def _write_in_chunks(self, requests: List[WriteRequest]) -> int:
        async def write_chunk(unprocessed_total: int, batch: List[WriteRequest]) -> int:
            unprocessed = await self.client.batch_write(self.table_name, batch)
            if unprocessed:
                # TODO: surface unprocessed writes to callers instead of only logging them
                self.logger.warn(
                    "Some items were not processed", self.context(unprocessed_count=len(unprocessed))
                )
            return unprocessed_total + len(unprocessed)

        return await apply_in_chunks(requests, BATCH_WRITE_LIMIT, write_chunk, 0)
