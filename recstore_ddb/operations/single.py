"""Single-record verbs."""

from typing import Any, Collection, Dict, Mapping, Optional, Tuple

from recstore_ddb.common import BaseOperations, logged_operation
from recstore_ddb.schema import UPDATED_AT
from recstore_ddb.timestamps import with_refreshed_timestamp, with_timestamps_if_missing
from recstore_ddb.types import Key, Record


def build_update_expression(
    updates: Mapping[str, Any], key_fields: Collection[str]
) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Build a ``SET`` expression with one ``#attrN``/``:valN`` pair per updated attribute.

    Key attributes are skipped even if present in ``updates``.
    """
    parts = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    for index, (field, value) in enumerate(item for item in updates.items() if item[0] not in key_fields):
        name, placeholder = f"#attr{index}", f":val{index}"
        parts.append(f"{name} = {placeholder}")
        names[name] = field
        values[placeholder] = value
    if not parts:
        raise ValueError("update expression requires at least one non-key attribute")
    return f"SET {', '.join(parts)}", names, values


class SingleRecordOperations(BaseOperations):

    @logged_operation("create_one")
    async def create_one(self, record: Mapping[str, Any]) -> Record:
        validated = self.validator.validate_record(record)
        stamped = with_timestamps_if_missing(validated)
        self.logger.debug("Creating record", self.context(record=stamped))
        await self.client.put_item(self.table_name, stamped)
        self.logger.info("Record created successfully", self.context(keys=self.key_of(stamped)))
        return stamped

    @logged_operation("fetch_one")
    async def fetch_one(self, keys: Mapping[str, Any]) -> Optional[Record]:
        validated_keys = self.validator.validate_keys(keys)
        self.logger.debug("Fetching record", self.context(keys=validated_keys))
        item = await self.client.get_item(self.table_name, validated_keys)
        if not item:
            self.logger.info("Record not found", self.context(keys=validated_keys))
            return None
        self.logger.info("Record fetched successfully", self.context(keys=validated_keys))
        return item

    @logged_operation("replace_one")
    async def replace_one(self, record: Mapping[str, Any]) -> Record:
        """Overwrite the whole record; ``createdAt`` is stored as given, ``updatedAt`` is refreshed."""
        validated = self.validator.validate_record(record)
        refreshed = with_refreshed_timestamp(validated)
        self.logger.debug("Replacing record", self.context(record=refreshed))
        await self.client.put_item(self.table_name, refreshed)
        self.logger.info("Record replaced successfully", self.context(keys=self.key_of(refreshed)))
        return refreshed

    @logged_operation("patch_one")
    async def patch_one(self, keys: Mapping[str, Any], updates: Mapping[str, Any]) -> Record:
        validated_keys, cleaned = self.validator.validate_patch_updates(keys, updates)
        return await self._patch_validated(validated_keys, cleaned)

    @logged_operation("delete_one")
    async def delete_one(self, keys: Mapping[str, Any]) -> None:
        validated_keys = self.validator.validate_keys(keys)
        self.logger.debug("Deleting record", self.context(keys=validated_keys))
        await self.client.delete_item(self.table_name, validated_keys)
        self.logger.info("Record deleted successfully", self.context(keys=validated_keys))

    async def _patch_validated(self, keys: Key, updates: Dict[str, Any]) -> Record:
        refreshed = with_refreshed_timestamp(updates)
        expression, names, values = build_update_expression(refreshed, self.schema.key_fields)
        self.logger.debug("Patching record", self.context(keys=keys, updates=refreshed))
        result = await self.client.update_item(self.table_name, keys, expression, names, values)
        self.logger.info(
            "Record patched successfully", self.context(keys=keys, updated_fields=sorted(set(refreshed) - {UPDATED_AT}))
        )
        return result
