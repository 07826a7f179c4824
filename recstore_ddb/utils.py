import uuid
from typing import Any, Dict, Mapping, Optional

from recstore_ddb.schema import KeySchema
from recstore_ddb.types import Key, KeyValue


def generate_id() -> str:
    return str(uuid.uuid4())


def build_keys(schema: KeySchema, partition_value: KeyValue, sort_value: Optional[KeyValue] = None) -> Key:
    keys: Key = {schema.partition_field: partition_value}
    if schema.sort_field is not None and sort_value is not None:
        keys[schema.sort_field] = sort_value
    return keys


def extract_keys(record: Mapping[str, Any], schema: KeySchema) -> Dict[str, Any]:
    """Project ``record`` onto the schema's key fields, skipping any that are absent."""
    return {field: record[field] for field in schema.key_fields if field in record}
