"""Key layout of the table an adapter is bound to."""

from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_PARTITION_FIELD = "id"
DEFAULT_SORT_FIELD = "sk"
DEFAULT_INDEX_NAME = "gsiBySk"

# per-request ceilings imposed by DynamoDB
BATCH_WRITE_LIMIT = 25
BATCH_GET_LIMIT = 100

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


@dataclass(frozen=True)
class KeySchema:
    table_name: str
    partition_field: str = DEFAULT_PARTITION_FIELD
    sort_field: Optional[str] = DEFAULT_SORT_FIELD
    index_name: str = DEFAULT_INDEX_NAME

    def __post_init__(self) -> None:
        if not isinstance(self.table_name, str) or not self.table_name:
            raise ValueError("table_name must be a non-empty string")
        if not isinstance(self.partition_field, str) or not self.partition_field:
            raise ValueError("partition_field must be a non-empty string")
        if self.sort_field is not None and (not isinstance(self.sort_field, str) or not self.sort_field):
            raise ValueError("sort_field must be a non-empty string or None")
        if self.sort_field == self.partition_field:
            raise ValueError("sort_field must differ from partition_field")

    @property
    def key_fields(self) -> Tuple[str, ...]:
        if self.sort_field is None:
            return (self.partition_field,)
        return (self.partition_field, self.sort_field)
