"""Public interface for the recstore_ddb package."""

from typing import Any

from .adapter import DynamodbAdapter
from .client import DynamodbClient, StorageClient
from .exception import BatchItemException, ValidationError
from .logger import Logger, LoguruLogger
from .schema import (
    BATCH_GET_LIMIT,
    BATCH_WRITE_LIMIT,
    DEFAULT_INDEX_NAME,
    DEFAULT_PARTITION_FIELD,
    DEFAULT_SORT_FIELD,
    KeySchema,
)
from .timestamps import current_timestamp, with_refreshed_timestamp, with_timestamps_if_missing
from .utils import build_keys, extract_keys, generate_id


def adapter(**kwargs: Any) -> DynamodbAdapter:
    """Build an adapter from ``table_name`` plus optional key layout, logger and client."""
    return DynamodbAdapter(**kwargs)


__all__ = [
    "adapter",
    "DynamodbAdapter",
    "DynamodbClient",
    "StorageClient",
    "BatchItemException",
    "ValidationError",
    "Logger",
    "LoguruLogger",
    "KeySchema",
    "BATCH_GET_LIMIT",
    "BATCH_WRITE_LIMIT",
    "DEFAULT_INDEX_NAME",
    "DEFAULT_PARTITION_FIELD",
    "DEFAULT_SORT_FIELD",
    "current_timestamp",
    "with_refreshed_timestamp",
    "with_timestamps_if_missing",
    "build_keys",
    "extract_keys",
    "generate_id",
]
