"""Shared state and failure logging for adapter operations."""

from functools import wraps
from typing import Any, Awaitable, Callable, Dict, TypeVar

from recstore_ddb.client import StorageClient
from recstore_ddb.logger import Logger
from recstore_ddb.schema import KeySchema
from recstore_ddb.types import Record
from recstore_ddb.utils import extract_keys
from recstore_ddb.validator import RecordValidator

R = TypeVar("R")


def logged_operation(operation: str) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """Log any failure of the wrapped verb at error level, then re-raise it unchanged."""

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @wraps(func)
        async def wrapper(self: "BaseOperations", *args: Any, **kwargs: Any) -> R:
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                self.logger.error(
                    f"{operation} failed",
                    self.context(operation=operation, error=str(exc), error_type=type(exc).__name__),
                )
                raise

        return wrapper

    return decorator


class BaseOperations:
    """Holds the immutable schema/client/logger triple every verb works against."""

    def __init__(self, schema: KeySchema, client: StorageClient, logger: Logger) -> None:
        self.schema = schema
        self.client = client
        self.logger = logger
        self.validator = RecordValidator(schema)

    @property
    def table_name(self) -> str:
        return self.schema.table_name

    def context(self, **extra: Any) -> Dict[str, Any]:
        return {"table_name": self.schema.table_name, **extra}

    def key_of(self, record: Record) -> Dict[str, Any]:
        return extract_keys(record, self.schema)
