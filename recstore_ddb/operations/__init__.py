from .batch import BatchRecordOperations
from .query import FetchAll, QueryOperations
from .single import SingleRecordOperations, build_update_expression

__all__ = [
    "BatchRecordOperations",
    "FetchAll",
    "QueryOperations",
    "SingleRecordOperations",
    "build_update_expression",
]
