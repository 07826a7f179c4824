"""Type exports for recstore_ddb."""

from .key import Key, KeyValue
from .patch_request import PatchRequest
from .record import Record, Records

__all__ = [
    "Key",
    "KeyValue",
    "PatchRequest",
    "Record",
    "Records",
]
