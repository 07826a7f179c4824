from typing import Any, Dict, TypedDict

from .key import Key


class PatchRequest(TypedDict):
    keys: Key
    updates: Dict[str, Any]
