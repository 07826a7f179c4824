from typing import Any, Dict, List

Record = Dict[str, Any]
Records = List[Record]
