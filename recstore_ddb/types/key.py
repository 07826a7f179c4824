from decimal import Decimal
from typing import Dict, Union

KeyValue = Union[str, int, float, Decimal]
Key = Dict[str, KeyValue]
