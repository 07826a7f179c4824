from typing import Iterable, Optional, Tuple


class ValidationError(ValueError):
    """Raised before any backend call when a key, record or patch is malformed."""

    def __init__(self, message: str, fields: Iterable[str] = (), index: Optional[int] = None) -> None:
        super().__init__(message)
        self.fields: Tuple[str, ...] = tuple(fields)
        self.index = index

    def at_index(self, index: int, subject: str) -> "ValidationError":
        return type(self)(
            f"Validation failed for {subject} at index {index}: {self}", fields=self.fields, index=index
        )


class BatchItemException(ValidationError):
    pass
