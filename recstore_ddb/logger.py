"""Logger collaborator invoked around every adapter operation."""

from typing import Any, Mapping, Optional, Protocol

from loguru import logger as loguru_logger


class Logger(Protocol):

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...


class LoguruLogger:
    """Default logger; structured context is bound as loguru ``extra`` fields."""

    def __init__(self, name: str = "recstore_ddb") -> None:
        self.name = name
        self._logger = loguru_logger.bind(logger_name=name)

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.__bound(context).debug("{} {}", message, dict(context or {}))

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.__bound(context).info("{} {}", message, dict(context or {}))

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.__bound(context).warning("{} {}", message, dict(context or {}))

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.__bound(context).error("{} {}", message, dict(context or {}))

    def __bound(self, context: Optional[Mapping[str, Any]]) -> Any:
        return self._logger.bind(**dict(context or {})) if context else self._logger
