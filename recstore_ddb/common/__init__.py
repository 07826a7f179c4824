from .base_adapter import BaseOperations, logged_operation

__all__ = ["BaseOperations", "logged_operation"]
