"""Application service interfaces for dependency injection."""

from .browser_interface import IBrowserManager
from .field_mapper_interface import IFieldMapper
from .logging_interface import ILoggingService

__all__ = [
    "IBrowserManager",
    "IFieldMapper",
    "ILoggingService",
]
