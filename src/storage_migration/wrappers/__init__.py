from .base import BaseWrapper
from .logging import LoggingWrapper
from .migration import MigrationWrapper

__all__ = [
    "BaseWrapper",
    "LoggingWrapper",
    "MigrationWrapper",
]
