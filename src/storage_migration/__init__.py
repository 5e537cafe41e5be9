"""Storage migration - move files between filesystems on first access."""

from storage_migration.filesystems.local import LocalFilesystem
from storage_migration.filesystems.memory import MemoryFilesystem
from storage_migration.protocols import AsyncFilesystem
from storage_migration.streams import BytesReadStream, ReadStream, read_all
from storage_migration.types import DirectoryAttributes, FileAttributes, OperationConfig, StorageAttributes, Visibility
from storage_migration.wrappers import BaseWrapper, LoggingWrapper, MigrationWrapper

__all__ = [
    "AsyncFilesystem",
    "BaseWrapper",
    "BytesReadStream",
    "DirectoryAttributes",
    "FileAttributes",
    "LocalFilesystem",
    "LoggingWrapper",
    "MemoryFilesystem",
    "MigrationWrapper",
    "OperationConfig",
    "ReadStream",
    "StorageAttributes",
    "Visibility",
    "read_all",
]
