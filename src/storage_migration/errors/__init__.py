from storage_migration.errors.base import BaseStorageError, ExtraInfoType, InvalidPathError, InvalidVisibilityError
from storage_migration.errors.filesystem import (
    FilesystemOperationError,
    MissingFileError,
    UnableToCopyFileError,
    UnableToCreateDirectoryError,
    UnableToDeleteDirectoryError,
    UnableToDeleteFileError,
    UnableToListContentsError,
    UnableToMoveFileError,
    UnableToReadFileError,
    UnableToRetrieveMetadataError,
    UnableToSetVisibilityError,
    UnableToWriteFileError,
)
from storage_migration.errors.migration import MigrationCleanupError, MigrationError

__all__ = [
    "BaseStorageError",
    "ExtraInfoType",
    "FilesystemOperationError",
    "InvalidPathError",
    "InvalidVisibilityError",
    "MigrationCleanupError",
    "MigrationError",
    "MissingFileError",
    "UnableToCopyFileError",
    "UnableToCreateDirectoryError",
    "UnableToDeleteDirectoryError",
    "UnableToDeleteFileError",
    "UnableToListContentsError",
    "UnableToMoveFileError",
    "UnableToReadFileError",
    "UnableToRetrieveMetadataError",
    "UnableToSetVisibilityError",
    "UnableToWriteFileError",
]
