"""Errors raised by filesystem operations.

Absence of a file is a normal branch condition for most callers and is reported by
`file_exists` / `directory_exists` returning False. Operations that require an existing
file raise `MissingFileError` instead; every other backend failure is raised as one of
the `UnableTo...` errors below, chained to the original exception.
"""

from storage_migration.errors.base import BaseStorageError, ExtraInfoType


class FilesystemOperationError(BaseStorageError):
    """Base exception for all failed filesystem operations."""


class MissingFileError(FilesystemOperationError):
    """Raised when an operation requires a file that is not in the filesystem."""

    def __init__(self, operation: str, path: str):
        super().__init__(
            message="A file was required but not found in the filesystem.",
            extra_info={"operation": operation, "path": path},
        )
        self.operation: str = operation
        self.path: str = path


class _PathOperationError(FilesystemOperationError):
    message: str = "A filesystem operation failed."

    def __init__(self, path: str, reason: str | None = None, extra_info: ExtraInfoType | None = None):
        super().__init__(
            message=self.message,
            extra_info={"path": path, "reason": reason, **(extra_info or {})},
        )
        self.path: str = path
        self.reason: str | None = reason


class UnableToReadFileError(_PathOperationError):
    """Raised when a file cannot be read."""

    message = "Unable to read file."


class UnableToWriteFileError(_PathOperationError):
    """Raised when a file cannot be written."""

    message = "Unable to write file."


class UnableToDeleteFileError(_PathOperationError):
    """Raised when a file cannot be deleted."""

    message = "Unable to delete file."


class UnableToDeleteDirectoryError(_PathOperationError):
    """Raised when a directory cannot be deleted."""

    message = "Unable to delete directory."


class UnableToCreateDirectoryError(_PathOperationError):
    """Raised when a directory cannot be created."""

    message = "Unable to create directory."


class UnableToSetVisibilityError(_PathOperationError):
    """Raised when the visibility of a file cannot be changed."""

    message = "Unable to set visibility."


class UnableToListContentsError(_PathOperationError):
    """Raised when the contents of a directory cannot be listed."""

    message = "Unable to list contents."


class UnableToRetrieveMetadataError(_PathOperationError):
    """Raised when a metadata attribute of a file cannot be retrieved."""

    message = "Unable to retrieve metadata."

    def __init__(self, path: str, metadata_type: str, reason: str | None = None):
        super().__init__(path=path, reason=reason, extra_info={"metadata_type": metadata_type})
        self.metadata_type: str = metadata_type


class _TransferOperationError(FilesystemOperationError):
    message: str = "A filesystem transfer failed."

    def __init__(self, source: str, destination: str, reason: str | None = None):
        super().__init__(
            message=self.message,
            extra_info={"source": source, "destination": destination, "reason": reason},
        )
        self.source: str = source
        self.destination: str = destination
        self.reason: str | None = reason


class UnableToMoveFileError(_TransferOperationError):
    """Raised when a file cannot be moved."""

    message = "Unable to move file."


class UnableToCopyFileError(_TransferOperationError):
    """Raised when a file cannot be copied."""

    message = "Unable to copy file."
