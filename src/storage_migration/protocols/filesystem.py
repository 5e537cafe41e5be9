from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from storage_migration.streams import ReadStream
from storage_migration.types import FileAttributes, OperationConfig, StorageAttributes, Visibility


@runtime_checkable
class AsyncFilesystem(Protocol):
    """A protocol for async filesystem operations.

    Every filesystem reports the absence of a file through `file_exists` / `directory_exists`
    and through `MissingFileError` for operations that require the file. Any other failure is
    raised as a `FilesystemOperationError`.
    """

    async def file_exists(self, path: str) -> bool:
        """Check if a file exists at the given path.

        Args:
            path: The path of the file.

        Returns:
            True if a file exists at the path, False otherwise.
        """
        ...

    async def directory_exists(self, path: str) -> bool:
        """Check if a directory exists at the given path.

        Args:
            path: The path of the directory.

        Returns:
            True if a directory exists at the path, False otherwise.
        """
        ...

    async def write(self, path: str, contents: bytes, *, config: OperationConfig | None = None) -> None:
        """Write a file, replacing any existing file at the path.

        Args:
            path: The path of the file.
            contents: The bytes to store.
            config: Optional per-call options (visibility etc.).
        """
        ...

    async def write_stream(self, path: str, contents: ReadStream, *, config: OperationConfig | None = None) -> None:
        """Write a file from a stream, replacing any existing file at the path.

        The stream is consumed to the end and closed. A partially written file is never
        visible to other callers.

        Args:
            path: The path of the file.
            contents: The stream to read the file contents from.
            config: Optional per-call options (visibility etc.).
        """
        ...

    async def read(self, path: str) -> bytes:
        """Read the contents of a file.

        Args:
            path: The path of the file.

        Returns:
            The contents of the file.

        Raises:
            MissingFileError: If there is no file at the path.
        """
        ...

    async def read_stream(self, path: str) -> ReadStream:
        """Open a stream over the contents of a file. The caller is responsible for closing it.

        Args:
            path: The path of the file.

        Returns:
            A byte stream over the contents of the file.

        Raises:
            MissingFileError: If there is no file at the path.
        """
        ...

    async def delete(self, path: str) -> None:
        """Delete a file. Deleting a file that does not exist is not an error.

        Args:
            path: The path of the file.
        """
        ...

    async def delete_directory(self, path: str) -> None:
        """Delete a directory and everything below it. Deleting a missing directory is not an error.

        Args:
            path: The path of the directory.
        """
        ...

    async def create_directory(self, path: str, *, config: OperationConfig | None = None) -> None:
        """Create a directory and any missing parents. Creating an existing directory is not an error.

        Args:
            path: The path of the directory.
            config: Optional per-call options (directory visibility etc.).
        """
        ...

    async def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        """Set the visibility of a file.

        Args:
            path: The path of the file.
            visibility: The new visibility.
        """
        ...

    async def visibility(self, path: str) -> FileAttributes:
        """Retrieve the visibility of a file."""
        ...

    async def mime_type(self, path: str) -> FileAttributes:
        """Retrieve the MIME type of a file."""
        ...

    async def last_modified(self, path: str) -> FileAttributes:
        """Retrieve the last modification time of a file."""
        ...

    async def file_size(self, path: str) -> FileAttributes:
        """Retrieve the size of a file in bytes."""
        ...

    def list_contents(self, path: str, *, deep: bool = False) -> AsyncIterator[StorageAttributes]:
        """List the files and directories below a path.

        Each call starts a new listing. Listing a missing directory yields nothing.

        Args:
            path: The path of the directory to list.
            deep: If True, list everything below the path, not just its direct children.

        Returns:
            An async iterator of file and directory attributes.
        """
        ...

    async def move(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        """Move a file, replacing any existing file at the destination.

        Args:
            source: The path of the file to move.
            destination: The path to move the file to.
            config: Optional per-call options.
        """
        ...

    async def copy(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        """Copy a file, replacing any existing file at the destination.

        Args:
            source: The path of the file to copy.
            destination: The path to copy the file to.
            config: Optional per-call options.
        """
        ...
