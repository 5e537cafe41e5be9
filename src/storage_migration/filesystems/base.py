"""
Base class for filesystem implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from typing_extensions import override

from storage_migration.errors import (
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
from storage_migration.protocols.filesystem import AsyncFilesystem
from storage_migration.streams import ReadStream, read_all
from storage_migration.types import FileAttributes, OperationConfig, StorageAttributes, Visibility
from storage_migration.utils.mime import detect_mime_type
from storage_migration.utils.path import normalize_path

RETAIN_VISIBILITY_OPTION = "retain_visibility"


class BaseFilesystem(AsyncFilesystem, ABC):
    """An opinionated abstract base class for filesystems.

    The public methods normalize paths, turn a missing file into `MissingFileError` and wrap
    `OSError` from the implementation into the matching `FilesystemOperationError`.
    Implementations only deal with normalized paths through the underscore methods.
    """

    _default_visibility: Visibility

    def __init__(self, *, default_visibility: Visibility | str = Visibility.PUBLIC) -> None:
        """Initialize the filesystem.

        Args:
            default_visibility: The visibility of files and directories written without an explicit visibility.
        """
        self._default_visibility = Visibility.parse(default_visibility)

    def _file_visibility(self, config: OperationConfig | None) -> Visibility:
        if config is not None and config.visibility is not None:
            return Visibility.parse(config.visibility)
        return self._default_visibility

    def _directory_visibility(self, config: OperationConfig | None) -> Visibility:
        if config is not None and config.directory_visibility is not None:
            return Visibility.parse(config.directory_visibility)
        return self._default_visibility

    def _copy_visibility(self, config: OperationConfig | None) -> Visibility | None:
        """Return the visibility for a copied file, or None to keep the visibility of the source."""
        if config is None:
            return None
        if config.visibility is not None:
            return Visibility.parse(config.visibility)
        if not config.get(RETAIN_VISIBILITY_OPTION, True):
            return self._default_visibility
        return None

    @abstractmethod
    async def _file_exists(self, *, path: str) -> bool: ...

    @abstractmethod
    async def _directory_exists(self, *, path: str) -> bool: ...

    @abstractmethod
    async def _write_file(self, *, path: str, contents: bytes, visibility: Visibility, directory_visibility: Visibility) -> None:
        """Store a file, creating parent directories as needed. The write must be atomic."""

    async def _write_file_stream(
        self, *, path: str, contents: ReadStream, visibility: Visibility, directory_visibility: Visibility
    ) -> None:
        """Store a file from a stream. Defaults to buffering the stream in memory."""
        await self._write_file(
            path=path, contents=await read_all(contents), visibility=visibility, directory_visibility=directory_visibility
        )

    @abstractmethod
    async def _read_file(self, *, path: str) -> bytes | None:
        """Return the contents of a file, or None if it does not exist."""

    @abstractmethod
    async def _open_file_stream(self, *, path: str) -> ReadStream | None:
        """Open a stream over a file, or return None if it does not exist."""

    @abstractmethod
    async def _delete_file(self, *, path: str) -> None: ...

    @abstractmethod
    async def _delete_directory(self, *, path: str) -> None: ...

    @abstractmethod
    async def _create_directory(self, *, path: str, visibility: Visibility) -> None: ...

    @abstractmethod
    async def _set_file_visibility(self, *, path: str, visibility: Visibility) -> bool:
        """Set the visibility of a file, returning False if it does not exist."""

    @abstractmethod
    async def _get_file_attributes(self, *, path: str) -> FileAttributes | None:
        """Return all cheaply known attributes of a file, or None if it does not exist."""

    @abstractmethod
    def _list_contents(self, *, path: str, deep: bool) -> AsyncIterator[StorageAttributes]: ...

    @abstractmethod
    async def _move_file(self, *, source: str, destination: str, directory_visibility: Visibility) -> None: ...

    @abstractmethod
    async def _copy_file(
        self, *, source: str, destination: str, visibility: Visibility | None, directory_visibility: Visibility
    ) -> None:
        """Copy a file. A visibility of None keeps the visibility of the source."""

    @override
    async def file_exists(self, path: str) -> bool:
        path = normalize_path(path)
        try:
            return await self._file_exists(path=path)
        except OSError as e:
            raise UnableToRetrieveMetadataError(path=path, metadata_type="exists", reason=str(e)) from e

    @override
    async def directory_exists(self, path: str) -> bool:
        path = normalize_path(path)
        try:
            return await self._directory_exists(path=path)
        except OSError as e:
            raise UnableToRetrieveMetadataError(path=path, metadata_type="exists", reason=str(e)) from e

    @override
    async def write(self, path: str, contents: bytes, *, config: OperationConfig | None = None) -> None:
        path = normalize_path(path)
        try:
            await self._write_file(
                path=path,
                contents=bytes(contents),
                visibility=self._file_visibility(config),
                directory_visibility=self._directory_visibility(config),
            )
        except OSError as e:
            raise UnableToWriteFileError(path=path, reason=str(e)) from e

    @override
    async def write_stream(self, path: str, contents: ReadStream, *, config: OperationConfig | None = None) -> None:
        async with contents:
            path = normalize_path(path)
            try:
                await self._write_file_stream(
                    path=path,
                    contents=contents,
                    visibility=self._file_visibility(config),
                    directory_visibility=self._directory_visibility(config),
                )
            except OSError as e:
                raise UnableToWriteFileError(path=path, reason=str(e)) from e

    @override
    async def read(self, path: str) -> bytes:
        path = normalize_path(path)
        try:
            contents = await self._read_file(path=path)
        except OSError as e:
            raise UnableToReadFileError(path=path, reason=str(e)) from e

        if contents is None:
            raise MissingFileError(operation="read", path=path)

        return contents

    @override
    async def read_stream(self, path: str) -> ReadStream:
        path = normalize_path(path)
        try:
            stream = await self._open_file_stream(path=path)
        except OSError as e:
            raise UnableToReadFileError(path=path, reason=str(e)) from e

        if stream is None:
            raise MissingFileError(operation="read_stream", path=path)

        return stream

    @override
    async def delete(self, path: str) -> None:
        path = normalize_path(path)
        try:
            await self._delete_file(path=path)
        except OSError as e:
            raise UnableToDeleteFileError(path=path, reason=str(e)) from e

    @override
    async def delete_directory(self, path: str) -> None:
        path = normalize_path(path)
        try:
            await self._delete_directory(path=path)
        except OSError as e:
            raise UnableToDeleteDirectoryError(path=path, reason=str(e)) from e

    @override
    async def create_directory(self, path: str, *, config: OperationConfig | None = None) -> None:
        path = normalize_path(path)
        try:
            await self._create_directory(path=path, visibility=self._directory_visibility(config))
        except OSError as e:
            raise UnableToCreateDirectoryError(path=path, reason=str(e)) from e

    @override
    async def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        path = normalize_path(path)
        parsed_visibility = Visibility.parse(visibility)
        try:
            found = await self._set_file_visibility(path=path, visibility=parsed_visibility)
        except OSError as e:
            raise UnableToSetVisibilityError(path=path, reason=str(e)) from e

        if not found:
            raise MissingFileError(operation="set_visibility", path=path)

    async def _require_file_attributes(self, *, path: str, metadata_type: str) -> FileAttributes:
        try:
            attributes = await self._get_file_attributes(path=path)
        except OSError as e:
            raise UnableToRetrieveMetadataError(path=path, metadata_type=metadata_type, reason=str(e)) from e

        if attributes is None:
            raise MissingFileError(operation=metadata_type, path=path)

        return attributes

    @override
    async def visibility(self, path: str) -> FileAttributes:
        path = normalize_path(path)
        attributes = await self._require_file_attributes(path=path, metadata_type="visibility")

        if attributes.visibility is None:
            raise UnableToRetrieveMetadataError(path=path, metadata_type="visibility")

        return FileAttributes(path=path, visibility=attributes.visibility)

    @override
    async def mime_type(self, path: str) -> FileAttributes:
        path = normalize_path(path)
        attributes = await self._require_file_attributes(path=path, metadata_type="mime_type")

        return FileAttributes(path=path, mime_type=attributes.mime_type or detect_mime_type(path))

    @override
    async def last_modified(self, path: str) -> FileAttributes:
        path = normalize_path(path)
        attributes = await self._require_file_attributes(path=path, metadata_type="last_modified")

        if attributes.last_modified is None:
            raise UnableToRetrieveMetadataError(path=path, metadata_type="last_modified")

        return FileAttributes(path=path, last_modified=attributes.last_modified)

    @override
    async def file_size(self, path: str) -> FileAttributes:
        path = normalize_path(path)
        attributes = await self._require_file_attributes(path=path, metadata_type="file_size")

        if attributes.file_size is None:
            raise UnableToRetrieveMetadataError(path=path, metadata_type="file_size")

        return FileAttributes(path=path, file_size=attributes.file_size)

    @override
    async def list_contents(self, path: str, *, deep: bool = False) -> AsyncIterator[StorageAttributes]:
        path = normalize_path(path)
        try:
            async for entry in self._list_contents(path=path, deep=deep):
                yield entry
        except OSError as e:
            raise UnableToListContentsError(path=path, reason=str(e)) from e

    @override
    async def move(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        source = normalize_path(source)
        destination = normalize_path(destination)

        try:
            if not await self._file_exists(path=source):
                raise MissingFileError(operation="move", path=source)

            if source == destination:
                return

            await self._move_file(source=source, destination=destination, directory_visibility=self._directory_visibility(config))
        except OSError as e:
            raise UnableToMoveFileError(source=source, destination=destination, reason=str(e)) from e

    @override
    async def copy(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        source = normalize_path(source)
        destination = normalize_path(destination)

        try:
            if not await self._file_exists(path=source):
                raise MissingFileError(operation="copy", path=source)

            if source == destination:
                return

            await self._copy_file(
                source=source,
                destination=destination,
                visibility=self._copy_visibility(config),
                directory_visibility=self._directory_visibility(config),
            )
        except OSError as e:
            raise UnableToCopyFileError(source=source, destination=destination, reason=str(e)) from e
