from collections.abc import AsyncIterator

from typing_extensions import override

from storage_migration.protocols.filesystem import AsyncFilesystem
from storage_migration.streams import ReadStream
from storage_migration.types import FileAttributes, OperationConfig, StorageAttributes, Visibility


class BaseWrapper(AsyncFilesystem):
    """A base wrapper for filesystem implementations that passes through to the underlying filesystem."""

    filesystem: AsyncFilesystem

    @override
    async def file_exists(self, path: str) -> bool:
        return await self.filesystem.file_exists(path)

    @override
    async def directory_exists(self, path: str) -> bool:
        return await self.filesystem.directory_exists(path)

    @override
    async def write(self, path: str, contents: bytes, *, config: OperationConfig | None = None) -> None:
        return await self.filesystem.write(path, contents, config=config)

    @override
    async def write_stream(self, path: str, contents: ReadStream, *, config: OperationConfig | None = None) -> None:
        return await self.filesystem.write_stream(path, contents, config=config)

    @override
    async def read(self, path: str) -> bytes:
        return await self.filesystem.read(path)

    @override
    async def read_stream(self, path: str) -> ReadStream:
        return await self.filesystem.read_stream(path)

    @override
    async def delete(self, path: str) -> None:
        return await self.filesystem.delete(path)

    @override
    async def delete_directory(self, path: str) -> None:
        return await self.filesystem.delete_directory(path)

    @override
    async def create_directory(self, path: str, *, config: OperationConfig | None = None) -> None:
        return await self.filesystem.create_directory(path, config=config)

    @override
    async def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        return await self.filesystem.set_visibility(path, visibility)

    @override
    async def visibility(self, path: str) -> FileAttributes:
        return await self.filesystem.visibility(path)

    @override
    async def mime_type(self, path: str) -> FileAttributes:
        return await self.filesystem.mime_type(path)

    @override
    async def last_modified(self, path: str) -> FileAttributes:
        return await self.filesystem.last_modified(path)

    @override
    async def file_size(self, path: str) -> FileAttributes:
        return await self.filesystem.file_size(path)

    @override
    async def list_contents(self, path: str, *, deep: bool = False) -> AsyncIterator[StorageAttributes]:
        async for entry in self.filesystem.list_contents(path, deep=deep):
            yield entry

    @override
    async def move(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        return await self.filesystem.move(source, destination, config=config)

    @override
    async def copy(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        return await self.filesystem.copy(source, destination, config=config)
