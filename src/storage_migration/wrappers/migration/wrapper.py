import logging
from collections.abc import AsyncIterator

from typing_extensions import override

from storage_migration.errors import MigrationCleanupError, MissingFileError
from storage_migration.protocols.filesystem import AsyncFilesystem
from storage_migration.streams import ReadStream
from storage_migration.types import FileAttributes, OperationConfig, StorageAttributes, Visibility
from storage_migration.wrappers.base import BaseWrapper

logger = logging.getLogger(__name__)


def _is_root(path: str) -> bool:
    return not path.strip("/")


class MigrationWrapper(BaseWrapper):
    """Migrates files from an old filesystem to a new one the first time they are accessed.

    Every operation on a single file first moves the file from the old filesystem to the new
    one (if it is still in the old one) and then runs against the new filesystem. Listings
    merge both filesystems, preferring the old entry when a path is in both. New directories
    are only ever created in the new filesystem. `directory_exists` never migrates the root
    directory and only asks the new filesystem about it.

    The wrapper keeps no state besides the two filesystems and does no locking. Two callers
    migrating the same file at once both copy it, and the last write wins. If the process stops
    after copying a file but before removing it from the old filesystem, the next access to
    the file finishes the job.

    Example:
        filesystem = MigrationWrapper(
            old_filesystem=LocalFilesystem(root="/srv/uploads"),
            new_filesystem=LocalFilesystem(root="/mnt/volume/uploads"),
        )

        # Moves report.pdf to the new filesystem, then reads it from there
        contents = await filesystem.read("reports/report.pdf")
    """

    old_filesystem: AsyncFilesystem
    new_filesystem: AsyncFilesystem

    def __init__(self, *, old_filesystem: AsyncFilesystem, new_filesystem: AsyncFilesystem) -> None:
        """Initialize the migration wrapper.

        Args:
            old_filesystem: The filesystem being phased out. Files are removed from it as they are migrated.
            new_filesystem: The filesystem being phased in. All reads and writes are served from it.
        """
        self.old_filesystem = old_filesystem
        self.new_filesystem = new_filesystem

        self.filesystem = new_filesystem

        super().__init__()

    async def _remove_from_old(self, path: str) -> None:
        try:
            await self.old_filesystem.delete(path)
        except Exception as e:
            logger.error(
                "Failed to remove a migrated file from the old filesystem",
                extra={"path": path, "error": str(e)},
                exc_info=True,
            )
            raise MigrationCleanupError(path=path) from e

    async def ensure_migrated(self, path: str) -> None:
        """Move a file from the old filesystem to the new one if it is still in the old one.

        The file is removed from the old filesystem only after it has been written to the new
        one. If it is already in both (an earlier migration stopped before the removal), only
        the removal is done.

        Args:
            path: The path of the file.

        Raises:
            MigrationCleanupError: If the file reached the new filesystem but could not be removed from the old one.
        """
        if not await self.old_filesystem.file_exists(path):
            return

        if await self.new_filesystem.file_exists(path):
            logger.info("Removing a file from the old filesystem that was already migrated", extra={"path": path})
            await self._remove_from_old(path)
            return

        logger.debug("Migrating file to the new filesystem", extra={"path": path})

        try:
            stream: ReadStream = await self.old_filesystem.read_stream(path)
        except MissingFileError:
            # Another caller finished migrating the file since the existence check
            if await self.new_filesystem.file_exists(path):
                return
            raise

        try:
            await self.new_filesystem.write_stream(path, stream)
        finally:
            await stream.aclose()

        await self._remove_from_old(path)

        logger.debug("Migrated file to the new filesystem", extra={"path": path})

    @override
    async def file_exists(self, path: str) -> bool:
        await self.ensure_migrated(path)
        return await self.new_filesystem.file_exists(path)

    @override
    async def directory_exists(self, path: str) -> bool:
        # The root exists in every filesystem and is never migrated as a whole
        if _is_root(path) or not await self.old_filesystem.directory_exists(path):
            return await self.new_filesystem.directory_exists(path)

        if not await self.new_filesystem.directory_exists(path):
            await self.new_filesystem.create_directory(path)

        await self.old_filesystem.delete_directory(path)

        logger.debug("Migrated directory to the new filesystem", extra={"path": path})

        return True

    @override
    async def write(self, path: str, contents: bytes, *, config: OperationConfig | None = None) -> None:
        await self.ensure_migrated(path)
        await self.new_filesystem.write(path, contents, config=config)

    @override
    async def write_stream(self, path: str, contents: ReadStream, *, config: OperationConfig | None = None) -> None:
        try:
            await self.ensure_migrated(path)
        except BaseException:
            # write_stream always closes the stream it is given
            await contents.aclose()
            raise

        await self.new_filesystem.write_stream(path, contents, config=config)

    @override
    async def read(self, path: str) -> bytes:
        await self.ensure_migrated(path)
        return await self.new_filesystem.read(path)

    @override
    async def read_stream(self, path: str) -> ReadStream:
        await self.ensure_migrated(path)
        return await self.new_filesystem.read_stream(path)

    @override
    async def delete(self, path: str) -> None:
        if await self.old_filesystem.file_exists(path):
            await self.old_filesystem.delete(path)

        await self.new_filesystem.delete(path)

    @override
    async def delete_directory(self, path: str) -> None:
        if await self.old_filesystem.directory_exists(path):
            await self.old_filesystem.delete_directory(path)

        await self.new_filesystem.delete_directory(path)

    @override
    async def create_directory(self, path: str, *, config: OperationConfig | None = None) -> None:
        await self.new_filesystem.create_directory(path, config=config)

    @override
    async def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        await self.ensure_migrated(path)
        await self.new_filesystem.set_visibility(path, visibility)

    @override
    async def visibility(self, path: str) -> FileAttributes:
        await self.ensure_migrated(path)
        return await self.new_filesystem.visibility(path)

    @override
    async def mime_type(self, path: str) -> FileAttributes:
        await self.ensure_migrated(path)
        return await self.new_filesystem.mime_type(path)

    @override
    async def last_modified(self, path: str) -> FileAttributes:
        await self.ensure_migrated(path)
        return await self.new_filesystem.last_modified(path)

    @override
    async def file_size(self, path: str) -> FileAttributes:
        await self.ensure_migrated(path)
        return await self.new_filesystem.file_size(path)

    @override
    async def list_contents(self, path: str, *, deep: bool = False) -> AsyncIterator[StorageAttributes]:
        seen_paths: set[str] = set()

        async for entry in self.old_filesystem.list_contents(path, deep=deep):
            seen_paths.add(entry.path)
            yield entry

        async for entry in self.new_filesystem.list_contents(path, deep=deep):
            if entry.path not in seen_paths:
                yield entry

    @override
    async def move(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        await self.ensure_migrated(source)
        await self.ensure_migrated(destination)
        await self.new_filesystem.move(source, destination, config=config)

    @override
    async def copy(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        await self.ensure_migrated(source)
        await self.ensure_migrated(destination)
        await self.new_filesystem.copy(source, destination, config=config)
