from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from datetime import timezone

import pytest
from dirty_equals import IsNow

from storage_migration.errors import InvalidPathError, InvalidVisibilityError, MissingFileError, UnableToRetrieveMetadataError
from storage_migration.protocols.filesystem import AsyncFilesystem
from storage_migration.streams import BytesReadStream, read_all
from storage_migration.types import DirectoryAttributes, FileAttributes, OperationConfig, StorageAttributes, Visibility


async def list_paths(filesystem: AsyncFilesystem, path: str, *, deep: bool = False) -> list[str]:
    return sorted([entry.path async for entry in filesystem.list_contents(path, deep=deep)])


async def list_entries(filesystem: AsyncFilesystem, path: str, *, deep: bool = False) -> dict[str, StorageAttributes]:
    return {entry.path: entry async for entry in filesystem.list_contents(path, deep=deep)}


class BaseFilesystemTests(ABC):
    @pytest.fixture
    @abstractmethod
    async def filesystem(self) -> AsyncFilesystem | AsyncGenerator[AsyncFilesystem, None]: ...

    async def test_filesystem(self, filesystem: AsyncFilesystem):
        """Tests that the filesystem is a valid AsyncFilesystem."""
        assert isinstance(filesystem, AsyncFilesystem) is True

    async def test_empty_file_exists(self, filesystem: AsyncFilesystem):
        assert await filesystem.file_exists("test.txt") is False

    async def test_empty_directory_exists(self, filesystem: AsyncFilesystem):
        assert await filesystem.directory_exists("test") is False

    async def test_empty_read(self, filesystem: AsyncFilesystem):
        with pytest.raises(MissingFileError):
            await filesystem.read("test.txt")

    async def test_empty_read_stream(self, filesystem: AsyncFilesystem):
        with pytest.raises(MissingFileError):
            await filesystem.read_stream("test.txt")

    async def test_write_read(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        assert await filesystem.file_exists("test.txt") is True
        assert await filesystem.read("test.txt") == b"contents"

    async def test_write_empty_file(self, filesystem: AsyncFilesystem):
        await filesystem.write("empty.txt", b"")

        assert await filesystem.file_exists("empty.txt") is True
        assert await filesystem.read("empty.txt") == b""

    async def test_write_overwrites(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"first")
        await filesystem.write("test.txt", b"second")

        assert await filesystem.read("test.txt") == b"second"

    async def test_write_creates_parent_directories(self, filesystem: AsyncFilesystem):
        await filesystem.write("a/b/c.txt", b"contents")

        assert await filesystem.directory_exists("a/b") is True
        assert await filesystem.file_exists("a/b/c.txt") is True

    async def test_write_stream_read(self, filesystem: AsyncFilesystem):
        stream = BytesReadStream(b"streamed contents", chunk_size=4)

        await filesystem.write_stream("test.txt", stream)

        assert await filesystem.read("test.txt") == b"streamed contents"

    async def test_write_stream_closes_stream(self, filesystem: AsyncFilesystem):
        stream = BytesReadStream(b"contents")

        await filesystem.write_stream("test.txt", stream)

        assert stream.closed is True

    async def test_write_stream_invalid_path_closes_stream(self, filesystem: AsyncFilesystem):
        stream = BytesReadStream(b"contents")

        with pytest.raises(InvalidPathError):
            await filesystem.write_stream("../escape.txt", stream)

        assert stream.closed is True

    async def test_read_stream(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        stream = await filesystem.read_stream("test.txt")
        async with stream:
            assert await read_all(stream) == b"contents"

    async def test_delete(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")
        await filesystem.delete("test.txt")

        assert await filesystem.file_exists("test.txt") is False

    async def test_delete_missing_file(self, filesystem: AsyncFilesystem):
        """Tests that deleting a file that does not exist is not an error."""
        await filesystem.delete("missing.txt")

    async def test_create_directory(self, filesystem: AsyncFilesystem):
        await filesystem.create_directory("dir/sub")

        assert await filesystem.directory_exists("dir/sub") is True
        assert await filesystem.directory_exists("dir") is True
        assert await filesystem.file_exists("dir/sub") is False

    async def test_create_directory_twice(self, filesystem: AsyncFilesystem):
        await filesystem.create_directory("dir")
        await filesystem.create_directory("dir")

        assert await filesystem.directory_exists("dir") is True

    async def test_delete_directory(self, filesystem: AsyncFilesystem):
        await filesystem.write("dir/a.txt", b"a")
        await filesystem.write("dir/sub/b.txt", b"b")
        await filesystem.write("other/c.txt", b"c")

        await filesystem.delete_directory("dir")

        assert await filesystem.directory_exists("dir") is False
        assert await filesystem.file_exists("dir/a.txt") is False
        assert await filesystem.file_exists("dir/sub/b.txt") is False
        assert await filesystem.read("other/c.txt") == b"c"

    async def test_delete_missing_directory(self, filesystem: AsyncFilesystem):
        await filesystem.delete_directory("missing")

    async def test_default_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        assert await filesystem.visibility("test.txt") == FileAttributes(path="test.txt", visibility=Visibility.PUBLIC)

    async def test_set_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        await filesystem.set_visibility("test.txt", Visibility.PRIVATE)
        assert (await filesystem.visibility("test.txt")).visibility == Visibility.PRIVATE

        await filesystem.set_visibility("test.txt", "public")
        assert (await filesystem.visibility("test.txt")).visibility == Visibility.PUBLIC

    async def test_set_invalid_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        with pytest.raises(InvalidVisibilityError):
            await filesystem.set_visibility("test.txt", "world-writable")

    async def test_set_visibility_missing_file(self, filesystem: AsyncFilesystem):
        with pytest.raises(MissingFileError):
            await filesystem.set_visibility("missing.txt", Visibility.PRIVATE)

    async def test_write_with_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents", config=OperationConfig(visibility=Visibility.PRIVATE))

        assert (await filesystem.visibility("test.txt")).visibility == Visibility.PRIVATE

    async def test_mime_type(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        assert await filesystem.mime_type("test.txt") == FileAttributes(path="test.txt", mime_type="text/plain")

    async def test_unknown_mime_type(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.unknown-extension", b"contents")

        with pytest.raises(UnableToRetrieveMetadataError):
            await filesystem.mime_type("test.unknown-extension")

    async def test_last_modified(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        attributes = await filesystem.last_modified("test.txt")
        assert attributes.path == "test.txt"
        assert attributes.last_modified == IsNow(tz=timezone.utc, delta=60)

    async def test_file_size(self, filesystem: AsyncFilesystem):
        await filesystem.write("test.txt", b"contents")

        assert await filesystem.file_size("test.txt") == FileAttributes(path="test.txt", file_size=8)

    @pytest.mark.parametrize("operation", ["visibility", "mime_type", "last_modified", "file_size"])
    async def test_metadata_missing_file(self, filesystem: AsyncFilesystem, operation: str):
        with pytest.raises(MissingFileError):
            await getattr(filesystem, operation)("missing.txt")

    async def test_list_contents(self, filesystem: AsyncFilesystem):
        await filesystem.write("dir/a.txt", b"a")
        await filesystem.write("dir/b.txt", b"bb")
        await filesystem.write("dir/sub/c.txt", b"ccc")

        entries = await list_entries(filesystem, "dir")

        assert sorted(entries) == ["dir/a.txt", "dir/b.txt", "dir/sub"]
        assert isinstance(entries["dir/a.txt"], FileAttributes)
        assert isinstance(entries["dir/sub"], DirectoryAttributes)
        assert entries["dir/b.txt"].is_file is True
        assert entries["dir/sub"].is_dir is True

    async def test_list_contents_deep(self, filesystem: AsyncFilesystem):
        await filesystem.write("dir/a.txt", b"a")
        await filesystem.write("dir/sub/c.txt", b"ccc")
        await filesystem.write("other.txt", b"other")

        assert await list_paths(filesystem, "dir", deep=True) == ["dir/a.txt", "dir/sub", "dir/sub/c.txt"]
        assert await list_paths(filesystem, "", deep=True) == ["dir", "dir/a.txt", "dir/sub", "dir/sub/c.txt", "other.txt"]

    async def test_list_contents_file_sizes(self, filesystem: AsyncFilesystem):
        await filesystem.write("dir/a.txt", b"a")
        await filesystem.write("dir/b.txt", b"bb")

        entries = await list_entries(filesystem, "dir")

        assert entries["dir/a.txt"].file_size == 1  # type: ignore[union-attr]
        assert entries["dir/b.txt"].file_size == 2  # type: ignore[union-attr]

    async def test_list_contents_empty_directory(self, filesystem: AsyncFilesystem):
        await filesystem.create_directory("dir/empty")

        assert await list_paths(filesystem, "dir") == ["dir/empty"]
        assert await list_paths(filesystem, "dir/empty") == []

    async def test_list_contents_missing_directory(self, filesystem: AsyncFilesystem):
        assert await list_paths(filesystem, "missing") == []

    async def test_list_contents_restarts(self, filesystem: AsyncFilesystem):
        await filesystem.write("dir/a.txt", b"a")

        assert await list_paths(filesystem, "dir") == ["dir/a.txt"]
        assert await list_paths(filesystem, "dir") == ["dir/a.txt"]

    async def test_move(self, filesystem: AsyncFilesystem):
        await filesystem.write("source.txt", b"contents")

        await filesystem.move("source.txt", "nested/destination.txt")

        assert await filesystem.file_exists("source.txt") is False
        assert await filesystem.read("nested/destination.txt") == b"contents"

    async def test_move_overwrites(self, filesystem: AsyncFilesystem):
        await filesystem.write("source.txt", b"source")
        await filesystem.write("destination.txt", b"destination")

        await filesystem.move("source.txt", "destination.txt")

        assert await filesystem.read("destination.txt") == b"source"

    async def test_move_missing_file(self, filesystem: AsyncFilesystem):
        with pytest.raises(MissingFileError):
            await filesystem.move("missing.txt", "destination.txt")

    async def test_copy(self, filesystem: AsyncFilesystem):
        await filesystem.write("source.txt", b"contents")

        await filesystem.copy("source.txt", "nested/destination.txt")

        assert await filesystem.read("source.txt") == b"contents"
        assert await filesystem.read("nested/destination.txt") == b"contents"

    async def test_copy_keeps_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("source.txt", b"contents", config=OperationConfig(visibility=Visibility.PRIVATE))

        await filesystem.copy("source.txt", "destination.txt")

        assert (await filesystem.visibility("destination.txt")).visibility == Visibility.PRIVATE

    async def test_copy_without_retaining_visibility(self, filesystem: AsyncFilesystem):
        await filesystem.write("source.txt", b"contents", config=OperationConfig(visibility=Visibility.PRIVATE))

        await filesystem.copy("source.txt", "destination.txt", config=OperationConfig(options={"retain_visibility": False}))

        assert (await filesystem.visibility("destination.txt")).visibility == Visibility.PUBLIC
        assert (await filesystem.visibility("source.txt")).visibility == Visibility.PRIVATE

    async def test_copy_missing_file(self, filesystem: AsyncFilesystem):
        with pytest.raises(MissingFileError):
            await filesystem.copy("missing.txt", "destination.txt")

    async def test_path_outside_root(self, filesystem: AsyncFilesystem):
        with pytest.raises(InvalidPathError):
            await filesystem.write("../escape.txt", b"contents")
