from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from typing_extensions import override

from storage_migration.filesystems.base import BaseFilesystem
from storage_migration.streams import BytesReadStream, ReadStream
from storage_migration.types import DirectoryAttributes, FileAttributes, StorageAttributes, Visibility
from storage_migration.utils.mime import guess_mime_type
from storage_migration.utils.path import PATH_SEPARATOR, is_descendant, normalize_path, parent_path

SEED_DATA_TYPE = Mapping[str, bytes]


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class MemoryFile:
    """A file held by the memory filesystem."""

    contents: bytes
    visibility: Visibility
    last_modified: datetime = field(default_factory=_now)

    def to_file_attributes(self, *, path: str) -> FileAttributes:
        return FileAttributes(
            path=path,
            file_size=len(self.contents),
            visibility=self.visibility,
            last_modified=self.last_modified,
            mime_type=guess_mime_type(path),
        )


@dataclass(frozen=True)
class MemoryDirectory:
    """A directory created explicitly in the memory filesystem."""

    visibility: Visibility
    last_modified: datetime = field(default_factory=_now)


class MemoryFilesystem(BaseFilesystem):
    """An in-memory filesystem.

    Files live in a dict keyed by normalized path. Directories exist either because they were
    created explicitly or because a file lives below them; the root always exists.
    """

    _files: dict[str, MemoryFile]
    _directories: dict[str, MemoryDirectory]

    def __init__(self, *, seed: SEED_DATA_TYPE | None = None, default_visibility: Visibility | str = Visibility.PUBLIC) -> None:
        """Initialize the memory filesystem.

        Args:
            seed: Optional files to pre-populate the filesystem with. Format: {path: contents}.
            default_visibility: The visibility of files and directories written without an explicit visibility.
        """
        super().__init__(default_visibility=default_visibility)

        self._files = {}
        self._directories = {}

        for path, contents in (seed or {}).items():
            self._files[normalize_path(path)] = MemoryFile(contents=bytes(contents), visibility=self._default_visibility)

    def _is_directory(self, path: str) -> bool:
        if not path or path in self._directories:
            return True
        return any(is_descendant(file_path, path) for file_path in self._files)

    def _directory_entry(self, path: str) -> DirectoryAttributes:
        if directory := self._directories.get(path):
            return DirectoryAttributes(path=path, visibility=directory.visibility, last_modified=directory.last_modified)
        return DirectoryAttributes(path=path)

    @override
    async def _file_exists(self, *, path: str) -> bool:
        return path in self._files

    @override
    async def _directory_exists(self, *, path: str) -> bool:
        return self._is_directory(path)

    @override
    async def _write_file(self, *, path: str, contents: bytes, visibility: Visibility, directory_visibility: Visibility) -> None:
        if parent := parent_path(path):
            await self._create_directory(path=parent, visibility=directory_visibility)

        self._files[path] = MemoryFile(contents=contents, visibility=visibility)

    @override
    async def _read_file(self, *, path: str) -> bytes | None:
        if file := self._files.get(path):
            return file.contents
        return None

    @override
    async def _open_file_stream(self, *, path: str) -> ReadStream | None:
        if file := self._files.get(path):
            return BytesReadStream(file.contents)
        return None

    @override
    async def _delete_file(self, *, path: str) -> None:
        _ = self._files.pop(path, None)

    @override
    async def _delete_directory(self, *, path: str) -> None:
        for file_path in [file_path for file_path in self._files if is_descendant(file_path, path)]:
            del self._files[file_path]

        for directory_path in [directory_path for directory_path in self._directories if is_descendant(directory_path, path)]:
            del self._directories[directory_path]

        _ = self._directories.pop(path, None)

    @override
    async def _create_directory(self, *, path: str, visibility: Visibility) -> None:
        while path and path not in self._directories:
            self._directories[path] = MemoryDirectory(visibility=visibility)
            path = parent_path(path)

    @override
    async def _set_file_visibility(self, *, path: str, visibility: Visibility) -> bool:
        if (file := self._files.get(path)) is None:
            return False

        self._files[path] = replace(file, visibility=visibility)
        return True

    @override
    async def _get_file_attributes(self, *, path: str) -> FileAttributes | None:
        if file := self._files.get(path):
            return file.to_file_attributes(path=path)
        return None

    @override
    async def _list_contents(self, *, path: str, deep: bool) -> AsyncIterator[StorageAttributes]:
        entries: dict[str, StorageAttributes] = {}

        for directory_path in self._directories:
            if is_descendant(directory_path, path):
                entries[directory_path] = self._directory_entry(directory_path)

        for file_path, file in self._files.items():
            if not is_descendant(file_path, path):
                continue

            entries[file_path] = file.to_file_attributes(path=file_path)

            # Directories implied by the file but never created explicitly
            ancestor = parent_path(file_path)
            while ancestor != path and ancestor not in entries:
                entries[ancestor] = self._directory_entry(ancestor)
                ancestor = parent_path(ancestor)

        depth = path.count(PATH_SEPARATOR) + 1 if path else 0

        for entry_path in sorted(entries):
            if deep or entry_path.count(PATH_SEPARATOR) == depth:
                yield entries[entry_path]

    @override
    async def _move_file(self, *, source: str, destination: str, directory_visibility: Visibility) -> None:
        file = self._files.pop(source)

        if parent := parent_path(destination):
            await self._create_directory(path=parent, visibility=directory_visibility)

        self._files[destination] = replace(file, last_modified=_now())

    @override
    async def _copy_file(
        self, *, source: str, destination: str, visibility: Visibility | None, directory_visibility: Visibility
    ) -> None:
        file = self._files[source]

        if parent := parent_path(destination):
            await self._create_directory(path=parent, visibility=directory_visibility)

        self._files[destination] = MemoryFile(contents=file.contents, visibility=visibility or file.visibility)
