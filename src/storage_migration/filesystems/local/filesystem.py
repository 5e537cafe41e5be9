"""LocalFilesystem implementation using async filesystem operations."""

import secrets
import shutil
import stat
from collections.abc import AsyncGenerator, Mapping
from datetime import datetime, timezone
from pathlib import Path

from aiofile import async_open as aopen
from anyio import Path as AsyncPath
from anyio import to_thread
from anyio.streams.file import FileReadStream, FileWriteStream
from typing_extensions import override

from storage_migration.filesystems.base import BaseFilesystem
from storage_migration.streams import ReadStream
from storage_migration.types import DirectoryAttributes, FileAttributes, StorageAttributes, Visibility
from storage_migration.utils.mime import guess_mime_type
from storage_migration.utils.path import parent_path

PARTIAL_FILE_PREFIX = "."
PARTIAL_FILE_SUFFIX = ".partial"

DEFAULT_FILE_PERMISSIONS: Mapping[Visibility, int] = {Visibility.PUBLIC: 0o644, Visibility.PRIVATE: 0o600}
DEFAULT_DIRECTORY_PERMISSIONS: Mapping[Visibility, int] = {Visibility.PUBLIC: 0o755, Visibility.PRIVATE: 0o700}

OTHERS_READABLE = stat.S_IROTH


def is_partial_file_name(name: str) -> bool:
    return name.startswith(PARTIAL_FILE_PREFIX) and name.endswith(PARTIAL_FILE_SUFFIX)


def _mode_to_visibility(mode: int, permissions: Mapping[Visibility, int]) -> Visibility:
    file_permissions = stat.S_IMODE(mode)

    for visibility, visibility_permissions in permissions.items():
        if visibility_permissions == file_permissions:
            return visibility

    return Visibility.PUBLIC if file_permissions & OTHERS_READABLE else Visibility.PRIVATE


def _mtime_to_datetime(mtime: float) -> datetime:
    return datetime.fromtimestamp(mtime, tz=timezone.utc)


class LocalFilesystem(BaseFilesystem):
    """A filesystem backed by a directory on the local disk.

    Paths map directly onto files and directories below the root directory. Visibility is
    stored as POSIX permission bits.

    Writes go to a hidden sibling file (`.{name}.{random}.partial`) that atomically replaces
    the target once complete, so readers never observe a partially written file. Partial
    files are not listed.
    """

    _root: AsyncPath

    _file_permissions: Mapping[Visibility, int]
    _directory_permissions: Mapping[Visibility, int]

    def __init__(
        self,
        *,
        root: Path | str,
        default_visibility: Visibility | str = Visibility.PUBLIC,
        file_permissions: Mapping[Visibility, int] | None = None,
        directory_permissions: Mapping[Visibility, int] | None = None,
    ) -> None:
        """Initialize the local filesystem.

        Args:
            root: The directory that holds the files. Created if it does not exist.
            default_visibility: The visibility of files and directories written without an explicit visibility.
            file_permissions: The permission bits used for each file visibility.
            directory_permissions: The permission bits used for each directory visibility.
        """
        root = Path(root).resolve()
        root.mkdir(parents=True, exist_ok=True)

        self._root = AsyncPath(root)

        self._file_permissions = {**DEFAULT_FILE_PERMISSIONS, **(file_permissions or {})}
        self._directory_permissions = {**DEFAULT_DIRECTORY_PERMISSIONS, **(directory_permissions or {})}

        super().__init__(default_visibility=default_visibility)

    @property
    def root(self) -> Path:
        return Path(self._root)

    def _location(self, path: str) -> AsyncPath:
        if not path:
            return self._root
        return AsyncPath(self._root / path)

    def _partial_location(self, location: AsyncPath) -> AsyncPath:
        return location.with_name(f"{PARTIAL_FILE_PREFIX}{location.name}.{secrets.token_hex(8)}{PARTIAL_FILE_SUFFIX}")

    def _relative_path(self, location: AsyncPath) -> str:
        return location.relative_to(self._root).as_posix()

    async def _ensure_parent_directory(self, *, path: str, visibility: Visibility) -> None:
        if parent := parent_path(path):
            await self._create_directory(path=parent, visibility=visibility)

    async def _commit_partial_file(self, *, partial: AsyncPath, location: AsyncPath, visibility: Visibility) -> None:
        await partial.chmod(self._file_permissions[visibility])
        await partial.replace(location)

    @override
    async def _file_exists(self, *, path: str) -> bool:
        return await self._location(path).is_file()

    @override
    async def _directory_exists(self, *, path: str) -> bool:
        return await self._location(path).is_dir()

    @override
    async def _write_file(self, *, path: str, contents: bytes, visibility: Visibility, directory_visibility: Visibility) -> None:
        await self._ensure_parent_directory(path=path, visibility=directory_visibility)

        location = self._location(path)
        partial = self._partial_location(location)

        try:
            async with aopen(file_specifier=Path(partial), mode="wb") as f:
                await f.write(contents)
            await self._commit_partial_file(partial=partial, location=location, visibility=visibility)
        except Exception:
            await partial.unlink(missing_ok=True)
            raise

    @override
    async def _write_file_stream(
        self, *, path: str, contents: ReadStream, visibility: Visibility, directory_visibility: Visibility
    ) -> None:
        await self._ensure_parent_directory(path=path, visibility=directory_visibility)

        location = self._location(path)
        partial = self._partial_location(location)

        try:
            async with await FileWriteStream.from_path(Path(partial)) as output:
                async for chunk in contents:
                    await output.send(chunk)
            await self._commit_partial_file(partial=partial, location=location, visibility=visibility)
        except Exception:
            await partial.unlink(missing_ok=True)
            raise

    @override
    async def _read_file(self, *, path: str) -> bytes | None:
        location = self._location(path)

        if not await location.is_file():
            return None

        try:
            async with aopen(file_specifier=Path(location), mode="rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None

    @override
    async def _open_file_stream(self, *, path: str) -> ReadStream | None:
        location = self._location(path)

        if not await location.is_file():
            return None

        try:
            return await FileReadStream.from_path(Path(location))
        except FileNotFoundError:
            return None

    @override
    async def _delete_file(self, *, path: str) -> None:
        await self._location(path).unlink(missing_ok=True)

    @override
    async def _delete_directory(self, *, path: str) -> None:
        location = self._location(path)

        if not await location.is_dir():
            return

        if path:
            await to_thread.run_sync(shutil.rmtree, Path(location))
            return

        # Never remove the root itself, only what it holds
        async for child in location.iterdir():
            if await child.is_dir() and not await child.is_symlink():
                await to_thread.run_sync(shutil.rmtree, Path(child))
            else:
                await child.unlink(missing_ok=True)

    @override
    async def _create_directory(self, *, path: str, visibility: Visibility) -> None:
        missing: list[AsyncPath] = []

        location = self._location(path)
        while location != self._root and not await location.exists():
            missing.append(location)
            location = location.parent

        for directory in reversed(missing):
            await directory.mkdir(exist_ok=True)
            await directory.chmod(self._directory_permissions[visibility])

    @override
    async def _set_file_visibility(self, *, path: str, visibility: Visibility) -> bool:
        location = self._location(path)

        if not await location.is_file():
            return False

        await location.chmod(self._file_permissions[visibility])
        return True

    @override
    async def _get_file_attributes(self, *, path: str) -> FileAttributes | None:
        location = self._location(path)

        if not await location.is_file():
            return None

        try:
            file_stat = await location.stat()
        except FileNotFoundError:
            return None

        return FileAttributes(
            path=path,
            file_size=file_stat.st_size,
            visibility=_mode_to_visibility(file_stat.st_mode, self._file_permissions),
            last_modified=_mtime_to_datetime(file_stat.st_mtime),
            mime_type=guess_mime_type(path),
        )

    async def _gen_entries(self, *, location: AsyncPath, deep: bool) -> AsyncGenerator[StorageAttributes]:
        children: list[AsyncPath] = sorted([child async for child in location.iterdir()], key=lambda child: child.name)

        for child in children:
            if is_partial_file_name(child.name):
                continue

            try:
                child_stat = await child.stat()
            except FileNotFoundError:
                # Removed while listing
                continue

            relative_path = self._relative_path(child)

            if stat.S_ISDIR(child_stat.st_mode):
                yield DirectoryAttributes(
                    path=relative_path,
                    visibility=_mode_to_visibility(child_stat.st_mode, self._directory_permissions),
                    last_modified=_mtime_to_datetime(child_stat.st_mtime),
                )
                if deep:
                    async for entry in self._gen_entries(location=child, deep=deep):
                        yield entry
                continue

            yield FileAttributes(
                path=relative_path,
                file_size=child_stat.st_size,
                visibility=_mode_to_visibility(child_stat.st_mode, self._file_permissions),
                last_modified=_mtime_to_datetime(child_stat.st_mtime),
                mime_type=guess_mime_type(relative_path),
            )

    @override
    async def _list_contents(self, *, path: str, deep: bool) -> AsyncGenerator[StorageAttributes]:
        location = self._location(path)

        if not await location.is_dir():
            return

        async for entry in self._gen_entries(location=location, deep=deep):
            yield entry

    @override
    async def _move_file(self, *, source: str, destination: str, directory_visibility: Visibility) -> None:
        await self._ensure_parent_directory(path=destination, visibility=directory_visibility)
        await self._location(source).replace(self._location(destination))

    @override
    async def _copy_file(
        self, *, source: str, destination: str, visibility: Visibility | None, directory_visibility: Visibility
    ) -> None:
        await self._ensure_parent_directory(path=destination, visibility=directory_visibility)

        source_location = self._location(source)
        location = self._location(destination)
        partial = self._partial_location(location)

        if visibility is None:
            source_stat = await source_location.stat()
            visibility = _mode_to_visibility(source_stat.st_mode, self._file_permissions)

        try:
            await to_thread.run_sync(shutil.copyfile, Path(source_location), Path(partial))
            await self._commit_partial_file(partial=partial, location=location, visibility=visibility)
        except Exception:
            await partial.unlink(missing_ok=True)
            raise
