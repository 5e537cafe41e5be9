import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Literal, TypeVar

from typing_extensions import override

from storage_migration.protocols.filesystem import AsyncFilesystem
from storage_migration.streams import ReadStream
from storage_migration.types import FileAttributes, OperationConfig, StorageAttributes, Visibility
from storage_migration.wrappers.base import BaseWrapper

logger = logging.getLogger(__name__)

T = TypeVar("T")

LogStatus = Literal["start", "finish", "error"]


def _visibility_value(visibility: Visibility | str | None) -> str | None:
    if isinstance(visibility, Visibility):
        return visibility.value
    return visibility


class LoggingWrapper(BaseWrapper):
    """Wrapper that logs the start and finish of every filesystem operation.

    Failed operations are logged at ERROR level with the name of the exception and the
    exception is re-raised unchanged.
    """

    def __init__(self, *, filesystem: AsyncFilesystem, log_level: int = logging.DEBUG, structured_logs: bool = False) -> None:
        """Initialize the logging wrapper.

        Args:
            filesystem: The filesystem to wrap.
            log_level: The level to log start and finish records at.
            structured_logs: If True, log records are JSON documents instead of plain text.
        """
        self.filesystem = filesystem
        self.log_level: int = log_level
        self.structured_logs: bool = structured_logs

        super().__init__()

    def _format_message(self, *, status: LogStatus, action: str, targets: dict[str, str], extra: dict[str, Any] | None) -> str:
        if self.structured_logs:
            data: dict[str, Any] = {"status": status, "action": action, **targets}
            if extra:
                data["extra"] = extra
            return json.dumps(data)

        targets_str = " ".join(f"{name}='{value}'" for name, value in targets.items())
        message = f"{status.capitalize()} {action} {targets_str}"
        if extra:
            message += f" ({extra})"
        return message

    def _log(
        self, *, status: LogStatus, action: str, targets: dict[str, str], extra: dict[str, Any] | None = None, level: int | None = None
    ) -> None:
        logger.log(
            level if level is not None else self.log_level,
            self._format_message(status=status, action=action, targets=targets, extra=extra),
        )

    async def _run(
        self,
        *,
        action: str,
        targets: dict[str, str],
        operation: Awaitable[T],
        start_extra: dict[str, Any] | None = None,
        finish_extra: Callable[[T], dict[str, Any]] | None = None,
    ) -> T:
        self._log(status="start", action=action, targets=targets, extra=start_extra)

        try:
            result = await operation
        except Exception as e:
            self._log(status="error", action=action, targets=targets, extra={"error": type(e).__name__}, level=logging.ERROR)
            raise

        self._log(status="finish", action=action, targets=targets, extra=finish_extra(result) if finish_extra else None)

        return result

    @override
    async def file_exists(self, path: str) -> bool:
        return await self._run(
            action="FILE_EXISTS",
            targets={"path": path},
            operation=self.filesystem.file_exists(path),
            finish_extra=lambda exists: {"exists": exists},
        )

    @override
    async def directory_exists(self, path: str) -> bool:
        return await self._run(
            action="DIRECTORY_EXISTS",
            targets={"path": path},
            operation=self.filesystem.directory_exists(path),
            finish_extra=lambda exists: {"exists": exists},
        )

    @override
    async def write(self, path: str, contents: bytes, *, config: OperationConfig | None = None) -> None:
        return await self._run(
            action="WRITE",
            targets={"path": path},
            operation=self.filesystem.write(path, contents, config=config),
            start_extra={"size": len(contents)},
        )

    @override
    async def write_stream(self, path: str, contents: ReadStream, *, config: OperationConfig | None = None) -> None:
        return await self._run(
            action="WRITE_STREAM",
            targets={"path": path},
            operation=self.filesystem.write_stream(path, contents, config=config),
        )

    @override
    async def read(self, path: str) -> bytes:
        return await self._run(
            action="READ",
            targets={"path": path},
            operation=self.filesystem.read(path),
            finish_extra=lambda contents: {"size": len(contents)},
        )

    @override
    async def read_stream(self, path: str) -> ReadStream:
        return await self._run(action="READ_STREAM", targets={"path": path}, operation=self.filesystem.read_stream(path))

    @override
    async def delete(self, path: str) -> None:
        return await self._run(action="DELETE", targets={"path": path}, operation=self.filesystem.delete(path))

    @override
    async def delete_directory(self, path: str) -> None:
        return await self._run(action="DELETE_DIRECTORY", targets={"path": path}, operation=self.filesystem.delete_directory(path))

    @override
    async def create_directory(self, path: str, *, config: OperationConfig | None = None) -> None:
        return await self._run(
            action="CREATE_DIRECTORY",
            targets={"path": path},
            operation=self.filesystem.create_directory(path, config=config),
        )

    @override
    async def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        return await self._run(
            action="SET_VISIBILITY",
            targets={"path": path},
            operation=self.filesystem.set_visibility(path, visibility),
            start_extra={"visibility": _visibility_value(visibility)},
        )

    @override
    async def visibility(self, path: str) -> FileAttributes:
        return await self._run(
            action="VISIBILITY",
            targets={"path": path},
            operation=self.filesystem.visibility(path),
            finish_extra=lambda attributes: {"visibility": _visibility_value(attributes.visibility)},
        )

    @override
    async def mime_type(self, path: str) -> FileAttributes:
        return await self._run(
            action="MIME_TYPE",
            targets={"path": path},
            operation=self.filesystem.mime_type(path),
            finish_extra=lambda attributes: {"mime_type": attributes.mime_type},
        )

    @override
    async def last_modified(self, path: str) -> FileAttributes:
        return await self._run(
            action="LAST_MODIFIED",
            targets={"path": path},
            operation=self.filesystem.last_modified(path),
            finish_extra=lambda attributes: {
                "last_modified": attributes.last_modified.isoformat() if attributes.last_modified else None
            },
        )

    @override
    async def file_size(self, path: str) -> FileAttributes:
        return await self._run(
            action="FILE_SIZE",
            targets={"path": path},
            operation=self.filesystem.file_size(path),
            finish_extra=lambda attributes: {"file_size": attributes.file_size},
        )

    @override
    async def list_contents(self, path: str, *, deep: bool = False) -> AsyncIterator[StorageAttributes]:
        targets = {"path": path}
        self._log(status="start", action="LIST_CONTENTS", targets=targets, extra={"deep": deep})

        count = 0
        try:
            async for entry in self.filesystem.list_contents(path, deep=deep):
                count += 1
                yield entry
        except Exception as e:
            self._log(status="error", action="LIST_CONTENTS", targets=targets, extra={"error": type(e).__name__}, level=logging.ERROR)
            raise

        self._log(status="finish", action="LIST_CONTENTS", targets=targets, extra={"entries": count})

    @override
    async def move(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        return await self._run(
            action="MOVE",
            targets={"source": source, "destination": destination},
            operation=self.filesystem.move(source, destination, config=config),
        )

    @override
    async def copy(self, source: str, destination: str, *, config: OperationConfig | None = None) -> None:
        return await self._run(
            action="COPY",
            targets={"source": source, "destination": destination},
            operation=self.filesystem.copy(source, destination, config=config),
        )
