from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from storage_migration.errors import InvalidVisibilityError


class Visibility(str, Enum):
    """Visibility of a file or directory, mapped by each filesystem onto its own permission model."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: "Visibility | str") -> "Visibility":
        if isinstance(value, Visibility):
            return value

        try:
            return cls(value)
        except ValueError as e:
            raise InvalidVisibilityError(visibility=value) from e


@dataclass(frozen=True, kw_only=True)
class FileAttributes:
    """Attributes of a file as reported by the filesystem that holds it.

    Only `path` is always present. Filesystems fill in the attributes they were asked for
    (or cheaply know) and leave the rest as None.
    """

    path: str

    file_size: int | None = field(default=None)
    visibility: Visibility | None = field(default=None)
    last_modified: datetime | None = field(default=None)
    mime_type: str | None = field(default=None)

    extra_metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True, kw_only=True)
class DirectoryAttributes:
    """Attributes of a directory as reported by the filesystem that holds it."""

    path: str

    visibility: Visibility | None = field(default=None)
    last_modified: datetime | None = field(default=None)

    extra_metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_dir(self) -> bool:
        return True


StorageAttributes = FileAttributes | DirectoryAttributes
"""A single entry produced by `list_contents`."""


@dataclass(frozen=True, kw_only=True)
class OperationConfig:
    """Per-call options for write-like operations.

    `visibility` applies to written files, `directory_visibility` to directories created along
    the way. Anything backend-specific goes into `options`.
    """

    visibility: Visibility | None = field(default=None)
    directory_visibility: Visibility | None = field(default=None)

    options: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)
