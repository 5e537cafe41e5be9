ExtraInfoType = dict[str, str | int | float | bool | None]


class BaseStorageError(Exception):
    """Base exception for all storage migration errors."""

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        message_parts: list[str] = []

        if message:
            message_parts.append(message)

        if extra_info:
            extra_info_str = ";".join(f"{k}: {v}" for k, v in extra_info.items())
            if message:
                extra_info_str = "(" + extra_info_str + ")"

            message_parts.append(extra_info_str)

        self.extra_info: ExtraInfoType = extra_info or {}

        super().__init__(": ".join(message_parts))


class InvalidPathError(BaseStorageError):
    """Raised when a path cannot be used by a filesystem."""

    def __init__(self, path: str, reason: str | None = None):
        super().__init__(
            message="The path is not valid for this filesystem.",
            extra_info={"path": path, "reason": reason},
        )
        self.path: str = path


class InvalidVisibilityError(BaseStorageError):
    """Raised when a visibility value is not recognized."""

    def __init__(self, visibility: object):
        super().__init__(
            message="A visibility is invalid.",
            extra_info={"visibility": str(visibility)},
        )
