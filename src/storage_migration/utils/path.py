from storage_migration.errors import InvalidPathError

PATH_SEPARATOR = "/"


def normalize_path(path: str) -> str:
    """Normalize a slash-separated path relative to a filesystem root.

    Backslashes are treated as separators, empty and `.` segments are dropped and `..`
    segments are resolved. A path that would escape the root raises InvalidPathError.
    The root itself normalizes to the empty string.
    """
    if "\0" in path:
        raise InvalidPathError(path=path, reason="contains a null byte")

    segments: list[str] = []

    for segment in path.replace("\\", PATH_SEPARATOR).split(PATH_SEPARATOR):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not segments:
                raise InvalidPathError(path=path, reason="escapes the filesystem root")
            segments.pop()
            continue
        segments.append(segment)

    return PATH_SEPARATOR.join(segments)


def parent_path(path: str) -> str:
    """Return the parent of a normalized path, or the empty string for top-level entries."""
    parent, _, _ = path.rpartition(PATH_SEPARATOR)
    return parent


def is_descendant(path: str, ancestor: str) -> bool:
    """Check if a normalized path lies strictly below a normalized ancestor."""
    if not ancestor:
        return bool(path)
    return path.startswith(ancestor + PATH_SEPARATOR)
