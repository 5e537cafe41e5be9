import mimetypes

from storage_migration.errors import UnableToRetrieveMetadataError


def guess_mime_type(path: str) -> str | None:
    mime_type, _ = mimetypes.guess_type(path, strict=False)
    return mime_type


def detect_mime_type(path: str) -> str:
    """Detect the MIME type of a file from its name, raising if it cannot be determined."""
    if mime_type := guess_mime_type(path):
        return mime_type

    raise UnableToRetrieveMetadataError(path=path, metadata_type="mime_type", reason="unknown file extension")
