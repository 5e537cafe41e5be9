from storage_migration.errors.base import BaseStorageError


class MigrationError(BaseStorageError):
    """Base exception for errors raised by the migration wrapper itself."""


class MigrationCleanupError(MigrationError):
    """Raised when a file reached the new filesystem but could not be removed from the old one.

    The file is served from the new filesystem at this point. The next operation on the path
    retries the removal, so the error only needs to be tracked, not repaired.
    """

    def __init__(self, path: str):
        super().__init__(
            message="A file was migrated but could not be removed from the old filesystem.",
            extra_info={"path": path},
        )
        self.path: str = path
