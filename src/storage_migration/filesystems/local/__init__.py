from storage_migration.filesystems.local.filesystem import LocalFilesystem

__all__ = ["LocalFilesystem"]
