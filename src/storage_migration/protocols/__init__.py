from storage_migration.protocols.filesystem import AsyncFilesystem

__all__ = ["AsyncFilesystem"]
