from storage_migration.filesystems.memory.filesystem import MemoryFilesystem

__all__ = ["MemoryFilesystem"]
