from storage_migration.wrappers.logging.wrapper import LoggingWrapper

__all__ = ["LoggingWrapper"]
