"""Migration wrapper for moving files between filesystems on first access.

This module provides a wrapper that sits in front of an old and a new filesystem and
moves each file from the old one to the new one the first time it is touched.
"""

from storage_migration.wrappers.migration.wrapper import MigrationWrapper

__all__ = ["MigrationWrapper"]
