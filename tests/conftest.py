import logging

import pytest

from storage_migration.filesystems.memory import MemoryFilesystem

logging.basicConfig(level=logging.INFO)


@pytest.fixture
def memory_filesystem() -> MemoryFilesystem:
    return MemoryFilesystem()
