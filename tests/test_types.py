from dataclasses import FrozenInstanceError

import pytest

from storage_migration.errors import InvalidVisibilityError
from storage_migration.types import DirectoryAttributes, FileAttributes, OperationConfig, Visibility


def test_visibility_parse():
    assert Visibility.parse("public") is Visibility.PUBLIC
    assert Visibility.parse(Visibility.PRIVATE) is Visibility.PRIVATE


def test_visibility_parse_invalid():
    with pytest.raises(InvalidVisibilityError):
        Visibility.parse("hidden")


def test_visibility_is_a_string():
    assert Visibility.PUBLIC == "public"


def test_file_attributes():
    attributes = FileAttributes(path="a.txt", file_size=3)

    assert attributes.is_file is True
    assert attributes.is_dir is False
    assert attributes.visibility is None
    assert attributes.extra_metadata == {}


def test_directory_attributes():
    attributes = DirectoryAttributes(path="dir")

    assert attributes.is_file is False
    assert attributes.is_dir is True


def test_attributes_are_frozen():
    attributes = FileAttributes(path="a.txt")

    with pytest.raises(FrozenInstanceError):
        attributes.path = "b.txt"  # type: ignore[misc]


def test_operation_config():
    config = OperationConfig(visibility=Visibility.PRIVATE, options={"cache_control": "no-cache"})

    assert config.get("cache_control") == "no-cache"
    assert config.get("missing") is None
    assert config.get("missing", "default") == "default"
