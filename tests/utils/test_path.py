import pytest

from storage_migration.errors import InvalidPathError
from storage_migration.utils.path import is_descendant, normalize_path, parent_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("a.txt", "a.txt"),
        ("/a.txt", "a.txt"),
        ("dir/a.txt", "dir/a.txt"),
        ("dir//sub/./a.txt", "dir/sub/a.txt"),
        ("dir\\sub\\a.txt", "dir/sub/a.txt"),
        ("dir/sub/../a.txt", "dir/a.txt"),
        ("dir/", "dir"),
        ("", ""),
        ("/", ""),
        (".", ""),
    ],
)
def test_normalize_path(path: str, expected: str):
    assert normalize_path(path) == expected


@pytest.mark.parametrize("path", ["../a.txt", "dir/../../a.txt", "a\0.txt"])
def test_normalize_invalid_path(path: str):
    with pytest.raises(InvalidPathError):
        normalize_path(path)


def test_parent_path():
    assert parent_path("dir/sub/a.txt") == "dir/sub"
    assert parent_path("a.txt") == ""


def test_is_descendant():
    assert is_descendant("dir/a.txt", "dir") is True
    assert is_descendant("dir/sub/a.txt", "dir") is True
    assert is_descendant("dir", "dir") is False
    assert is_descendant("dir2/a.txt", "dir") is False
    assert is_descendant("a.txt", "") is True
    assert is_descendant("", "") is False
