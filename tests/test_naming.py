from pathlib import Path

import pytest

from zipper.core.naming import entry_name


@pytest.mark.parametrize(
    "path, prefix, expected",
    [
        ("test_files/one.png", "test_files/", "one.png"),
        ("/srv/export/a/b.txt", "/srv/export/", "a/b.txt"),
        ("test_files/one.png", None, "test_files/one.png"),
        ("test_files/one.png", "", "test_files/one.png"),
        ("test_files/one.png", "other/", "test_files/one.png"),
        # only the first occurrence goes
        ("x/x/y.txt", "x/", "x/y.txt"),
        # not anchored at the start
        ("data/test_files/a.txt", "test_files/", "data/a.txt"),
        # literal match, no pattern semantics
        ("a.b/c.txt", ".", "ab/c.txt"),
        ("dir[1]/f", "dir[1]/", "f"),
    ],
)
def test_entry_name(path, prefix, expected):
    assert entry_name(path, prefix) == expected


def test_entry_name_accepts_path_objects():
    assert entry_name(Path("test_files") / "one.png", "test_files/") == "one.png"
