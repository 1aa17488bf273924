"""Entry name helpers."""

from __future__ import annotations

import os
from typing import Optional, Union


def entry_name(path: Union[str, "os.PathLike[str]"], prefix: Optional[str] = None) -> str:
    """Derive the archive entry name for a file on disk.

    The first literal occurrence of ``prefix`` is removed from the path
    string. This is a plain string replace rather than a starts-with test:
    ``entry_name("a/b/a/c", "b/")`` gives ``"a/a/c"``, and a prefix missing
    from the path leaves it untouched.
    """

    name = os.fspath(path)
    if not prefix:
        return name
    return name.replace(prefix, "", 1)
