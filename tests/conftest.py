import os
from pathlib import Path
from typing import Dict

import pytest

SAMPLE_NAMES = ("one.png", "two.png", "three.png")


@pytest.fixture
def sample_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Dict[str, bytes]:
    """Create ``test_files/{one,two,three}.png`` under a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    folder = tmp_path / "test_files"
    folder.mkdir()
    contents = {}
    for index, name in enumerate(SAMPLE_NAMES, start=1):
        # mix of compressible and random bytes, larger than the default buffer
        data = b"\x89PNG\r\n\x1a\n" + bytes([index]) * 3000 + os.urandom(5000)
        (folder / name).write_bytes(data)
        contents[f"test_files/{name}"] = data
    return contents
