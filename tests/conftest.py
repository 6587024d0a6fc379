from __future__ import annotations

from pathlib import Path

import pytest

from tests._sources import WriteSource


@pytest.fixture
def write_source(tmp_path: Path) -> WriteSource:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, "utf-8")
        return path

    return _write
