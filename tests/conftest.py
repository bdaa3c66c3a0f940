from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tests.helpers import make_report_xml


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[..., Path]:
    def _write(violations_per_file: list[int], name: str = "sf-pmd-output.xml", **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(make_report_xml(violations_per_file, **kwargs), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tmp_path(tmp_path: Path) -> Path:
    """Resolved tmp_path, so it compares equal to paths the config layer resolves."""
    return tmp_path.resolve()
