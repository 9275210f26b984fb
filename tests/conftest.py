import os

import pytest

SAMPLE_LOG = os.path.join(os.path.dirname(__file__), "..", "logs", "sample.log")


@pytest.fixture
def sample_log():
    return SAMPLE_LOG


@pytest.fixture
def write_log(tmp_path):
    """Write lines to a log file under tmp_path and return its path."""

    def _write(name: str, lines: list[str]) -> str:
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)

    return _write
