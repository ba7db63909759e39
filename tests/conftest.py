"""Shared fixtures for the conversion tests."""

from pathlib import Path

import pytest


@pytest.fixture
def write_rdf(tmp_path):
    """Write statement lines to a file under tmp_path and return its path."""
    def _write(name: str, *lines: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(''.join(f"{line}\n" for line in lines), encoding='utf-8')
        return path
    return _write
