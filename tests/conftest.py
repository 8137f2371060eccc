import tempfile
from pathlib import Path

import pytest

from credkit.importer import ImportInput


@pytest.fixture()
def home_dir(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture()
def make_input(home_dir):
    def _make(**environ) -> ImportInput:
        return ImportInput(environ=environ, home_dir=home_dir)

    return _make


@pytest.fixture()
def temp_root(tmp_path, monkeypatch) -> Path:
    """Redirect temporary directories so tests can see what is left behind."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root
