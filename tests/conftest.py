import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_path():
    """Allow tests to import project modules without installation."""
    repo_root = Path(__file__).resolve().parent.parent
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_path()

from tests.helpers import AIRPORTS_DAT, EXTRA_AIRPORTS_CSV, EXTRA_ROUTES_CSV, ROUTES_DAT  # noqa: E402


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A working directory with both feeds downloaded and both override tables present."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "airports.dat").write_text(AIRPORTS_DAT, encoding="utf-8")
    (data_dir / "routes.dat").write_text(ROUTES_DAT, encoding="utf-8")
    (tmp_path / "extra_airports.csv").write_text(EXTRA_AIRPORTS_CSV, encoding="utf-8")
    (tmp_path / "extra_routes.csv").write_text(EXTRA_ROUTES_CSV, encoding="utf-8")
    return tmp_path
