import pytest

from qrforge.core.db import ensure_sqlite_dir, sqlite_file_path


@pytest.mark.parametrize("url", [
    "sqlite://",
    "sqlite:///:memory:",
    "sqlite:///file:shared?mode=memory&cache=shared&uri=true",
    "postgresql://user:pw@db:5432/qr",
])
def test_non_file_urls_have_no_path(url):
    assert sqlite_file_path(url) is None


def test_in_memory_url_creates_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert ensure_sqlite_dir("sqlite://") is None
    assert list(tmp_path.iterdir()) == []


def test_file_url_creates_parent_dir(tmp_path):
    target = tmp_path / "nested" / "deeper" / "qr_history.db"
    path = ensure_sqlite_dir(f"sqlite:///{target}")
    assert path == str(target)
    assert target.parent.is_dir()
    assert not target.exists()


def test_relative_file_url(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert ensure_sqlite_dir("sqlite:///data/qr.db") == "data/qr.db"
    assert (tmp_path / "data").is_dir()
