"""Tests for locating the SQLite database."""

from pathlib import Path

from creditsepa.database.factories import create_sqlite_database


def test_explicit_path_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("CREDITSEPA_DB_PATH", str(tmp_path / "env.db"))

    db = create_sqlite_database(str(tmp_path / "explicit.db"))

    assert db.database_url == f"sqlite:///{tmp_path / 'explicit.db'}"


def test_environment_path(tmp_path, monkeypatch):
    monkeypatch.setenv("CREDITSEPA_DB_PATH", str(tmp_path / "env.db"))

    db = create_sqlite_database()

    assert db.database_url == f"sqlite:///{tmp_path / 'env.db'}"


def test_default_path_in_home(tmp_path, monkeypatch):
    """Without configuration the database lives in ~/.creditsepa."""
    monkeypatch.delenv("CREDITSEPA_DB_PATH", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)

    db = create_sqlite_database()

    assert db.database_url == f"sqlite:///{tmp_path / '.creditsepa' / 'creditsepa.db'}"
    assert (tmp_path / ".creditsepa").is_dir()
