"""Tests for database location resolution."""

from pathlib import Path

from bankrec.database.factories import DB_PATH_ENV, create_sqlite_database, resolve_database_path


def test_explicit_path_wins(tmp_path, monkeypatch):
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "env.db"))

    assert resolve_database_path(str(tmp_path / "cli.db")) == tmp_path / "cli.db"


def test_environment_variable(tmp_path, monkeypatch):
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "env.db"))

    assert resolve_database_path() == tmp_path / "env.db"


def test_default_under_home(tmp_path, monkeypatch):
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    path = resolve_database_path()

    assert path == tmp_path / ".bankrec" / "bankrec.db"
    assert path.parent.is_dir()


def test_tilde_expanded_and_parents_created(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    path = resolve_database_path("~/books/2025/bank.db")

    assert path == tmp_path / "books" / "2025" / "bank.db"
    assert path.parent.is_dir()


def test_create_sqlite_database_uses_resolved_path(tmp_path):
    db = create_sqlite_database(str(tmp_path / "nested" / "bank.db"))
    try:
        assert db.database_url == f"sqlite:///{tmp_path / 'nested' / 'bank.db'}"
        assert Path(tmp_path / "nested" / "bank.db").exists()
    finally:
        db.disconnect()
