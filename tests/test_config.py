import logging

import pytest

from app.customerdb import create_app
from app.customerdb.config import is_production, load_config, load_settings
from app.customerdb.logging_config import configure_logging


def _clear_env(monkeypatch):
    for k in ("SECRET_KEY", "ENV", "DATABASE_URL", "LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)


def test_settings_defaults(monkeypatch):
    _clear_env(monkeypatch)
    s = load_settings()
    assert s.secret_key == "change-me"
    assert s.env == "development"
    assert s.database_url == "sqlite:///customers.db"
    assert s.log_level == "INFO"


def test_settings_strip_and_blank_means_default(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "  sqlite:///other.db  ")
    monkeypatch.setenv("ENV", "   ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg["DATABASE_URL"] == "sqlite:///other.db"
    assert cfg["ENV"] == "development"
    assert cfg["LOG_LEVEL"] == "DEBUG"


@pytest.mark.parametrize("env,expected", [("prod", True), ("Production", True), ("test", False), (None, False)])
def test_is_production(env, expected):
    assert is_production(env) is expected


def test_production_requires_database_url(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "s3cret-value")
    with pytest.raises(RuntimeError, match="DATABASE_URL is required"):
        create_app()


def test_production_rejects_sqlite(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "s3cret-value")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'prod.db'}")
    with pytest.raises(RuntimeError, match="must be Postgres"):
        create_app()


def test_production_rejects_default_secret(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost/customers")
    with pytest.raises(RuntimeError, match="SECRET_KEY"):
        create_app()


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    old_level = root.level
    try:
        configure_logging("INFO")
        before = len(root.handlers)
        configure_logging("WARNING")
        assert len(root.handlers) == before
        assert root.level == logging.WARNING
    finally:
        root.setLevel(old_level)
