"""Tests for the startup and local-dev database scripts."""
import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from app.customerdb.models import Customer
from scripts import init_db, start


def test_parse_port():
    assert start.parse_port("8081") == 8081
    assert start.parse_port("") == 8080
    assert start.parse_port(None) == 8080
    with pytest.raises(ValueError):
        start.parse_port("0")
    with pytest.raises(ValueError):
        start.parse_port("http")


def test_gunicorn_argv():
    argv = start.gunicorn_argv(9000, 4)
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert "0.0.0.0:9000" in argv
    assert argv[argv.index("--workers") + 1] == "4"


def test_main_execs_gunicorn_with_args(monkeypatch):
    calls = []
    monkeypatch.setattr(start.os, "execvp", lambda file, args: calls.append((file, args)))
    monkeypatch.delenv("PORT", raising=False)

    start.main(["--port", "5005", "--workers", "3", "--skip-release"])

    assert calls
    file, args = calls[0]
    assert file == "gunicorn"
    assert "0.0.0.0:5005" in args


def test_main_rejects_invalid_port(monkeypatch):
    monkeypatch.setenv("PORT", "99999")
    with pytest.raises(SystemExit) as exc:
        start.main(["--skip-release"])
    assert exc.value.code == 1


def test_init_db_creates_schema_and_seeds_once(tmp_path):
    db_url = f"sqlite:///{tmp_path/'dev.db'}"
    init_db.create_schema(db_url)

    assert init_db.seed_customers(db_url) == len(init_db.SAMPLE_CUSTOMERS)
    assert init_db.seed_customers(db_url) == 0

    engine = create_engine(db_url)
    try:
        with Session(engine) as s:
            names = sorted(s.scalars(select(Customer.name)))
    finally:
        engine.dispose()
    assert names == sorted(name for name, _ in init_db.SAMPLE_CUSTOMERS)
