#!/usr/bin/env python
"""
Local-dev database bootstrap.

Creates the schema straight from the ORM metadata (production uses Alembic via
scripts/release.py) and optionally seeds a few sample customers.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --seed

Environment:
    DATABASE_URL: database connection string (default sqlite:///customers.db)
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.customerdb.models import Base, Customer  # noqa: E402
from app.customerdb.modules.customers.repository import CustomerRepository  # noqa: E402

SAMPLE_CUSTOMERS = (
    ("Anna Schmidt", "12 Harbour Road, Hamburg"),
    ("Fernando Alves", "48 Rua Augusta, Lisbon"),
    ("Bob Miller", "301 Pine Street, Seattle"),
)


def create_schema(database_url: str) -> None:
    engine = create_engine(database_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


def seed_customers(database_url: str) -> int:
    """
    Insert the sample customers that are not already present (matched by name).
    Returns the number of rows inserted.
    """
    engine = create_engine(database_url)
    try:
        # The repository commits each write; the session only needs closing.
        with Session(engine, expire_on_commit=False) as s:
            repo = CustomerRepository(s)
            existing = {c.name for c in repo.find_all()}
            new = [Customer(name=name, address=address) for name, address in SAMPLE_CUSTOMERS if name not in existing]
            repo.save_all(new)
    finally:
        engine.dispose()
    return len(new)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the customers schema (local dev)")
    parser.add_argument("--seed", action="store_true", help="Insert sample customers")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args()

    db_url = (args.database_url or os.environ.get("DATABASE_URL") or "sqlite:///customers.db").strip()
    create_schema(db_url)
    print("Schema created.")
    if args.seed:
        inserted = seed_customers(db_url)
        print(f"Seeded {inserted} customer(s).")


if __name__ == "__main__":
    main()
