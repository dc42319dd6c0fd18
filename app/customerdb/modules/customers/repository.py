"""
Data access for the `customers` table.

CustomerRepository wraps an explicit SQLAlchemy Session. Reads flush pending
edits and then always hit the store (populate_existing refreshes any instance
already held by the session), and every write commits on its own; on failure
the session is rolled back and the original exception propagates unchanged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.orm import Session

from app.customerdb.modules.customers.models import Customer

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"

# BIGINT bounds; ids outside them cannot exist in the table.
_ID_MIN = -(2**63)
_ID_MAX = 2**63 - 1


def _in_range(customer_id: int) -> bool:
    return _ID_MIN <= customer_id <= _ID_MAX


def _escape_like(fragment: str) -> str:
    """Escape LIKE wildcards so the fragment matches literally."""
    return (
        fragment.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


@dataclass
class Page:
    items: list[Customer]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1


class CustomerRepository:
    """Repository for CRUD operations on the customers table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---------- writes ----------

    def save(self, customer: Customer) -> Customer:
        """
        Insert when `customer.id` is unset or zero, otherwise update the row
        with that id. A non-zero id with no matching row is inserted as a new
        record with a store-generated id.
        """
        try:
            saved = self._stage(customer)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error("Failed to save customer: %s", e)
            raise
        logger.debug("Saved customer id=%s", saved.id)
        return saved

    def save_all(self, customers: Iterable[Customer]) -> list[Customer]:
        """Save several records in one transaction."""
        try:
            saved = [self._stage(c) for c in customers]
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error("Failed to save customers: %s", e)
            raise
        logger.debug("Saved %d customers", len(saved))
        return saved

    def delete_by_id(self, customer_id: int) -> None:
        """Delete the row if present; a missing id is a no-op."""
        if not _in_range(customer_id):
            return
        self._delete_where(Customer.id == customer_id)

    def delete(self, customer: Customer) -> None:
        if not customer.id:
            return
        self.delete_by_id(customer.id)

    def delete_all_by_id(self, customer_ids: Iterable[int]) -> None:
        ids = [i for i in customer_ids if _in_range(i)]
        if not ids:
            return
        self._delete_where(Customer.id.in_(ids))

    def delete_all(self) -> None:
        self._delete_where(None)

    # ---------- reads ----------

    def find_by_id(self, customer_id: int) -> Customer | None:
        if not _in_range(customer_id):
            return None
        stmt = select(Customer).where(Customer.id == customer_id)
        return self._scalars(stmt).one_or_none()

    def exists_by_id(self, customer_id: int) -> bool:
        if not _in_range(customer_id):
            return False
        stmt = select(Customer.id).where(Customer.id == customer_id)
        return self.session.execute(stmt).first() is not None

    def find_all(self) -> list[Customer]:
        return list(self._scalars(select(Customer)))

    def find_all_by_id(self, customer_ids: Iterable[int]) -> list[Customer]:
        ids = [i for i in customer_ids if _in_range(i)]
        if not ids:
            return []
        return list(self._scalars(select(Customer).where(Customer.id.in_(ids))))

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(Customer)).scalar_one()

    def find_page(self, page: int = 1, per_page: int = 50) -> Page:
        if page < 1:
            page = 1
        if per_page < 1:
            raise ValueError("per_page must be positive")
        stmt = select(Customer).order_by(Customer.id.asc()).offset((page - 1) * per_page).limit(per_page)
        return Page(items=list(self._scalars(stmt)), total=self.count(), page=page, per_page=per_page)

    def find_by_name_containing_ignore_case(self, fragment: str) -> list[Customer]:
        """
        Case-insensitive substring match on `name`. The fragment is used as
        given (no trimming); case folding follows the store's ILIKE/lower().
        """
        if fragment is None:
            raise ValueError("fragment must not be None")
        pattern = f"%{_escape_like(fragment)}%"
        stmt = select(Customer).where(Customer.name.ilike(pattern, escape=_LIKE_ESCAPE))
        return list(self._scalars(stmt))

    # ---------- internals ----------

    def _scalars(self, stmt):
        # populate_existing overwrites managed instances, so push pending edits first.
        try:
            self.session.flush()
        except Exception:
            self.session.rollback()
            raise
        return self.session.scalars(stmt.execution_options(populate_existing=True))

    def _stage(self, customer: Customer) -> Customer:
        state = inspect(customer)
        if state.persistent and state.session is self.session:
            if customer.id == state.identity[0]:
                self.session.flush()
                return customer
            # The key was edited on a managed instance. Its row keeps the
            # original id; the values are saved under the requested id instead.
            requested = Customer(id=customer.id, name=customer.name, address=customer.address)
            self.session.expire(customer)
            customer = requested
        if customer.id:
            existing = self.find_by_id(customer.id)
            if existing is not None:
                existing.name = customer.name
                existing.address = customer.address
                self.session.flush()
                return existing
            logger.info("No customer with id=%s; inserting as new record", customer.id)
            customer = Customer(name=customer.name, address=customer.address)
        else:
            customer.id = None  # type: ignore[assignment]
        self.session.add(customer)
        self.session.flush()
        return customer

    def _delete_where(self, clause) -> None:
        stmt = delete(Customer)
        if clause is not None:
            stmt = stmt.where(clause)
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error("Failed to delete customers: %s", e)
            raise
        logger.debug("Deleted %s customer row(s)", result.rowcount)
