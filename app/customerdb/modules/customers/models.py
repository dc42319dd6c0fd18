from __future__ import annotations

from sqlalchemy import BigInteger, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.customerdb.models import Base


class Customer(Base):
    """
    Customer record. `id` is a surrogate key assigned by the store on insert.
    """
    __tablename__ = "customers"
    __table_args__ = (
        Index("idx_customers_name", "name"),
    )

    # BIGINT on servers; SQLite only autoincrements an INTEGER PRIMARY KEY.
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Customer(id={self.id!r}, name={self.name!r}, address={self.address!r})"
