"""create customers table

Revision ID: 4a7c1e2b9d3f
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "4a7c1e2b9d3f"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)

    if not insp.has_table("customers"):
        op.create_table(
            "customers",
            sa.Column(
                "id",
                sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
                primary_key=True,
                autoincrement=True,
                nullable=False,
            ),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("address", sa.Text(), nullable=False),
        )

    insp = inspect(op.get_bind())
    if not any(ix.get("name") == "idx_customers_name" for ix in insp.get_indexes("customers")):
        op.create_index("idx_customers_name", "customers", ["name"])


def downgrade() -> None:
    op.drop_index("idx_customers_name", table_name="customers")
    op.drop_table("customers")
