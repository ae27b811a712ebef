"""Create customers table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the `customers` table with its unique document/email indexes.
How:   Mirrors imob_api/models/customer.py; the profile sub-document is a
       JSON column.

Rollback: downgrade() drops the table entirely (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "document",
            sa.String(11),
            nullable=False,
            comment="External 11-character identifier, immutable after creation",
        ),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Stored lowercased",
        ),
        sa.Column(
            "role",
            sa.String(16),
            nullable=False,
            server_default=sa.text("'agent'"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
            comment="False once soft-deleted",
        ),
        sa.Column("profile", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('admin', 'agent')", name="ck_customers_role"),
    )

    # A collision on either index is reported as the same duplicate-key error
    op.create_index("uq_customers_document", "customers", ["document"], unique=True)
    op.create_index("uq_customers_email", "customers", ["email"], unique=True)

    op.create_index("idx_customers_role", "customers", ["role"])
    op.create_index("idx_customers_is_active", "customers", ["is_active"])


def downgrade() -> None:
    op.drop_index("idx_customers_is_active", table_name="customers")
    op.drop_index("idx_customers_role", table_name="customers")
    op.drop_index("uq_customers_email", table_name="customers")
    op.drop_index("uq_customers_document", table_name="customers")
    op.drop_table("customers")
