"""
Imob API — Customer SQLAlchemy Model
=====================================

What:  ORM mapping of the `customers` table.
How:   Plain column mapping on DeclarativeBase. The class carries no
       behavior: field rules live in `services/customer_rules.py` and
       queries in `services/customer_repository.py`.
Who:   Used only by CustomerRepository and Alembic.

Table Design:
    - id: UUID generated on insert, exposed to clients as an opaque string
    - document / email: unique indexes; a collision on either one is reported
      as the same duplicate-key condition
    - profile: embedded sub-document (phone, avatar, bio) stored as JSON
    - is_active: soft-delete flag, indexed for the default listing query
    - role: indexed for listing by role; CHECK keeps it to admin/agent
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, String, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column

from imob_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # External 11-character identifier; immutable after creation
    document: Mapped[str] = mapped_column(String(11), nullable=False)

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    # Stored lowercased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    role: Mapped[str] = mapped_column(String(16), nullable=False, default="agent")

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    profile: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("uq_customers_document", "document", unique=True),
        Index("uq_customers_email", "email", unique=True),
        Index("idx_customers_role", "role"),
        Index("idx_customers_is_active", "is_active"),
        CheckConstraint("role IN ('admin', 'agent')", name="ck_customers_role"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, document='{self.document}', active={self.is_active})>"
