"""
Imob API — Customer Repository
===============================

What:  The only component that reads or writes the `customers` table.
How:   Each method opens its own session from the injected factory, runs
       one statement (or one read-modify-write), commits and converts the
       ORM row into a plain `CustomerRecord`.
Who:   Route handlers in `routes/customers.py`.

Error Handling Strategy:
    Missing rows and malformed ids      → NotFoundError
    Broken field rules                  → ValidationError (all messages)
    Unique index on document or email   → DuplicateKeyError (single kind)
    Any other SQLAlchemy failure        → DatabaseError (details logged only)

Concurrency:
    Two requests racing to insert the same email/document are resolved by
    the unique indexes: one commit wins, the other gets IntegrityError,
    reported as DuplicateKeyError. No application-level locking.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from imob_api.exceptions import (
    DatabaseError,
    DuplicateKeyError,
    ImobError,
    NotFoundError,
    ValidationError,
)
from imob_api.models.customer import Customer, utcnow
from imob_api.schemas.customer import CustomerCreate, CustomerRecord, CustomerRole
from imob_api.services.customer_rules import customer_violations, normalize_customer_fields

logger = logging.getLogger(__name__)

_WRITABLE_FIELDS = ("document", "name", "email", "role", "is_active", "profile")


def _to_record(row: Customer) -> CustomerRecord:
    return CustomerRecord.model_validate(row)


def _parse_id(customer_id: Union[str, uuid.UUID]) -> uuid.UUID:
    if isinstance(customer_id, uuid.UUID):
        return customer_id
    try:
        return uuid.UUID(str(customer_id))
    except ValueError:
        raise NotFoundError(resource="customer", resource_id=str(customer_id)) from None


def _duplicate_key(error: IntegrityError) -> DuplicateKeyError:
    text = str(error.orig).lower()
    field = "document" if "document" in text else "email" if "email" in text else None
    return DuplicateKeyError(context={"field": field} if field else {})


class CustomerRepository:
    """
    CRUD surface over the customers table.

    Methods:
        create, get_by_id, get_by_email, list_active, list_by_role,
        update, soft_delete, hard_delete
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Session scope that rolls back on any error and translates driver
        failures. Our own exceptions pass through unchanged.
        """
        async with self._session_factory() as session:
            try:
                yield session
            except IntegrityError as e:
                await session.rollback()
                duplicate = _duplicate_key(e)
                logger.info("Duplicate key on %s: %s", operation, duplicate.context)
                raise duplicate from None
            except ImobError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
                raise DatabaseError(context={"operation": operation, "error_type": type(e).__name__}) from e

    async def _get_row(self, session: AsyncSession, customer_id: Union[str, uuid.UUID]) -> Customer:
        row = await session.get(Customer, _parse_id(customer_id))
        if row is None:
            raise NotFoundError(resource="customer", resource_id=str(customer_id))
        return row

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, data: CustomerCreate) -> CustomerRecord:
        """
        Insert a new customer.

        Defaults: role=agent, is_active=true, no profile. Timestamps are
        stamped on insert.

        Raises:
            ValidationError, DuplicateKeyError, DatabaseError
        """
        fields: Dict[str, Any] = {
            "document": data.document,
            "name": data.name,
            "email": data.email,
            "role": data.role or CustomerRole.AGENT,
            "is_active": True if data.is_active is None else data.is_active,
            "profile": data.profile.model_dump(exclude_none=True) if data.profile else None,
        }
        fields = normalize_customer_fields(fields)
        violations = customer_violations(fields)
        if violations:
            raise ValidationError(details=violations)

        async with self._session("create") as session:
            row = Customer(**fields)
            session.add(row)
            await session.commit()
            logger.info("Customer created: %s", row.id)
            return _to_record(row)

    async def update(self, customer_id: Union[str, uuid.UUID], changes: Mapping[str, Any]) -> CustomerRecord:
        """
        Apply a partial update and refresh updated_at.

        The stored record merged with `changes` is checked against every
        field rule. `document` cannot change; profile keys are merged into
        the stored profile.

        Raises:
            NotFoundError, ValidationError, DuplicateKeyError, DatabaseError
        """
        async with self._session("update") as session:
            row = await self._get_row(session, customer_id)

            current = {field: getattr(row, field) for field in _WRITABLE_FIELDS}
            incoming = {k: v for k, v in changes.items() if k in _WRITABLE_FIELDS}
            if isinstance(incoming.get("profile"), Mapping):
                incoming["profile"] = {**(current["profile"] or {}), **incoming["profile"]}

            merged = normalize_customer_fields({**current, **incoming})
            violations = customer_violations(merged)
            if "document" in incoming and merged["document"] != current["document"]:
                violations.insert(0, "Document cannot be changed")
            if violations:
                raise ValidationError(details=violations)

            for field in _WRITABLE_FIELDS:
                setattr(row, field, merged[field])
            row.updated_at = utcnow()
            await session.commit()
            logger.info("Customer updated: %s", row.id)
            return _to_record(row)

    async def soft_delete(self, customer_id: Union[str, uuid.UUID]) -> CustomerRecord:
        """Mark a customer inactive; the row stays retrievable by id."""
        async with self._session("soft_delete") as session:
            row = await self._get_row(session, customer_id)
            row.is_active = False
            row.updated_at = utcnow()
            await session.commit()
            logger.info("Customer deactivated: %s", row.id)
            return _to_record(row)

    async def hard_delete(self, customer_id: Union[str, uuid.UUID]) -> CustomerRecord:
        """Erase a customer and return its last known value."""
        async with self._session("hard_delete") as session:
            row = await self._get_row(session, customer_id)
            record = _to_record(row)
            await session.delete(row)
            await session.commit()
            logger.info("Customer removed: %s", record.id)
            return record

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_by_id(self, customer_id: Union[str, uuid.UUID]) -> CustomerRecord:
        """Fetch one customer, active or not."""
        async with self._session("get_by_id") as session:
            return _to_record(await self._get_row(session, customer_id))

    async def get_by_email(self, email: str) -> CustomerRecord:
        """Fetch one customer by email, case-insensitively."""
        async with self._session("get_by_email") as session:
            result = await session.execute(
                select(Customer).where(Customer.email == email.strip().lower())
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise NotFoundError(resource="customer")
            return _to_record(row)

    async def list_active(self) -> List[CustomerRecord]:
        """Every customer with is_active=true, oldest first."""
        async with self._session("list_active") as session:
            result = await session.execute(
                select(Customer).where(Customer.is_active.is_(True)).order_by(Customer.created_at)
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def list_by_role(self, role: Union[str, CustomerRole]) -> List[CustomerRecord]:
        """Active customers holding `role`, oldest first."""
        role_value = role.value if isinstance(role, CustomerRole) else role
        async with self._session("list_by_role") as session:
            result = await session.execute(
                select(Customer)
                .where(Customer.role == role_value, Customer.is_active.is_(True))
                .order_by(Customer.created_at)
            )
            return [_to_record(row) for row in result.scalars().all()]
