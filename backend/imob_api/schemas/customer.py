"""
Imob API — Customer Request/Response Schemas
=============================================

What:  Pydantic models for the customer API contract.
How:   Input models describe the accepted JSON shape (types and enum values
       only; length and format rules are enforced by
       `services/customer_rules.py` at the storage boundary). `CustomerRecord`
       is the plain-data value the repository returns and the API
       serializes.

JSON uses camelCase (isActive, createdAt, ...) through `to_camel` aliases;
Python code uses the snake_case field names.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel


class CustomerRole(str, Enum):
    ADMIN = "admin"
    AGENT = "agent"


class CustomerProfile(BaseModel):
    """Embedded profile sub-document. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    phone: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Input Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class CustomerCreate(BaseModel):
    """
    What:  Body of POST /customers after shape validation.
    Who:   Produced by `validate_customer_create`, consumed by
           `CustomerRepository.create`.

    role, is_active and profile stay None when the client omits them; the
    repository fills in the defaults (agent, true, no profile).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    document: str
    name: str
    email: str
    role: Optional[CustomerRole] = None
    is_active: Optional[StrictBool] = None
    profile: Optional[CustomerProfile] = None


class CustomerUpdate(BaseModel):
    """
    What:  Body of PUT /customers/{id}; every field optional.

    Only fields present in the request are applied. An explicit null is
    kept so the storage rules can reject it ("Name is required").
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    document: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[CustomerRole] = None
    is_active: Optional[StrictBool] = None
    profile: Optional[CustomerProfile] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class CustomerRecord(BaseModel):
    """
    What:  A persisted customer as plain data.
    Who:   Returned by every CustomerRepository method and by the routes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: uuid.UUID = Field(description="Store-generated identifier")
    document: str = Field(description="11-character external document number")
    name: str
    email: str
    role: CustomerRole
    is_active: bool = Field(description="False once soft-deleted")
    profile: CustomerProfile = Field(default_factory=CustomerProfile)
    created_at: datetime
    updated_at: datetime

    @field_validator("profile", mode="before")
    @classmethod
    def empty_profile(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values for timezone-aware columns
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class DeleteResponse(BaseModel):
    """Returned by DELETE /customers/{id} for both soft and hard deletes."""

    message: str
    customer: CustomerRecord
