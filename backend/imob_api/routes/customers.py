"""
Imob API — Customer Routes
===========================

What:  CRUD over the customers collection. Every route sits behind the auth
       gate; the caller identity is only used for audit logging.

Endpoints:
    GET    /customers                  → 200 [CustomerRecord]  (active only)
    GET    /customers?role=agent       → 200 [CustomerRecord]  (active, by role)
    GET    /customers/{id}             → 200 CustomerRecord     (any state)
    POST   /customers                  → 201 CustomerRecord
    PUT    /customers/{id}             → 200 CustomerRecord
    DELETE /customers/{id}             → 200 {"message", "customer"}
           ?deletionType=soft (default) deactivates, =hard removes the row

Error Responses:
    400: validation failure, duplicate document/email, bad deletionType
    404: unknown or malformed customer ID
"""

import logging
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query

from imob_api.exceptions import ValidationError
from imob_api.routes.deps import get_customer_repository, get_identity
from imob_api.schemas.auth import TokenPayload
from imob_api.schemas.common import ErrorResponse
from imob_api.schemas.customer import CustomerRecord, CustomerRole, DeleteResponse
from imob_api.services.customer_repository import CustomerRepository
from imob_api.services.validation import validate_customer_create, validate_customer_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])

_ERRORS = {
    400: {"description": "Invalid request", "model": ErrorResponse},
    404: {"description": "Customer not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[CustomerRecord],
    response_model_by_alias=True,
    summary="List active customers",
)
async def list_customers(
    role: Optional[CustomerRole] = Query(None, description="Only customers with this role"),
    repository: CustomerRepository = Depends(get_customer_repository),
) -> List[CustomerRecord]:
    if role is not None:
        return await repository.list_by_role(role)
    return await repository.list_active()


@router.get(
    "/{customer_id}",
    response_model=CustomerRecord,
    response_model_by_alias=True,
    responses=_ERRORS,
    summary="Get one customer by ID",
)
async def get_customer(
    customer_id: str,
    repository: CustomerRepository = Depends(get_customer_repository),
) -> CustomerRecord:
    return await repository.get_by_id(customer_id)


@router.post(
    "",
    status_code=201,
    response_model=CustomerRecord,
    response_model_by_alias=True,
    responses=_ERRORS,
    summary="Create a customer",
)
async def create_customer(
    payload: Any = Body(...),
    repository: CustomerRepository = Depends(get_customer_repository),
    identity: TokenPayload = Depends(get_identity),
) -> CustomerRecord:
    data, errors = validate_customer_create(payload)
    if errors:
        raise ValidationError(details=errors)

    customer = await repository.create(data)
    logger.info("Customer %s created by %s", customer.id, identity.email)
    return customer


@router.put(
    "/{customer_id}",
    response_model=CustomerRecord,
    response_model_by_alias=True,
    responses=_ERRORS,
    summary="Update a customer",
)
async def update_customer(
    customer_id: str,
    payload: Any = Body(...),
    repository: CustomerRepository = Depends(get_customer_repository),
    identity: TokenPayload = Depends(get_identity),
) -> CustomerRecord:
    changes, errors = validate_customer_update(payload)
    if errors:
        raise ValidationError(details=errors)

    customer = await repository.update(customer_id, changes)
    logger.info("Customer %s updated by %s", customer.id, identity.email)
    return customer


@router.delete(
    "/{customer_id}",
    response_model=DeleteResponse,
    response_model_by_alias=True,
    responses=_ERRORS,
    summary="Deactivate or remove a customer",
)
async def delete_customer(
    customer_id: str,
    deletion_type: Literal["soft", "hard"] = Query("soft", alias="deletionType"),
    repository: CustomerRepository = Depends(get_customer_repository),
    identity: TokenPayload = Depends(get_identity),
) -> DeleteResponse:
    if deletion_type == "hard":
        customer = await repository.hard_delete(customer_id)
        message = "Customer removed successfully"
    else:
        customer = await repository.soft_delete(customer_id)
        message = "Customer deactivated successfully"

    logger.info("Customer %s %s-deleted by %s", customer.id, deletion_type, identity.email)
    return DeleteResponse(message=message, customer=customer)
