"""
Imob API — Input Validator
===========================

What:  Pure functions that check the shape of incoming request bodies.
How:   Each function runs the raw payload through a Pydantic model and
       returns `(value, [])` on success or `(None, messages)` on failure,
       never both. Every violation is collected, not just the first.
Who:   Called by the route handlers before anything reaches the repository.

Scope:
    Shape only: required fields, JSON types, enum membership. Length,
    format and uniqueness rules run again at the storage boundary
    (`customer_rules.py`), which also covers partial updates.
"""

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from imob_api.schemas.auth import TokenRequest
from imob_api.schemas.customer import CustomerCreate, CustomerRole, CustomerUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

_LABELS = {
    "document": "Document",
    "name": "Name",
    "email": "Email",
    "role": "Role",
    "isActive": "isActive",
    "profile": "Profile",
    "phone": "Phone",
    "avatar": "Avatar",
    "bio": "Bio",
    "userName": "userName",
    "password": "password",
}

_ROLE_CHOICES = ", ".join(role.value for role in CustomerRole)


def _label(loc: Tuple[Any, ...]) -> str:
    if not loc:
        return "Body"
    return _LABELS.get(str(loc[-1]), str(loc[-1]))


def describe_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """
    Turn Pydantic error dicts into short human-readable messages.

    Examples:
        missing        → "Name is required"
        enum           → "Role must be one of: admin, agent"
        string_type    → "Email must be a string"
        anything else  → "profile.bio: <pydantic message>"
    """
    messages: List[str] = []
    for error in errors:
        loc = tuple(error.get("loc", ()))
        kind = error.get("type", "")
        label = _label(loc)
        if kind == "json_invalid":
            message = "Malformed JSON body"
        elif kind == "missing":
            message = f"{label} is required"
        elif kind == "enum" and loc and loc[-1] == "role":
            message = f"Role must be one of: {_ROLE_CHOICES}"
        elif kind == "string_type":
            message = f"{label} must be a string"
        elif kind in ("bool_type", "bool_parsing"):
            message = f"{label} must be a boolean"
        elif kind in ("model_type", "model_attributes_type", "dict_type"):
            message = f"{label} must be an object" if loc else "Request body must be a JSON object"
        else:
            path = ".".join(str(part) for part in loc) or "body"
            message = f"{path}: {error.get('msg', 'is invalid')}"
        if message not in messages:
            messages.append(message)
    return messages


def _validate(model: Type[ModelT], payload: Any) -> Tuple[Optional[ModelT], List[str]]:
    if not isinstance(payload, dict):
        return None, ["Request body must be a JSON object"]
    try:
        return model.model_validate(payload), []
    except PydanticValidationError as e:
        return None, describe_errors(e.errors())


def validate_customer_create(payload: Any) -> Tuple[Optional[CustomerCreate], List[str]]:
    """
    Check a POST /customers body.

    Requires document, name and email; role must be admin or agent when
    given; isActive must be a boolean; profile fields must be strings.
    """
    return _validate(CustomerCreate, payload)


def validate_customer_update(payload: Any) -> Tuple[Optional[Dict[str, Any]], List[str]]:
    """
    Check a PUT /customers/{id} body.

    Returns only the fields the client actually sent, keyed by their
    snake_case names, e.g. {"name": "Ana", "is_active": False}.
    """
    update, errors = _validate(CustomerUpdate, payload)
    if update is None:
        return None, errors
    changes = update.model_dump(exclude_unset=True)
    if "profile" in changes and update.profile is not None:
        changes["profile"] = update.profile.model_dump(exclude_unset=True)
    return changes, []


def validate_token_request(payload: Any) -> Tuple[Optional[TokenRequest], List[str]]:
    """Check a POST /auth/token body: userName and password strings."""
    return _validate(TokenRequest, payload)
