"""
Imob API — Customer Field Rules
================================

What:  Free functions that normalize customer fields and list constraint
       violations, operating on plain dicts (snake_case keys).
How:   `normalize_customer_fields` trims strings and lowercases the email;
       `customer_violations` returns every broken rule as a message.
Who:   CustomerRepository, before every insert and update. Partial updates
       skip most of the input validator, so these rules are the last check
       before the database.

Rules:
    document   required string, exactly 11 characters
    name       required string, 2-50 characters
    email      required string, valid address shape (email-validator)
    role       "admin" or "agent"
    is_active  boolean
    profile    object; phone/avatar/bio strings; bio at most 500 characters
"""

from enum import Enum
from typing import Any, Dict, List, Mapping

from email_validator import EmailNotValidError, validate_email

from imob_api.schemas.customer import CustomerRole

DOCUMENT_LENGTH = 11
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 500
PROFILE_FIELDS = ("phone", "avatar", "bio")

_ROLES = {role.value for role in CustomerRole}


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def normalize_customer_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `fields` with storage normalization applied.

    Only keys present in the input are touched, so the function works for
    both full creates and partial updates.
    """
    result = dict(fields)
    for key in ("document", "name"):
        if key in result:
            result[key] = _strip(result[key])
    if "email" in result and isinstance(result["email"], str):
        result["email"] = result["email"].strip().lower()
    if isinstance(result.get("role"), Enum):
        result["role"] = result["role"].value
    profile = result.get("profile")
    if isinstance(profile, Mapping):
        cleaned = {k: v for k, v in profile.items() if k in PROFILE_FIELDS and v is not None}
        for key in ("phone", "avatar"):
            if key in cleaned:
                cleaned[key] = _strip(cleaned[key])
        result["profile"] = cleaned or None
    return result


def _required_string(fields: Mapping[str, Any], key: str, label: str) -> List[str]:
    value = fields.get(key)
    if value is None or value == "":
        return [f"{label} is required"]
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    return []


def customer_violations(fields: Mapping[str, Any]) -> List[str]:
    """
    List every rule a complete, normalized customer breaks.

    An empty list means the customer may be written.
    """
    violations: List[str] = []

    problems = _required_string(fields, "document", "Document")
    if not problems and len(fields["document"]) != DOCUMENT_LENGTH:
        problems = [f"Document must be exactly {DOCUMENT_LENGTH} characters long"]
    violations.extend(problems)

    problems = _required_string(fields, "name", "Name")
    if not problems:
        if len(fields["name"]) < NAME_MIN_LENGTH:
            problems = [f"Name must be at least {NAME_MIN_LENGTH} characters long"]
        elif len(fields["name"]) > NAME_MAX_LENGTH:
            problems = [f"Name cannot exceed {NAME_MAX_LENGTH} characters"]
    violations.extend(problems)

    problems = _required_string(fields, "email", "Email")
    if not problems:
        try:
            validate_email(fields["email"], check_deliverability=False)
        except EmailNotValidError:
            problems = ["Please enter a valid email"]
    violations.extend(problems)

    if fields.get("role") not in _ROLES:
        violations.append(f"Role must be one of: {', '.join(sorted(_ROLES))}")

    if not isinstance(fields.get("is_active"), bool):
        violations.append("isActive must be a boolean")

    profile = fields.get("profile")
    if profile is not None:
        if not isinstance(profile, Mapping):
            violations.append("Profile must be an object")
        else:
            for key in PROFILE_FIELDS:
                value = profile.get(key)
                if value is not None and not isinstance(value, str):
                    violations.append(f"{key.capitalize()} must be a string")
            bio = profile.get("bio")
            if isinstance(bio, str) and len(bio) > BIO_MAX_LENGTH:
                violations.append(f"Bio cannot exceed {BIO_MAX_LENGTH} characters")

    return violations
