"""
Imob API — Input Validator Tests
=================================

What we test:
    ✅ Required fields, JSON types and role membership on create
    ✅ Partial update bodies keep only the fields that were sent
    ✅ Token request shape
    ✅ Non-object bodies
"""

import pytest

from imob_api.schemas.customer import CustomerRole
from imob_api.services.validation import (
    validate_customer_create,
    validate_customer_update,
    validate_token_request,
)


class TestValidateCustomerCreate:

    def test_valid_body(self, customer_payload):
        data, errors = validate_customer_create(customer_payload)

        assert errors == []
        assert data.document == "12345678901"
        assert data.role is CustomerRole.AGENT
        assert data.profile.bio == "Senior agent"

    def test_optional_fields_stay_unset(self):
        data, errors = validate_customer_create(
            {"document": "12345678901", "name": "Jo", "email": "jo@imob.io"}
        )
        assert errors == []
        assert data.role is None
        assert data.is_active is None
        assert data.profile is None

    def test_all_missing_fields_reported(self):
        data, errors = validate_customer_create({})

        assert data is None
        assert errors == ["Document is required", "Name is required", "Email is required"]

    def test_unknown_role(self, customer_payload):
        customer_payload["role"] = "superuser"
        _, errors = validate_customer_create(customer_payload)
        assert errors == ["Role must be one of: admin, agent"]

    def test_wrong_json_types(self, customer_payload):
        customer_payload["name"] = 123
        customer_payload["isActive"] = "yes"
        customer_payload["profile"] = {"bio": 5}

        _, errors = validate_customer_create(customer_payload)

        assert "Name must be a string" in errors
        assert "isActive must be a boolean" in errors
        assert "Bio must be a string" in errors

    def test_profile_must_be_object(self, customer_payload):
        customer_payload["profile"] = "vip"
        _, errors = validate_customer_create(customer_payload)
        assert errors == ["Profile must be an object"]

    @pytest.mark.parametrize("payload", [[], "text", 42, None])
    def test_non_object_body(self, payload):
        data, errors = validate_customer_create(payload)
        assert data is None
        assert errors == ["Request body must be a JSON object"]


class TestValidateCustomerUpdate:

    def test_only_sent_fields_returned(self):
        changes, errors = validate_customer_update({"name": "Ana Paula", "isActive": False})

        assert errors == []
        assert changes == {"name": "Ana Paula", "is_active": False}

    def test_empty_body_is_no_op(self):
        assert validate_customer_update({}) == ({}, [])

    def test_explicit_null_kept(self):
        changes, _ = validate_customer_update({"name": None})
        assert changes == {"name": None}

    def test_profile_subfields(self):
        changes, _ = validate_customer_update({"profile": {"phone": "123"}})
        assert changes == {"profile": {"phone": "123"}}

    def test_bad_role(self):
        changes, errors = validate_customer_update({"role": "owner"})
        assert changes is None
        assert errors == ["Role must be one of: admin, agent"]


class TestValidateTokenRequest:

    def test_valid(self):
        request, errors = validate_token_request({"userName": "admin", "password": "pw"})
        assert errors == []
        assert request.user_name == "admin"

    def test_missing_fields(self):
        _, errors = validate_token_request({})
        assert errors == ["userName is required", "password is required"]

    def test_non_string_password(self):
        _, errors = validate_token_request({"userName": "admin", "password": 1234})
        assert errors == ["password must be a string"]
