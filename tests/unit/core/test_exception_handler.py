"""Unit tests for the API error rendering helpers."""

from __future__ import annotations

import pytest
from django.http import Http404
from pydantic import BaseModel, ValidationError as PydanticValidationError
from rest_framework import exceptions, serializers

from modules.core.exceptions import api_exception_handler, error_response
from modules.core.results import ErrorKind, ServiceError

pytestmark = pytest.mark.unit


class _Line(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class _Body(serializers.Serializer):
    items = _Line(many=True, allow_empty=False)


class _Quantity(BaseModel):
    quantity: int


def _validation_error(data) -> exceptions.ValidationError:
    serializer = _Body(data=data)
    assert not serializer.is_valid()
    return exceptions.ValidationError(serializer.errors)


class TestApiExceptionHandler:
    def test_validation_error_becomes_422(self):
        response = api_exception_handler(_validation_error({}), {})
        assert response.status_code == 422
        assert response.data["type"] == "validation_error"
        assert response.data["errors"] == [
            {"code": "required", "detail": "This field is required.", "attr": "items"}
        ]

    def test_empty_list_error_attaches_to_list_field(self):
        response = api_exception_handler(_validation_error({"items": []}), {})
        (error,) = response.data["errors"]
        assert error["attr"] == "items"
        assert error["code"] == "empty"

    def test_nested_item_error_uses_dotted_path(self):
        exc = _validation_error({"items": [{"quantity": 2}, {"quantity": 0}]})
        response = api_exception_handler(exc, {})
        (error,) = response.data["errors"]
        assert error["attr"] == "items.1.quantity"
        assert error["code"] == "min_value"

    def test_not_found_is_client_error(self):
        response = api_exception_handler(Http404(), {})
        assert response.status_code == 404
        assert response.data["type"] == "client_error"
        assert response.data["errors"][0]["code"] == "not_found"
        assert response.data["errors"][0]["attr"] is None

    def test_method_not_allowed_keeps_status(self):
        response = api_exception_handler(exceptions.MethodNotAllowed("PATCH"), {})
        assert response.status_code == 405
        assert response.data["type"] == "client_error"

    def test_pydantic_error_becomes_422(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _Quantity(quantity="many")
        response = api_exception_handler(exc_info.value, {})
        assert response.status_code == 422
        assert response.data["errors"][0]["attr"] == "quantity"

    def test_unknown_exception_is_left_to_propagate(self):
        assert api_exception_handler(RuntimeError("boom"), {}) is None


class TestErrorResponse:
    @pytest.mark.parametrize(
        ("kind", "status_code", "error_type"),
        [
            (ErrorKind.NOT_FOUND, 404, "client_error"),
            (ErrorKind.RECONCILIATION, 422, "client_error"),
        ],
    )
    def test_status_follows_error_kind(self, kind, status_code, error_type):
        response = error_response(
            ServiceError(kind=kind, detail="nope", code="x", attr="items")
        )
        assert response.status_code == status_code
        assert response.data == {
            "type": error_type,
            "errors": [{"code": "x", "detail": "nope", "attr": "items"}],
        }
