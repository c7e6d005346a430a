"""
Tests for error response models.
"""

from apibuilder import ErrorResponse, SerializationError
from apibuilder.error_models import error_message


class TestErrorResponse:
    def test_from_exception(self):
        response = ErrorResponse.from_exception(LookupError("Order 42 not found"))
        assert response.to_wire() == {"errorMessage": "Order 42 not found", "errorType": "LookupError"}

    def test_without_type(self):
        response = ErrorResponse.from_exception(ValueError("bad"), include_type=False)
        assert response.to_wire() == {"errorMessage": "bad"}

    def test_field_names_are_accepted(self):
        response = ErrorResponse(error_message="m", error_type="T")
        assert response.error_message == "m"
        assert response.to_wire() == {"errorMessage": "m", "errorType": "T"}


class TestErrorMessage:
    def test_message_attribute(self):
        assert error_message(SerializationError("cannot encode")) == "cannot encode"

    def test_plain_exception(self):
        assert error_message(RuntimeError("boom")) == "boom"

    def test_mapping(self):
        assert error_message({"errorMessage": "a", "message": "b"}) == "a"
        assert error_message({"message": "b"}) == "b"

    def test_no_message(self):
        assert error_message({"code": 1}) is None
        assert error_message(42) is None
