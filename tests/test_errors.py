"""Tests for stripe_bindings/api/errors.py and result types."""

from stripe_bindings.api.errors import APIError, DecodeError, EncodeError, StripeClientError, TransportError
from stripe_bindings.api.result import Failure, Success


class TestErrors:

    def test_to_dict_base(self):
        assert TransportError("Cannot reach API host").to_dict() == {
            "error": "Cannot reach API host",
            "kind": "TransportError",
        }

    def test_api_error_to_dict_skips_missing_fields(self):
        error = APIError("Your card was declined.", code="card_declined", decline_code="generic_decline")
        assert error.to_dict() == {
            "error": "Your card was declined.",
            "kind": "APIError",
            "code": "card_declined",
            "decline_code": "generic_decline",
        }

    def test_hierarchy(self):
        assert issubclass(EncodeError, DecodeError)
        for cls in (TransportError, DecodeError, APIError):
            assert issubclass(cls, StripeClientError)

    def test_details(self):
        error = StripeClientError("bad", details={"path": "/v1/x"})
        assert error.to_dict()["details"] == {"path": "/v1/x"}


class TestResult:

    def test_success(self):
        result = Success({"id": "cus_1"})
        assert result.ok is True
        assert result.value == {"id": "cus_1"}

    def test_failure(self):
        error = DecodeError("bad json")
        result = Failure(error)
        assert result.ok is False
        assert result.error is error
