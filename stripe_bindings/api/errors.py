"""Error taxonomy for API calls.

Every failure of a call is delivered as one of these inside a Failure
result. KeyMisuseError is the exception: it signals integration misuse
and is raised directly from the key setter.
"""

from typing import Any


class StripeClientError(Exception):
    """Base error class for binding errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        result: dict[str, Any] = {"error": self.message, "kind": type(self).__name__}
        if self.details:
            result["details"] = self.details
        return result


class TransportError(StripeClientError):
    """Network, DNS or TLS failure reported by the transport."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(StripeClientError):
    """Response bytes matched neither the expected type nor an error envelope."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class EncodeError(DecodeError):
    """A typed request object could not be serialized to form fields."""


class APIError(StripeClientError):
    """Structured error returned by the API."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        decline_code: str | None = None,
        param: str | None = None,
        type: str | None = None,
        doc_url: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.decline_code = decline_code
        self.param = param
        self.type = type
        self.doc_url = doc_url

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        for name in ("code", "decline_code", "param", "type", "doc_url"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


class KeyMisuseError(AssertionError):
    """An empty or secret key was configured on a client."""
