"""Response decoding with error-envelope fallback.

Order of attempts for a response body:

1. The expected result type.
2. The API error envelope ``{"error": {...}}``.
3. Neither: the failure from step 1 is reported, never the envelope's.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from stripe_bindings.api.errors import APIError, DecodeError
from stripe_bindings.api.result import ApiResult, Failure, Success

T = TypeVar("T")


class APIErrorPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    code: str | None = None
    message: str | None = None
    decline_code: str | None = None
    param: str | None = None
    doc_url: str | None = None


class APIErrorResponse(BaseModel):
    error: APIErrorPayload | None = None


_error_adapter = TypeAdapter(APIErrorResponse)


def _to_api_error(payload: APIErrorPayload) -> APIError:
    return APIError(
        payload.message or "The API returned an error",
        code=payload.code,
        decline_code=payload.decline_code,
        param=payload.param,
        type=payload.type,
        doc_url=payload.doc_url,
    )


def decode_response(data: bytes, result_type: type[T] | Any) -> ApiResult[T]:
    try:
        value = TypeAdapter(result_type).validate_json(data)
    except ValidationError as e:
        primary = DecodeError(f"Failed to decode response as {getattr(result_type, '__name__', result_type)}", cause=e)
    else:
        return Success(value)

    try:
        envelope = _error_adapter.validate_json(data)
    except ValidationError:
        return Failure(primary)

    if envelope.error is None:
        return Failure(primary)
    return Failure(_to_api_error(envelope.error))
