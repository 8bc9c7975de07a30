"""Request assembly: method, URL, headers and form body."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import TypeAdapter

from stripe_bindings.api.errors import EncodeError
from stripe_bindings.api.params import query_string

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class RequestSpec:
    method: HTTPMethod
    path: str
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ComposedRequest:
    method: HTTPMethod
    url: str
    headers: Mapping[str, str]
    body: bytes = b""


def resource_url(api_url: str, path: str) -> str:
    return f"{api_url.rstrip('/')}/{path.lstrip('/')}"


def _form_headers(body: bytes) -> dict[str, str]:
    return {
        "Content-Type": FORM_CONTENT_TYPE,
        "Content-Length": str(len(body)),
    }


def build_request(
    spec: RequestSpec,
    api_url: str,
    headers: Mapping[str, str],
    override_headers: Mapping[str, str] | None = None,
) -> ComposedRequest:
    """Assemble a request from a parameter mapping.

    GET parameters go into the query string, POST parameters into a
    form-encoded body. ``override_headers`` are applied last.
    """
    url = resource_url(api_url, spec.path)
    encoded = query_string(spec.parameters)
    final_headers = dict(headers)
    body = b""

    if spec.method is HTTPMethod.GET:
        if encoded:
            url = f"{url}?{encoded}"
    else:
        body = encoded.encode("utf-8")
        final_headers.update(_form_headers(body))

    if override_headers:
        final_headers.update(override_headers)
    return ComposedRequest(
        method=spec.method,
        url=url,
        headers=MappingProxyType(final_headers),
        body=body,
    )


def encode_object(obj: Any) -> dict[str, Any]:
    """Serialize a typed request object into its field mapping.

    Raises:
        EncodeError: If the object cannot be serialized or does not
            serialize to a mapping of fields.
    """
    try:
        fields = TypeAdapter(type(obj)).dump_python(obj, mode="json", by_alias=True, exclude_none=True)
    except Exception as e:
        raise EncodeError(f"Could not encode {type(obj).__name__}: {e}", cause=e) from e
    if not isinstance(fields, dict):
        raise EncodeError(f"{type(obj).__name__} does not encode to a field mapping")
    return fields


def build_object_request(
    path: str,
    obj: Any,
    api_url: str,
    headers: Mapping[str, str],
    override_headers: Mapping[str, str] | None = None,
) -> ComposedRequest:
    """Assemble a POST request whose body is a typed object's fields."""
    spec = RequestSpec(method=HTTPMethod.POST, path=path, parameters=encode_object(obj))
    return build_request(spec, api_url, headers, override_headers)
