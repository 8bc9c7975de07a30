"""Abstract base for HTTP transports."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

from stripe_bindings.api.request import ComposedRequest


@dataclass
class TransportResponse:
    status_code: int
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


class Transport(ABC):
    """Base class for async transports that carry composed requests."""

    @abstractmethod
    async def send(self, request: ComposedRequest) -> TransportResponse:
        """Send a request and return the raw response.

        Raises:
            TransportError: On network, DNS or TLS failures.
        """
        ...

    async def close(self) -> None:
        """Cleanup resources. Override if the transport holds connections."""
        pass
