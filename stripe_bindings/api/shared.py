"""Process-wide default client.

Constructed lazily on first access and kept for the life of the process.
Code that needs a differently configured client builds its own APIClient;
the shared one is only a convenience default.
"""

from stripe_bindings.api.client import APIClient

_shared: APIClient | None = None


def get_shared_client() -> APIClient:
    """Get the shared client, creating it on first use."""
    global _shared
    if _shared is None:
        _shared = APIClient()
    return _shared


def set_shared_client(client: APIClient) -> None:
    """Install a pre-configured client as the shared default (call at startup)."""
    global _shared
    _shared = client


async def close_shared_client() -> None:
    """Close the shared client's transport and drop it."""
    global _shared
    if _shared is not None:
        await _shared.close()
        _shared = None
