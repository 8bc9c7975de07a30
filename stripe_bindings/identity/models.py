"""Client identity and configuration models."""

from dataclasses import dataclass, field

API_BASE_URL = "https://api.stripe.com/v1"


@dataclass(frozen=True)
class AppInfo:
    """Identifies a library or plugin wrapping these bindings."""

    name: str
    partner_id: str | None = None
    version: str | None = None
    url: str | None = None


@dataclass
class ClientConfig:
    publishable_key: str | None = None  # None = fall back to settings default
    stripe_account: str | None = None  # connected account id
    app_info: AppInfo | None = None
    betas: set[str] = field(default_factory=set)  # e.g. {"alipay_beta=v1"}
    api_url: str = API_BASE_URL
