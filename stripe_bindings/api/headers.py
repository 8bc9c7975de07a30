"""Header composition for API requests.

Every request carries:

    Authorization        Bearer <ephemeral secret | publishable key | "">
    Stripe-Version       pinned API version, plus "; <beta>" per enabled beta
    X-Stripe-User-Agent  JSON blob describing bindings, device and app
    Stripe-Account       only when a connected account is configured
    Stripe-Livemode      only for user keys

Caller-supplied headers are merged last and win on conflicts.
"""

import json
from collections.abc import Iterable, Mapping

from stripe_bindings.api.device import DeviceInfoProvider
from stripe_bindings.config.settings import get_settings
from stripe_bindings.identity.keys import is_user_key
from stripe_bindings.identity.models import AppInfo, ClientConfig

BINDINGS_VERSION = "21.8.1"
API_VERSION = "2020-08-27"
LANG = "python"

USER_AGENT_HEADER = "X-Stripe-User-Agent"


def stripe_version(betas: Iterable[str]) -> str:
    # Beta order follows set iteration and is not significant
    version = API_VERSION
    for beta in betas:
        version = f"{version}; {beta}"
    return version


def user_agent_details(device: DeviceInfoProvider, app_info: AppInfo | None) -> str:
    details = {
        "lang": LANG,
        "bindings_version": BINDINGS_VERSION,
    }
    details.update(device.details())
    if app_info is not None:
        details["name"] = app_info.name
        if app_info.partner_id is not None:
            details["partner_id"] = app_info.partner_id
        if app_info.version is not None:
            details["version"] = app_info.version
        if app_info.url is not None:
            details["url"] = app_info.url
    return json.dumps(details)


def authorization_header(publishable_key: str | None, ephemeral_key_secret: str | None = None) -> dict[str, str]:
    bearer = ephemeral_key_secret if ephemeral_key_secret is not None else (publishable_key or "")
    headers = {"Authorization": f"Bearer {bearer}"}
    if is_user_key(publishable_key):
        headers["Stripe-Livemode"] = "false" if get_settings().requests_test_mode else "true"
    return headers


def compose_headers(
    config: ClientConfig,
    device: DeviceInfoProvider,
    publishable_key: str | None,
    ephemeral_key_secret: str | None = None,
    additional_headers: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the full header set for one request.

    ``publishable_key`` is the effective key (config value or the settings
    default), resolved by the caller.
    """
    headers = {
        USER_AGENT_HEADER: user_agent_details(device, config.app_info),
        "Stripe-Version": stripe_version(config.betas),
    }
    if config.stripe_account:
        headers["Stripe-Account"] = config.stripe_account
    headers.update(authorization_header(publishable_key, ephemeral_key_secret))
    if additional_headers:
        headers.update(additional_headers)
    return headers


def payment_user_agent(product_usage: Iterable[str] = ()) -> str:
    """Value of the ``payment_user_agent`` parameter sent with payment calls."""
    return "; ".join([f"stripe-python-bindings/{BINDINGS_VERSION}", *product_usage])


def params_adding_payment_user_agent(params: Mapping, product_usage: Iterable[str] = ()) -> dict:
    new_params = dict(params)
    new_params["payment_user_agent"] = payment_user_agent(product_usage)
    return new_params
