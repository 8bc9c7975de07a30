"""Publishable key validation and classification.

A misused key (empty, or a server-side secret key) is an integration bug,
not a runtime condition: debug builds fail fast with KeyMisuseError,
release builds log it and carry on.
"""

from stripe_bindings.api.errors import KeyMisuseError
from stripe_bindings.config.settings import get_settings
from stripe_bindings.logging.events import get_logger

SECRET_KEY_PREFIX = "sk_"
TEST_MODE_KEY_PREFIX = "pk_test"
USER_KEY_PREFIX = "uk_"

KEYS_DOC_URL = "https://stripe.com/docs/keys"

# Process-wide, set once and never reset
_did_show_testmode_warning = False


def _misuse(message: str) -> None:
    if get_settings().debug:
        raise KeyMisuseError(message)
    get_logger().error(message, extra={"event_data": {"event": "key_misuse"}})


def validate_key(key: str | None) -> None:
    """Check a publishable key before it is used for requests."""
    global _did_show_testmode_warning

    if not key:
        _misuse(f"You must use a valid publishable key. For more info, see {KEYS_DOC_URL}")
        return

    if key.startswith(SECRET_KEY_PREFIX):
        _misuse(
            "You are using a secret key. Use a publishable key instead. "
            f"For more info, see {KEYS_DOC_URL}"
        )

    if not get_settings().debug and is_test_mode_key(key) and not _did_show_testmode_warning:
        get_logger().warning(
            "You're using your Stripe testmode key. "
            "Make sure to use your livemode key when shipping to production!",
            extra={"event_data": {"event": "testmode_key"}},
        )
        _did_show_testmode_warning = True


def is_test_mode_key(key: str | None) -> bool:
    if not key:
        return False
    return key.lower().startswith(TEST_MODE_KEY_PREFIX)


def is_user_key(key: str | None) -> bool:
    if not key:
        return False
    return key.startswith(USER_KEY_PREFIX)
