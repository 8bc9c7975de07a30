"""Structured JSON logging for the API bindings.

The bindings only emit records on the ``stripe.client`` logger; they never
configure handlers themselves. Host applications that want JSON lines call
``setup_logging()`` once at startup (stdout, plus STRIPE_LOG_FILE if set).

Request records share one field schema, built by ``request_event``:

    method, path, query_keys, stripe_version, stripe_account, key, body_bytes

Credentials never appear in it: ``key`` is a hint made of the key prefix and
its last four characters. Every record carries the call's request id so the
lines of one call can be correlated while several calls are in flight.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlsplit

from stripe_bindings.api.request import ComposedRequest
from stripe_bindings.config.settings import get_settings

LOGGER_NAME = "stripe.client"

# Call-scoped context for correlating log entries
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "event_data"):
            log_entry.update(record.event_data)
        return json.dumps(log_entry, default=str)


def key_hint(authorization: str | None) -> str:
    """Redact a bearer credential to its prefix and last four characters.

    "Bearer pk_test_51Habcd1234" -> "pk_test_...1234"
    """
    secret = (authorization or "").removeprefix("Bearer").strip()
    if not secret:
        return ""
    prefix, _, rest = secret.rpartition("_")
    tail = rest[-4:] if len(rest) > 4 else ""
    return f"{prefix}_...{tail}" if prefix else f"...{tail}"


def request_event(request: ComposedRequest) -> dict:
    """Log fields describing a composed request, without credentials or values."""
    parts = urlsplit(request.url)
    query_keys = list(dict.fromkeys(key for key, _ in parse_qsl(parts.query, keep_blank_values=True)))
    return {
        "method": request.method.value,
        "path": parts.path,
        "query_keys": query_keys,
        "stripe_version": request.headers.get("Stripe-Version"),
        "stripe_account": request.headers.get("Stripe-Account"),
        "key": key_hint(request.headers.get("Authorization")),
        "body_bytes": len(request.body),
    }


def setup_logging() -> None:
    """Configure the bindings logger with JSON output.

    Host application hook; the bindings never call it themselves.
    """
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Context manager to measure request latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
