"""Call result: exactly one Success or Failure per call."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from stripe_bindings.api.errors import StripeClientError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: StripeClientError

    @property
    def ok(self) -> bool:
        return False


ApiResult = Success[T] | Failure
