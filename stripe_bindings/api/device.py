"""Device and platform metadata for the user-agent header."""

import platform
from abc import ABC, abstractmethod


class DeviceInfoProvider(ABC):
    """Supplies the device fields of the X-Stripe-User-Agent header."""

    @abstractmethod
    def details(self) -> dict[str, str]:
        """Return any of os_version, type, model, vendor_identifier.

        Keys whose value is unknown must be left out.
        """
        ...


class PlatformDeviceInfo(DeviceInfoProvider):
    """Reads metadata of the host running the interpreter.

    The platform module has no hardware model, so ``model`` is only sent
    when the host passes one in.
    """

    def __init__(self, model: str | None = None, vendor_identifier: str | None = None):
        self._model = model
        self._vendor_identifier = vendor_identifier

    def details(self) -> dict[str, str]:
        candidates = {
            "os_version": platform.release(),
            "type": platform.machine(),
            "model": self._model,
            "vendor_identifier": self._vendor_identifier,
        }
        return {k: v for k, v in candidates.items() if v}


class StaticDeviceInfo(DeviceInfoProvider):
    """Fixed metadata, for embedding hosts that collect it themselves."""

    def __init__(self, **details: str | None):
        self._details = {k: v for k, v in details.items() if v}

    def details(self) -> dict[str, str]:
        return dict(self._details)
