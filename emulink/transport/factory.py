# emulink/transport/factory.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from emulink.core.errors import ConfigError
from emulink.transport.base import Transport
from emulink.transport.errors import TransportError
from emulink.transport.registry import TransportDriverRegistry

if TYPE_CHECKING:
    from emulink.app.config import LinkConfig


class TransportFactory:
    """
    Constructs a transport instance from a LinkConfig.
    Note: does NOT open the transport.
    """

    def __init__(self, drivers: Optional[TransportDriverRegistry] = None):
        self._drivers = drivers or TransportDriverRegistry.default()

    @staticmethod
    def params_for(config: "LinkConfig") -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if config.driver.lower() == "websocket":
            params = {
                "url": config.url,
                "open_timeout": config.open_timeout_s,
                "max_size": config.max_frame_bytes,
            }
        # explicit transport_params win over derived ones
        params.update(config.transport_params)
        return params

    def create(self, config: "LinkConfig") -> Transport:
        if not self._drivers.has(config.driver):
            raise ConfigError(
                f"Unknown transport driver '{config.driver}'.",
                hint=f"Known drivers: {', '.join(self._drivers.names())}",
                details={"driver": config.driver, "known": self._drivers.names()},
            )

        params = self.params_for(config)
        try:
            return self._drivers.create(config.driver, **params)
        except (TransportError, TypeError) as e:
            # constructor mismatch
            raise ConfigError(
                f"Failed to construct transport (driver='{config.driver}').",
                hint=str(e),
                details={"driver": config.driver, "params": sorted(params), "known": self._drivers.names()},
            ) from None
