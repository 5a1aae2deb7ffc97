# emulink/__init__.py

from .app.config import LinkConfig, load_config
from .core.errors import ConfigError, ConnectError, EmuLinkError
from .runtime.link import ProtocolClient
from .runtime.state import ConnectionState, LinkStatus

__version__ = "0.1.0"

__all__ = [
    "LinkConfig", "load_config",
    "EmuLinkError", "ConfigError", "ConnectError",
    "ProtocolClient",
    "ConnectionState", "LinkStatus",
]
