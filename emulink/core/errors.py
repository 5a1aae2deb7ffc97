# emulink/core/errors.py
from __future__ import annotations


class EmuLinkError(Exception):
    """
    Base class for all expected operational errors in emulink.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, error channels, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no connection yet)
# ---------------------------------------------------------------------------

class ConfigError(EmuLinkError):
    """
    Link configuration is invalid.

    Examples:
      - unknown config key
      - wrong value type / out-of-range value
      - unknown transport driver
      - driver constructor does not accept the given params
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Connection lifecycle errors
# ---------------------------------------------------------------------------

class ConnectError(EmuLinkError):
    """
    Transport could not be opened.

    Examples:
      - backend not listening on the configured address
      - handshake rejected
      - open timeout
    """
    code = "connect_error"
