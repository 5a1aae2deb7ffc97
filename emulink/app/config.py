# emulink/app/config.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from emulink.core.errors import ConfigError

DEFAULT_URL = "ws://127.0.0.1:15147"


@dataclass(frozen=True)
class LinkConfig:
    url: str = DEFAULT_URL
    driver: str = "websocket"
    open_timeout_s: float = 5.0
    invoke_timeout_s: Optional[float] = 5.0   # None/0 disables per-invocation timeouts
    poll_interval_s: float = 0.05
    max_pending: Optional[int] = 1024         # None disables the bound
    max_frame_bytes: Optional[int] = 2**20    # None = no limit
    transport_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require(bool(self.url) and isinstance(self.url, str), "url", self.url, "non-empty string")
        _require(bool(self.driver) and isinstance(self.driver, str), "driver", self.driver, "non-empty string")
        _require(_is_number(self.open_timeout_s) and self.open_timeout_s > 0,
                 "open_timeout_s", self.open_timeout_s, "number > 0")
        _require(self.invoke_timeout_s is None or (_is_number(self.invoke_timeout_s) and self.invoke_timeout_s >= 0),
                 "invoke_timeout_s", self.invoke_timeout_s, "number >= 0 or null")
        _require(_is_number(self.poll_interval_s) and self.poll_interval_s > 0,
                 "poll_interval_s", self.poll_interval_s, "number > 0")
        _require(self.max_pending is None or (_is_int(self.max_pending) and self.max_pending > 0),
                 "max_pending", self.max_pending, "int > 0 or null")
        _require(self.max_frame_bytes is None or (_is_int(self.max_frame_bytes) and self.max_frame_bytes > 0),
                 "max_frame_bytes", self.max_frame_bytes, "int > 0 or null")
        _require(isinstance(self.transport_params, Mapping),
                 "transport_params", self.transport_params, "mapping")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LinkConfig":
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ConfigError(
                    f"Unknown config key '{key}'.",
                    hint=f"Valid keys: {sorted(known)}",
                    details={"key": key},
                )
        values = dict(data)
        if values.get("transport_params", {}) is None:
            del values["transport_params"]
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "LinkConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def as_dict(self) -> dict:
        return asdict(self)


def load_config(path: str | Path) -> LinkConfig:
    """
    Load a LinkConfig from YAML. The mapping may sit at the document root or
    under a `link:` key. Missing keys keep their defaults.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", details={"path": str(path)})

    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            "Failed to parse config file.",
            hint=str(e),
            details={"path": str(path)},
        ) from None

    if not isinstance(doc, dict):
        raise ConfigError("Config file must contain a mapping.", details={"path": str(path)})

    data = doc.get("link", doc)
    if not isinstance(data, dict):
        raise ConfigError("'link' must be a mapping.", details={"path": str(path)})

    return LinkConfig.from_mapping(data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require(ok: bool, name: str, value: Any, expected: str) -> None:
    if not ok:
        raise ConfigError(
            f"Invalid value for '{name}': {value!r}.",
            hint=f"Expected {expected}.",
            details={"key": name, "value": value},
        )
