from __future__ import annotations

import textwrap

import pytest

from emulink.app.config import DEFAULT_URL, LinkConfig, load_config
from emulink.core.errors import ConfigError


def _write(tmp_path, text: str):
    p = tmp_path / "link.yml"
    p.write_text(textwrap.dedent(text), encoding="utf-8")
    return p


def test_defaults():
    cfg = LinkConfig()
    assert cfg.url == DEFAULT_URL == "ws://127.0.0.1:15147"
    assert cfg.driver == "websocket"
    assert cfg.invoke_timeout_s == 5.0
    assert cfg.transport_params == {}


def test_load_flat_mapping(tmp_path):
    p = _write(tmp_path, """
        url: ws://10.1.1.1:9000
        invoke_timeout_s: 2.5
        max_pending: 16
    """)
    cfg = load_config(p)
    assert cfg.url == "ws://10.1.1.1:9000"
    assert cfg.invoke_timeout_s == 2.5
    assert cfg.max_pending == 16
    assert cfg.driver == "websocket"


def test_load_nested_under_link_root(tmp_path):
    p = _write(tmp_path, """
        link:
          driver: loopback
          invoke_timeout_s: null
          transport_params:
            echo: true
    """)
    cfg = load_config(p)
    assert cfg.driver == "loopback"
    assert cfg.invoke_timeout_s is None
    assert cfg.transport_params == {"echo": True}


def test_empty_file_gives_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")) == LinkConfig()


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yml")


def test_invalid_yaml_raises(tmp_path):
    with pytest.raises(ConfigError) as ei:
        load_config(_write(tmp_path, "url: [unclosed"))
    assert ei.value.hint


def test_non_mapping_document_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "- a\n- b\n"))


def test_unknown_key_raises_with_hint(tmp_path):
    with pytest.raises(ConfigError) as ei:
        load_config(_write(tmp_path, "baudrate: 115200\n"))
    assert ei.value.details == {"key": "baudrate"}
    assert "url" in ei.value.hint


@pytest.mark.parametrize(
    "kwargs",
    [
        {"url": ""},
        {"open_timeout_s": 0},
        {"invoke_timeout_s": -1},
        {"poll_interval_s": "fast"},
        {"max_pending": 0},
        {"max_pending": True},
        {"max_frame_bytes": 1.5},
        {"transport_params": ["echo"]},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ConfigError):
        LinkConfig(**kwargs)


def test_with_overrides_ignores_none():
    cfg = LinkConfig().with_overrides(url="ws://h:1", driver=None)
    assert cfg.url == "ws://h:1"
    assert cfg.driver == "websocket"
    assert LinkConfig().with_overrides(url=None) == LinkConfig()
