from __future__ import annotations

import argparse
import logging

import pytest

import emulink.cli.main as main_mod
from emulink.cli.args import hex_bytes, log_level, u32


def test_u32_parses_decimal_and_hex():
    assert u32("42") == 42
    assert u32("0x2A") == 42
    with pytest.raises(argparse.ArgumentTypeError):
        u32("0x1_0000_0000")
    with pytest.raises(argparse.ArgumentTypeError):
        u32("seven")


def test_hex_bytes():
    assert hex_bytes("de ad") == b"\xde\xad"
    with pytest.raises(argparse.ArgumentTypeError):
        hex_bytes("zz")


def test_log_level_mapping():
    assert log_level(0) == logging.WARNING
    assert log_level(1) == logging.INFO
    assert log_level(5) == logging.DEBUG


def test_config_command_prints_effective_config(capsys):
    rc = main_mod.main(["--url", "ws://h:9", "config"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "url: 'ws://h:9'" in out
    assert "driver: 'websocket'" in out


def test_invoke_over_loopback_echo(tmp_path, capsys):
    cfg = tmp_path / "link.yml"
    cfg.write_text("driver: loopback\npoll_interval_s: 0.01\ntransport_params:\n  echo: true\n", encoding="utf-8")

    rc = main_mod.main(["--config", str(cfg), "invoke", "--command", "7", "--id", "42", "--payload", "0102"])

    out = capsys.readouterr().out
    assert rc == 0
    assert "OK id=42 len=2" in out
    assert "0102" in out


def test_invoke_timeout_returns_error_exit(tmp_path, capsys):
    cfg = tmp_path / "link.yml"
    cfg.write_text("driver: loopback\npoll_interval_s: 0.01\n", encoding="utf-8")

    rc = main_mod.main(["--config", str(cfg), "invoke", "--command", "7", "--timeout", "0.05", "--trace"])

    out = capsys.readouterr().out
    assert rc == 1
    assert "ERROR: invocation id=1 timed out" in out


def test_connect_failure_prints_hint(tmp_path, capsys):
    cfg = tmp_path / "link.yml"
    cfg.write_text("driver: loopback\ntransport_params:\n  fail_open: true\n", encoding="utf-8")

    rc = main_mod.main(["--config", str(cfg), "invoke", "--command", "1"])

    out = capsys.readouterr().out
    assert rc == 1
    assert "ERROR: Could not open backend connection." in out
    assert "Hint: loopback configured to refuse connections" in out


def test_bad_config_file_prints_error(tmp_path, capsys):
    cfg = tmp_path / "link.yml"
    cfg.write_text("nonsense: 1\n", encoding="utf-8")

    rc = main_mod.main(["--config", str(cfg), "config"])

    out = capsys.readouterr().out
    assert rc == 1
    assert "ERROR: Unknown config key 'nonsense'." in out
    assert "Hint:" in out
