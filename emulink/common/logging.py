# emulink/common/logging.py
"""
Logging setup for the CLI.

Library code only ever calls logging.getLogger(...); handlers are a
presentation-layer concern and are installed here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.WARNING, *, log_file: Optional[Path] = None) -> None:
    """
    Add a stream handler (and optionally a file handler) to the root logger (idempotent).
    """
    root = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(formatter)
        root.addHandler(sh)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        target = str(log_file.resolve())
        if not any(
            isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target
            for h in root.handlers
        ):
            fh = logging.FileHandler(log_file, encoding="utf-8", delay=True)
            fh.setFormatter(formatter)
            root.addHandler(fh)

    root.setLevel(level)
