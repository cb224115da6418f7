"""Logging for autoapply: a stderr console plus a daily file, set up on first use.

stdout belongs to the CLI's JSON output, so the console writes to stderr.
``set_debug`` is the extension's debug switch; the CLI flips it from
``--debug`` or ``Settings.debug``.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER = "autoapply.console"
FILE_HANDLER = "autoapply.file"
_configured = False


def log_dir() -> Path:
    return Path(os.environ.get("AUTOAPPLY_LOG_DIR") or Path(__file__).resolve().parent.parent / "logs")


def _base_level() -> int:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> int:
    """Turn the debug channel on (or back to LOG_LEVEL). Returns the new level."""
    get_logger(__name__)
    level = logging.DEBUG if enabled else _base_level()
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if handler.get_name() == CONSOLE_HANDLER:
            handler.setLevel(level)
    return level


def _configure() -> None:
    level = _base_level()
    root = logging.getLogger()
    root.setLevel(level)

    # a host (pytest, an embedding app) already owns the handlers
    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stderr)
    console.set_name(CONSOLE_HANDLER)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if os.environ.get("AUTOAPPLY_LOG_FILE", "true").strip().lower() in ("0", "false", "no", "off"):
        return
    directory = log_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(directory / f"autoapply_{date.today():%Y-%m-%d}.log", encoding="utf-8")
    except OSError as exc:
        logging.getLogger(__name__).warning("File logging off, %s is not writable: %s", directory, exc)
        return
    fh.set_name(FILE_HANDLER)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    root.addHandler(fh)
