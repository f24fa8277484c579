# src/chatgate/core/logging.py
from __future__ import annotations
import logging
import os

_FMT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    resolved = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """
    Configure root logging once. Idempotent.

    `level` wins over LOG_LEVEL; both default to INFO. When a handler is
    already installed (pytest, uvicorn) only the level is adjusted.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_FMT, datefmt=_DATEFMT))
    root.addHandler(handler)


def mask_key(key: str | None, keep: int = 6) -> str:
    """API keys only ever reach the log in this form."""
    if not key:
        return "<none>"
    return key[:keep] + "...(masked)..."
