"""Blocking file helpers for exported quote documents.

Call these through ``hass.async_add_executor_job``.
"""

from __future__ import annotations

import os
from pathlib import Path


def read_document(path: str | Path) -> str:
    """Return the UTF-8 text stored at ``path``."""
    return Path(path).read_text(encoding="utf-8")


def write_document(path: str | Path, text: str) -> Path:
    """Atomically write ``text`` to ``path``, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(f"{target.name}.tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, target)
    return target


__all__ = ["read_document", "write_document"]
