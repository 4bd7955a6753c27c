"""File system helpers for temporary recordings and library assets."""
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime
from typing import Optional


__all__ = [
    "asset_filename",
    "ensure_dir",
    "remove_quietly",
    "temporary_recording_path",
]


logger = logging.getLogger(__name__)

RECORDING_SUFFIX = ".mp4"


def ensure_dir(path: str) -> str:
    """Create *path* if needed and return its absolute form."""
    os.makedirs(path, exist_ok=True)
    return os.path.abspath(path)


def temporary_recording_path(temp_dir: str) -> str:
    """Return a fresh, unique file path for one recording inside *temp_dir*."""
    base = ensure_dir(temp_dir)
    return os.path.join(base, uuid.uuid4().hex + RECORDING_SUFFIX)


def asset_filename(asset_id: str, created_at: Optional[datetime] = None) -> str:
    """Return the library file name for an asset created at *created_at*."""
    stamp = (created_at or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{asset_id}{RECORDING_SUFFIX}"


def remove_quietly(path: Optional[str]) -> bool:
    """Delete *path* if it exists. Returns True when a file was removed."""
    if not path or not os.path.exists(path):
        return False
    try:
        os.remove(path)
        return True
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)
        return False
