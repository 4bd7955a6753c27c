"""Media library where finished recordings are stored."""
from __future__ import annotations

from .media_library import Asset, MediaLibrary

__all__ = ["Asset", "MediaLibrary"]
