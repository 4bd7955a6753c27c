"""Teleprompter that records the front camera while showing the script."""
from __future__ import annotations

from .capture import CapturePipeline, CaptureSessionManager, MovieFileOutput
from .core import (
    Capability,
    PermissionState,
    PermissionStore,
    PrompterConfig,
    RecordingPhase,
    SessionState,
    load_config,
)
from .library import Asset, MediaLibrary

__all__ = [
    "Asset",
    "Capability",
    "CapturePipeline",
    "CaptureSessionManager",
    "MediaLibrary",
    "MovieFileOutput",
    "PermissionState",
    "PermissionStore",
    "PrompterConfig",
    "RecordingPhase",
    "SessionState",
    "load_config",
    "main",
    "TeleprompterWindow",
]


def __getattr__(name: str):  # pragma: no cover - thin lazy loader
    if name in {"main", "TeleprompterWindow"}:
        from . import gui

        return getattr(gui, name)
    raise AttributeError(name)
