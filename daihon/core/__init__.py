"""Core models and helpers shared by the capture stack and the GUI."""
from __future__ import annotations

from .config import DEFAULT_PROMPT_TEXT, PrompterConfig, load_config
from .errors import (
    ConfigurationError,
    DaihonError,
    DeviceUnavailableError,
    LibraryError,
    RecordingError,
)
from .paths import asset_filename, ensure_dir, remove_quietly, temporary_recording_path
from .permissions import (
    Capability,
    PermissionProvider,
    PermissionState,
    PermissionStore,
    check_gate,
)
from .state import RecordingPhase, SessionState
from .video import fourcc_mp4v, mirror_frame

__all__ = [
    "Capability",
    "ConfigurationError",
    "DEFAULT_PROMPT_TEXT",
    "DaihonError",
    "DeviceUnavailableError",
    "LibraryError",
    "PermissionProvider",
    "PermissionState",
    "PermissionStore",
    "PrompterConfig",
    "RecordingError",
    "RecordingPhase",
    "SessionState",
    "asset_filename",
    "check_gate",
    "ensure_dir",
    "fourcc_mp4v",
    "load_config",
    "mirror_frame",
    "remove_quietly",
    "temporary_recording_path",
]
