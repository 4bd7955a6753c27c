"""Camera/microphone capture pipeline and the session manager that drives it."""
from __future__ import annotations

from .devices import AudioDevice, CameraDevice, DeviceCatalog
from .inputs import CameraInput, MicrophoneInput
from .manager import CaptureSessionManager
from .output import MovieFileOutput
from .pipeline import CapturePipeline, FrameThread

__all__ = [
    "AudioDevice",
    "CameraDevice",
    "CameraInput",
    "CapturePipeline",
    "CaptureSessionManager",
    "DeviceCatalog",
    "FrameThread",
    "MicrophoneInput",
    "MovieFileOutput",
]
