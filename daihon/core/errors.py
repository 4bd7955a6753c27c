"""Exception types raised inside the capture and library stack.

None of these escape :class:`~daihon.capture.manager.CaptureSessionManager`;
it turns every one of them into a message in the session error slot.
"""
from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "DaihonError",
    "DeviceUnavailableError",
    "LibraryError",
    "RecordingError",
]


class DaihonError(Exception):
    """Base class for application errors."""


class DeviceUnavailableError(DaihonError):
    """A camera or microphone could not be found or opened."""


class ConfigurationError(DaihonError):
    """An input or output could not be attached to the capture pipeline."""


class RecordingError(DaihonError):
    """The movie output failed to produce a finished file."""


class LibraryError(DaihonError):
    """The media library rejected or failed to store an asset."""
