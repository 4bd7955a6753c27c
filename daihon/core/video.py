"""Video related utilities."""
from __future__ import annotations

import cv2
import numpy as np

__all__ = ["fourcc_mp4v", "mirror_frame"]


def fourcc_mp4v() -> int:
    """Return the integer FourCC for MP4V videos."""
    return cv2.VideoWriter_fourcc(*"mp4v")


def mirror_frame(frame: np.ndarray) -> np.ndarray:
    """Flip a frame horizontally, the way a front camera preview is shown."""
    return cv2.flip(frame, 1)
