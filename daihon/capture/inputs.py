# -*- coding: utf-8 -*-
"""
캡처 입력(카메라/마이크) 래퍼.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import cv2
import numpy as np

from ..core.errors import ConfigurationError, DeviceUnavailableError


__all__ = ["AUDIO", "VIDEO", "CameraInput", "MicrophoneInput", "_import_sd"]


logger = logging.getLogger(__name__)

VIDEO = "video"
AUDIO = "audio"


def _import_sd() -> Any:
    """sounddevice 모듈을 지연 임포트합니다.

    PortAudio 라이브러리가 없으면 임포트 시점에 OSError가 나므로,
    마이크를 실제로 사용할 때만 불러옵니다.

    Returns:
        임포트된 sounddevice 모듈 객체.

    Raises:
        DeviceUnavailableError: sounddevice 또는 PortAudio를 불러올 수 없는 경우.
    """
    try:
        import sounddevice as sd  # type: ignore
        return sd
    except (ImportError, OSError) as exc:
        raise DeviceUnavailableError(
            f"sounddevice를 불러올 수 없습니다 ({exc}).\n\n"
            "`pip install sounddevice` 및 PortAudio 설치를 확인하세요."
        ) from exc


class CameraInput:
    """OpenCV 카메라 입력.

    파이프라인이 실행될 때 ``open``, 멈출 때 ``close`` 됩니다.
    """

    media_type = VIDEO

    def __init__(self, index: int, width: int, height: int, fps: int) -> None:
        if index < 0:
            raise ConfigurationError(f"invalid camera index: {index}")
        if width <= 0 or height <= 0 or fps <= 0:
            raise ConfigurationError(f"invalid camera mode: {width}x{height}@{fps}")
        self.index = index
        self.width = width
        self.height = height
        self.fps = fps
        self._capture: Any = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        """카메라를 열고 해상도/FPS를 요청합니다.

        Raises:
            DeviceUnavailableError: 카메라를 열 수 없는 경우.
        """
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailableError(f"Camera {self.index} could not be opened.")
        # 드라이버가 무시할 수 있음 (가장 가까운 모드로 동작)
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        capture.set(cv2.CAP_PROP_FPS, self.fps)
        logger.info(
            "Camera %s opened: requested=%sx%s actual=%sx%s",
            self.index,
            self.width,
            self.height,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        self._capture = capture

    def read(self) -> Optional[np.ndarray]:
        """다음 BGR 프레임을 읽습니다. 실패하면 None."""
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        return frame

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class MicrophoneInput:
    """sounddevice 마이크 입력.

    콜백은 PortAudio 스레드에서 ``(frames, channels)`` float32 블록으로 호출됩니다.
    """

    media_type = AUDIO

    def __init__(self, device: Optional[int], sample_rate: int, channels: int) -> None:
        sd = _import_sd()
        try:
            sd.check_input_settings(
                device=device, channels=channels, samplerate=sample_rate, dtype="float32"
            )
        except (ValueError, sd.PortAudioError) as exc:
            raise ConfigurationError(str(exc)) from exc
        self.device = device
        self.sample_rate = sample_rate
        self.channels = channels
        self._stream: Any = None

    @property
    def is_active(self) -> bool:
        return self._stream is not None

    def start(self, on_block: Callable[[np.ndarray], None]) -> None:
        """오디오 스트림을 시작합니다.

        Raises:
            DeviceUnavailableError: 스트림을 열 수 없는 경우.
        """
        if self._stream is not None:
            return
        sd = _import_sd()

        def _callback(indata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
            del frames, time_info
            if status:
                logger.warning("Audio callback status: %s", status)
            on_block(indata.copy())

        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
                device=self.device,
                callback=_callback,
            )
            stream.start()
        except sd.PortAudioError as exc:
            raise DeviceUnavailableError(f"Audio input could not be started: {exc}") from exc
        self._stream = stream
        logger.info("Microphone started (device=%s, %s Hz)", self.device, self.sample_rate)

    def stop(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop()
            finally:
                self._stream.close()
                self._stream = None
