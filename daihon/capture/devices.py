# -*- coding: utf-8 -*-
"""
카메라/마이크 장치 탐색 모듈.

- 카메라는 OpenCV ``VideoCapture``로 열어 보고 존재 여부를 판단합니다.
- 마이크는 ``sounddevice.query_devices``로 입력 장치를 조회합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import cv2

from ..core import PrompterConfig
from ..core.errors import DeviceUnavailableError
from .inputs import CameraInput, MicrophoneInput, _import_sd


__all__ = ["AudioDevice", "CameraDevice", "DeviceCatalog"]


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraDevice:
    """카메라 장치 정보.

    Attributes:
        index: OpenCV 장치 번호.
        name: 표시용 이름.
    """

    index: int
    name: str


@dataclass(frozen=True)
class AudioDevice:
    """오디오 입력 장치 정보.

    Attributes:
        index: sounddevice 장치 번호 (None이면 시스템 기본 장치).
        name: 장치 이름.
        max_input_channels: 최대 입력 채널 수.
        default_samplerate: 장치 기본 샘플레이트.
    """

    index: Optional[int]
    name: str
    max_input_channels: int
    default_samplerate: float


class DeviceCatalog:
    """설정에 따라 장치를 찾고 입력 객체를 생성합니다."""

    def __init__(self, config: PrompterConfig) -> None:
        self.config = config

    def front_camera(self) -> Optional[CameraDevice]:
        """설정된 전면 카메라를 열어 보고, 열리면 장치 정보를 반환합니다."""
        index = self.config.camera_index
        capture = cv2.VideoCapture(index)
        try:
            if not capture.isOpened():
                logger.error("Camera %s could not be opened", index)
                return None
            backend = capture.getBackendName() if hasattr(capture, "getBackendName") else ""
            name = f"camera {index}" + (f" ({backend})" if backend else "")
            logger.info("Front camera found: %s", name)
            return CameraDevice(index=index, name=name)
        finally:
            capture.release()

    def microphone(self) -> Optional[AudioDevice]:
        """설정된(또는 기본) 오디오 입력 장치를 반환합니다. 없으면 None."""
        try:
            sd = _import_sd()
        except DeviceUnavailableError as exc:
            logger.error("%s", exc)
            return None
        try:
            info = dict(sd.query_devices(self.config.microphone_index, kind="input"))
        except (ValueError, sd.PortAudioError) as exc:
            logger.error("No audio input device: %s", exc)
            return None
        if info.get("max_input_channels", 0) <= 0:
            return None
        return AudioDevice(
            index=self.config.microphone_index,
            name=str(info.get("name", "")),
            max_input_channels=int(info["max_input_channels"]),
            default_samplerate=float(info.get("default_samplerate", 0.0)),
        )

    def camera_input(self, device: CameraDevice) -> CameraInput:
        return CameraInput(
            device.index, self.config.width, self.config.height, self.config.fps
        )

    def microphone_input(self, device: AudioDevice) -> MicrophoneInput:
        return MicrophoneInput(
            device.index, self.config.sample_rate, self.config.channels
        )
