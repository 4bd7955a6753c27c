# -*- coding: utf-8 -*-
"""
프롬프터 설정 데이터 클래스 모듈.

JSON 설정 파일을 읽어 ``PrompterConfig``로 변환합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


__all__ = ["DEFAULT_PROMPT_TEXT", "PrompterConfig", "load_config"]


DEFAULT_PROMPT_TEXT = (
    "This is your teleprompter text. You can edit this text to suit your "
    "speech or presentation. The text will scroll automatically while recording."
)

DEFAULT_MIC_USAGE = "録画時に音声を記録するためにマイクを使用します。"

_PERMISSION_VALUES = ("granted", "limited", "denied", "undetermined")


@dataclass
class PrompterConfig:
    """프롬프터 설정값.

    Attributes:
        camera_index: 전면 카메라로 사용할 OpenCV 장치 번호.
        width: 요청 프레임 너비 (픽셀 단위).
        height: 요청 프레임 높이 (픽셀 단위).
        fps: 녹화 파일의 초당 프레임 수.
        microphone_index: sounddevice 입력 장치 번호 (None이면 기본 장치).
        microphone_usage_description: 마이크 사용 목적 선언. 비어 있으면 녹화 비활성.
        sample_rate: 오디오 샘플레이트 (Hz).
        channels: 오디오 채널 수.
        temp_dir: 임시 녹화 파일 폴더.
        library_dir: 미디어 라이브러리 폴더.
        prompt_text: 시작 시 표시할 프롬프트 텍스트.
        mirror_preview: 미리보기 좌우 반전 여부 (녹화 파일은 반전하지 않음).
        permissions: 권한 초기 상태 (camera/microphone/library → 상태 문자열).
        ffmpeg: 오디오/비디오 병합에 사용할 ffmpeg 실행 파일.
    """

    camera_index: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    microphone_index: Optional[int] = None
    microphone_usage_description: Optional[str] = DEFAULT_MIC_USAGE
    sample_rate: int = 48000
    channels: int = 1
    temp_dir: str = field(
        default_factory=lambda: os.path.join(tempfile.gettempdir(), "daihon")
    )
    library_dir: str = field(
        default_factory=lambda: os.path.join(os.path.expanduser("~"), "Videos", "Daihon")
    )
    prompt_text: str = DEFAULT_PROMPT_TEXT
    mirror_preview: bool = True
    permissions: Dict[str, str] = field(default_factory=dict)
    ffmpeg: str = "ffmpeg"

    def __post_init__(self) -> None:
        """입력값 검증 및 보정."""

        if self.camera_index < 0:
            raise ValueError("camera_index must be >= 0")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width/height must be > 0")
        if self.fps < 1:
            raise ValueError("fps must be >= 1")
        if self.sample_rate < 8000:
            raise ValueError("sample_rate must be >= 8000")
        if self.channels not in (1, 2):
            raise ValueError("channels must be 1 or 2")
        for name, value in self.permissions.items():
            if name not in ("camera", "microphone", "library"):
                raise ValueError(f"unknown permission capability: {name}")
            if value not in _PERMISSION_VALUES:
                raise ValueError(f"invalid permission state for {name}: {value}")
        self.temp_dir = os.path.expanduser(self.temp_dir)
        self.library_dir = os.path.expanduser(self.library_dir)

    @property
    def microphone_declared(self) -> bool:
        """마이크 사용 목적이 선언되어 있는지 여부."""
        return bool((self.microphone_usage_description or "").strip())


def load_config(path: Optional[str] = None, **overrides: Any) -> PrompterConfig:
    """JSON 설정 파일을 읽어 ``PrompterConfig``를 생성합니다.

    Args:
        path: JSON 파일 경로. None이면 기본값만 사용.
        **overrides: 파일 값보다 우선하는 필드 값 (None 값은 무시).

    Returns:
        검증된 설정 객체.

    Raises:
        ValueError: 알 수 없는 키가 있거나 값이 올바르지 않은 경우.
        OSError: 파일을 읽을 수 없는 경우.
    """
    data: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"config root must be an object: {path}")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(PrompterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    return PrompterConfig(**data)
