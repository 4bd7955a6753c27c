# -*- coding: utf-8 -*-
"""
세션 상태(Observable) 모듈.

UI가 구독하는 실행/녹화 플래그와 오류 메시지를 보관합니다.
값이 바뀔 때만 시그널을 송출하며, UI 스레드에서만 변경해야 합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

from PyQt5 import QtCore


__all__ = ["RecordingPhase", "SessionState"]


logger = logging.getLogger(__name__)


class RecordingPhase(enum.Enum):
    """녹화 하위 상태."""

    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    RECORDING = "recording"
    FINALIZING = "finalizing"


class SessionState(QtCore.QObject):
    """세션의 공개 상태.

    Signals:
        sig_running(bool): 파이프라인 실행 여부 변경.
        sig_recording(bool): 녹화 여부 변경.
        sig_error(object): 오류 메시지 변경 (str 또는 None).
    """

    sig_running = QtCore.pyqtSignal(bool)
    sig_recording = QtCore.pyqtSignal(bool)
    sig_error = QtCore.pyqtSignal(object)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._running: bool = False
        self._recording: bool = False
        self._error: Optional[str] = None

    # ------------------------------ Running ------------------------------ #
    @property
    def is_running(self) -> bool:
        return self._running

    def set_running(self, running: bool) -> None:
        if running != self._running:
            self._running = running
            self.sig_running.emit(running)

    # ----------------------------- Recording ----------------------------- #
    @property
    def is_recording(self) -> bool:
        return self._recording

    def set_recording(self, recording: bool) -> None:
        if recording != self._recording:
            self._recording = recording
            self.sig_recording.emit(recording)

    # ------------------------------- Error ------------------------------- #
    @property
    def error_message(self) -> Optional[str]:
        return self._error

    def publish_error(self, message: str) -> None:
        """오류 슬롯에 메시지를 기록합니다. 확인되지 않은 이전 메시지는 덮어씁니다.

        확인되지 않은 메시지와 같은 내용이면 시그널을 다시 보내지 않습니다
        (알림 창은 이미 그 메시지를 표시 중).
        """
        logger.warning("Session error: %s", message)
        if message != self._error:
            self._error = message
            self.sig_error.emit(message)

    def clear_error(self) -> None:
        """사용자 확인 후 오류 슬롯을 비웁니다."""
        if self._error is not None:
            self._error = None
            self.sig_error.emit(None)
