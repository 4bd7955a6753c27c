# -*- coding: utf-8 -*-
"""
캡처 파이프라인.

- 카메라 입력 1개, 마이크 입력 0~1개, 동영상 출력 1개로 구성됩니다.
- 실행 중에는 ``FrameThread``가 프레임을 읽어 출력으로 넘기고 미리보기를 송출합니다.
- ``start_running``/``stop_running``은 블로킹 호출이므로 백그라운드에서 호출합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional, Union

import numpy as np
from PyQt5 import QtCore

from ..core import messages
from ..core.errors import ConfigurationError, DaihonError, DeviceUnavailableError
from ..core.video import mirror_frame
from .inputs import AUDIO, VIDEO, CameraInput, MicrophoneInput
from .output import MovieFileOutput


__all__ = ["CapturePipeline", "FrameThread"]


logger = logging.getLogger(__name__)

CaptureInput = Union[CameraInput, MicrophoneInput]


class FrameThread(QtCore.QThread):
    """카메라 프레임 루프용 QThread.

    Signals:
        sig_frame(np.ndarray): 미리보기 프레임 (BGR).
        sig_status(str): 진행 상태 메시지.
        sig_failed(str): 카메라가 프레임을 더 이상 보내지 않을 때.
    """

    sig_frame = QtCore.pyqtSignal(np.ndarray)
    sig_status = QtCore.pyqtSignal(str)
    sig_failed = QtCore.pyqtSignal(str)

    # 약 2초 동안 프레임이 없으면 종료
    MAX_FAILURES = 60

    def __init__(
        self,
        camera: CameraInput,
        output: Optional[MovieFileOutput],
        mirror: bool,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.camera = camera
        self.output = output
        self.mirror = mirror
        self._stop = False

    # ------------------------------ Control ------------------------------ #
    def stop(self) -> None:
        """루프 종료 요청."""
        self._stop = True

    # --------------------------------- Run -------------------------------- #
    def run(self) -> None:
        failures = 0
        while not self._stop:
            frame = self.camera.read()
            if frame is None:
                failures += 1
                if failures >= self.MAX_FAILURES:
                    self.sig_failed.emit(messages.CAMERA_STOPPED)
                    logger.error("Camera stopped delivering frames")
                    break
                time.sleep(0.03)
                continue
            failures = 0

            if self.output is not None:
                self.output.write_video(frame)

            preview = mirror_frame(frame) if self.mirror else frame
            self.sig_frame.emit(preview)


class CapturePipeline(QtCore.QObject):
    """카메라/마이크 입력과 동영상 출력을 묶는 파이프라인.

    Signals:
        sig_frame(np.ndarray): 미리보기 프레임 (BGR, 설정에 따라 좌우 반전).
        sig_status(str): 진행 상태 메시지.
        sig_failed(str): 실행 중 카메라 입력이 끊김. 장치는 열린 채로 남으므로
            수신 측에서 ``stop_running``을 호출해야 합니다.
    """

    sig_frame = QtCore.pyqtSignal(np.ndarray)
    sig_status = QtCore.pyqtSignal(str)
    sig_failed = QtCore.pyqtSignal(str)

    def __init__(
        self, mirror_preview: bool = True, parent: Optional[QtCore.QObject] = None
    ) -> None:
        super().__init__(parent)
        self.mirror_preview = mirror_preview
        self._inputs: List[CaptureInput] = []
        self._output: Optional[MovieFileOutput] = None
        self._running: bool = False
        self._configuring: int = 0
        self._pending_audio: Optional[MicrophoneInput] = None
        self._frame_thread: Optional[FrameThread] = None

    # --------------------------- Configuration --------------------------- #
    def begin_configuration(self) -> None:
        self._configuring += 1

    def commit_configuration(self) -> None:
        """구성 변경을 확정합니다. 실행 중에 추가된 마이크는 여기서 시작됩니다.

        Raises:
            DeviceUnavailableError: 새 마이크 스트림을 시작할 수 없는 경우.
        """
        self._configuring = max(0, self._configuring - 1)
        if self._configuring or self._pending_audio is None:
            return
        mic, self._pending_audio = self._pending_audio, None
        if self._running:
            self._start_microphone(mic)

    @property
    def inputs(self) -> List[CaptureInput]:
        return list(self._inputs)

    @property
    def video_input(self) -> Optional[CameraInput]:
        for inp in self._inputs:
            if inp.media_type == VIDEO:
                return inp  # type: ignore[return-value]
        return None

    @property
    def audio_input(self) -> Optional[MicrophoneInput]:
        for inp in self._inputs:
            if inp.media_type == AUDIO:
                return inp  # type: ignore[return-value]
        return None

    @property
    def has_audio_input(self) -> bool:
        return self.audio_input is not None

    def can_add_input(self, inp: CaptureInput) -> bool:
        """같은 종류의 입력이 아직 없을 때만 추가할 수 있습니다."""
        return all(existing.media_type != inp.media_type for existing in self._inputs)

    def add_input(self, inp: CaptureInput) -> None:
        if not self.can_add_input(inp):
            raise ConfigurationError(f"A {inp.media_type} input is already attached.")
        self._inputs.append(inp)
        if inp.media_type == AUDIO:
            self._pending_audio = inp  # type: ignore[assignment]
            if not self._configuring:
                self.commit_configuration()

    def remove_input(self, inp: CaptureInput) -> None:
        if inp in self._inputs:
            self._inputs.remove(inp)
        if self._pending_audio is inp:
            self._pending_audio = None
        if inp.media_type == AUDIO:
            inp.stop()  # type: ignore[union-attr]

    @property
    def output(self) -> Optional[MovieFileOutput]:
        return self._output

    def can_add_output(self, output: MovieFileOutput) -> bool:
        return self._output is None and not self._running

    def add_output(self, output: MovieFileOutput) -> None:
        if not self.can_add_output(output):
            raise ConfigurationError("Cannot add movie output.")
        self._output = output

    # ------------------------------ Running ------------------------------ #
    @property
    def is_running(self) -> bool:
        return self._running

    def start_running(self) -> bool:
        """카메라(와 마이크)를 열고 프레임 루프를 시작합니다. 블로킹 호출.

        Returns:
            새로 시작했으면 True, 이미 실행 중이면 False.

        Raises:
            DeviceUnavailableError: 카메라/마이크를 열 수 없는 경우.
        """
        if self._running:
            return False
        camera = self.video_input
        if camera is None:
            raise DeviceUnavailableError("No video input is attached.")

        camera.open()
        mic = self.audio_input
        if mic is not None:
            try:
                self._start_microphone(mic)
            except DaihonError:
                camera.close()
                raise

        thread = FrameThread(camera, self._output, self.mirror_preview)
        thread.sig_frame.connect(self.sig_frame)
        thread.sig_status.connect(self.sig_status)
        thread.sig_failed.connect(self.sig_failed)
        self._frame_thread = thread
        self._running = True
        thread.start()
        self.sig_status.emit("Camera running.")
        logger.info("Capture pipeline started")
        return True

    def stop_running(self) -> bool:
        """프레임 루프를 멈추고 장치를 닫습니다. 블로킹 호출.

        Returns:
            실제로 멈췄으면 True, 실행 중이 아니었으면 False.
        """
        if not self._running:
            return False
        thread, self._frame_thread = self._frame_thread, None
        if thread is not None:
            thread.stop()
            thread.wait(3000)
        mic = self.audio_input
        if mic is not None:
            mic.stop()
        camera = self.video_input
        if camera is not None:
            camera.close()
        self._running = False
        self.sig_status.emit("Camera stopped.")
        logger.info("Capture pipeline stopped")
        return True

    # ------------------------------ Internals ---------------------------- #
    def _start_microphone(self, mic: MicrophoneInput) -> None:
        output = self._output
        if output is None:
            mic.start(lambda block: None)
        else:
            mic.start(output.write_audio)
