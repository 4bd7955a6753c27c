# -*- coding: utf-8 -*-
"""
캡처 세션 관리자.

카메라+마이크 캡처 파이프라인의 수명 주기, 권한 게이트, 녹화 시작/종료,
완료된 파일의 라이브러리 저장을 담당합니다.

- 모든 실패는 ``SessionState``의 오류 슬롯 하나로 보고되며 예외를 밖으로 던지지 않습니다.
- 권한 요청/완료 콜백은 ``dispatch``를 거쳐 UI 스레드에서 상태를 변경합니다.
- 파이프라인 시작/정지와 라이브러리 저장은 ``background``에서 실행됩니다.
- 임시 녹화 파일은 저장 시도 후(성공/실패/권한 거부) 항상 삭제합니다.

녹화 하위 상태::

    IDLE -> REQUESTING_PERMISSION -> RECORDING -> FINALIZING -> IDLE

Docstring 스타일: Google Style
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from PyQt5 import QtCore

from ..core import messages
from ..core.config import PrompterConfig
from ..core.errors import DaihonError
from ..core.paths import remove_quietly, temporary_recording_path
from ..core.permissions import (
    Capability,
    PermissionProvider,
    PermissionStore,
    check_gate,
)
from ..core.state import RecordingPhase, SessionState
from ..core.threads import BackgroundRunner, MainThreadDispatcher
from ..library import Asset, MediaLibrary
from .devices import DeviceCatalog
from .inputs import CameraInput, MicrophoneInput
from .output import MovieFileOutput
from .pipeline import CapturePipeline


__all__ = ["CaptureSessionManager"]


logger = logging.getLogger(__name__)

Dispatch = Callable[[Callable[[], None]], None]
Background = Callable[..., Any]


def _process_events() -> bool:
    """대기 중인 Qt 이벤트를 처리합니다. QApplication이 없으면 False."""
    app = QtCore.QCoreApplication.instance()
    if app is None:
        return False
    app.processEvents(QtCore.QEventLoop.AllEvents, 50)
    return True


class CaptureSessionManager(QtCore.QObject):
    """화면 하나에 대응하는 캡처 세션.

    UI는 ``start``/``stop``/``start_recording``/``stop_recording`` 네 가지 명령만
    호출하고, ``state``를 구독합니다.

    Signals:
        sig_status(str): 상태 표시줄용 메시지.
        sig_saved(object): 라이브러리에 저장된 ``Asset``.
    """

    sig_status = QtCore.pyqtSignal(str)
    sig_saved = QtCore.pyqtSignal(object)

    def __init__(
        self,
        config: Optional[PrompterConfig] = None,
        *,
        state: Optional[SessionState] = None,
        permissions: Optional[PermissionProvider] = None,
        devices: Optional[DeviceCatalog] = None,
        pipeline: Optional[CapturePipeline] = None,
        output: Optional[MovieFileOutput] = None,
        library: Optional[MediaLibrary] = None,
        dispatch: Optional[Dispatch] = None,
        background: Optional[Background] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.config = config or PrompterConfig()
        self.state = state or SessionState(self)
        self.permissions = permissions or PermissionStore.from_config(
            self.config.permissions
        )
        self.devices = devices or DeviceCatalog(self.config)
        self.pipeline = pipeline or CapturePipeline(
            mirror_preview=self.config.mirror_preview, parent=self
        )
        self.output = output or MovieFileOutput(
            fps=self.config.fps,
            sample_rate=self.config.sample_rate,
            channels=self.config.channels,
            ffmpeg=self.config.ffmpeg,
        )
        self.library = library or MediaLibrary(self.config.library_dir)

        self._runner: Optional[BackgroundRunner] = None
        if dispatch is None:
            dispatch = MainThreadDispatcher(self).dispatch
        if background is None:
            self._runner = BackgroundRunner(self)
            background = self._runner.submit
        self._dispatch: Dispatch = dispatch
        self._background: Background = background

        self.phase: RecordingPhase = RecordingPhase.IDLE
        self.video_input: Optional[CameraInput] = None
        self.audio_input: Optional[MicrophoneInput] = None
        self.recording_path: Optional[str] = None
        self.configured: bool = False
        self._starting: bool = False
        self._stopping: bool = False

        self.pipeline.sig_failed.connect(self._on_pipeline_failed)
        self.configure()

    # --------------------------- Configuration --------------------------- #
    def configure(self) -> bool:
        """전면 카메라 입력과 동영상 출력을 파이프라인에 연결합니다.

        생성자에서 한 번만 호출됩니다. 실패하면 오류 슬롯에 메시지를 남기고
        구성을 중단합니다.

        Returns:
            구성에 성공하면 True.
        """
        if self.configured:
            return True
        self.pipeline.begin_configuration()
        try:
            device = self.devices.front_camera()
            if device is None:
                self._publish_error(messages.NO_FRONT_CAMERA)
                return False

            try:
                video_input = self.devices.camera_input(device)
            except DaihonError as exc:
                self._publish_error(messages.video_input_error(exc))
                return False
            if not self.pipeline.can_add_input(video_input):
                self._publish_error(messages.CANNOT_ADD_VIDEO_INPUT)
                return False
            self.pipeline.add_input(video_input)
            self.video_input = video_input

            if not self.pipeline.can_add_output(self.output):
                self._publish_error(messages.CANNOT_ADD_MOVIE_OUTPUT)
                return False
            self.pipeline.add_output(self.output)

            self.configured = True
            logger.info("Capture session configured with %s", device.name)
            return True
        finally:
            self.pipeline.commit_configuration()

    # ------------------------------ Session ------------------------------ #
    def start(self) -> None:
        """카메라 권한을 확인하고 파이프라인을 시작합니다. 실행 중이면 무시."""
        check_gate(
            self.permissions,
            Capability.CAMERA,
            on_granted=self._start_pipeline,
            on_denied=lambda: self._publish_error(messages.CAMERA_DENIED),
            dispatch=self._dispatch,
        )

    def stop(self) -> None:
        """실행 중이면 파이프라인을 멈춥니다. 녹화 중이면 먼저 녹화를 끝냅니다."""
        if not self.pipeline.is_running or self._stopping:
            return
        if self.output.is_recording:
            self.stop_recording()
        self._stopping = True
        self._background(
            self.pipeline.stop_running,
            on_done=self._on_pipeline_changed,
            on_error=self._on_pipeline_error,
        )

    def _start_pipeline(self) -> None:
        if self.pipeline.is_running or self._starting:
            return
        if not self.configured:
            logger.warning("Capture session is not configured; not starting")
            return
        self._starting = True
        self._background(
            self.pipeline.start_running,
            on_done=self._on_pipeline_changed,
            on_error=self._on_pipeline_error,
        )

    def _on_pipeline_changed(self, _result: Any = None) -> None:
        self._starting = False
        self._stopping = False
        running = self.pipeline.is_running
        self.state.set_running(running)
        self.sig_status.emit("Camera running." if running else "Camera stopped.")

    def _on_pipeline_error(self, message: str) -> None:
        self._starting = False
        self._stopping = False
        self.state.set_running(self.pipeline.is_running)
        self._publish_error(message)

    def _on_pipeline_failed(self, message: str) -> None:
        """실행 중 카메라가 끊겼을 때: 녹화를 마무리하고 파이프라인을 닫습니다."""
        logger.error("Capture pipeline failed: %s", message)
        self.stop()
        self._publish_error(message)

    # ----------------------------- Recording ----------------------------- #
    def start_recording(self) -> None:
        """마이크 선언/권한을 확인하고 임시 파일로 녹화를 시작합니다.

        녹화 중이거나 권한 요청 중이면 무시합니다.
        """
        if self.phase is not RecordingPhase.IDLE or self.output.is_recording:
            return

        if not self.config.microphone_declared:
            self._publish_error(messages.MIC_NOT_DECLARED)
            return

        check_gate(
            self.permissions,
            Capability.MICROPHONE,
            on_granted=self._begin_recording,
            on_denied=lambda: self._abort_recording(messages.MIC_DENIED),
            on_requesting=lambda: self._set_phase(RecordingPhase.REQUESTING_PERMISSION),
            on_unknown=lambda: self._abort_recording(messages.MIC_UNKNOWN),
            dispatch=self._dispatch,
        )

    def stop_recording(self) -> None:
        """녹화 중이면 파일 마무리를 요청합니다. 아니면 무시."""
        if not self.output.is_recording:
            return
        self._set_phase(RecordingPhase.FINALIZING)
        self.sig_status.emit("Finishing recording...")
        self.output.stop_recording()

    def _begin_recording(self) -> None:
        if self.output.is_recording:
            return
        if not self.pipeline.is_running:
            self._abort_recording(messages.CAMERA_NOT_RUNNING)
            return
        if not self._attach_microphone():
            self._set_phase(RecordingPhase.IDLE)
            return

        path = temporary_recording_path(self.config.temp_dir)
        try:
            self.output.start_recording(path, self._recording_finished_from_output)
        except (DaihonError, OSError) as exc:
            self._abort_recording(str(exc))
            return

        self.recording_path = path
        self._set_phase(RecordingPhase.RECORDING)
        self.state.set_recording(True)
        self.sig_status.emit("Recording...")

    def _attach_microphone(self) -> bool:
        """마이크 입력이 없으면 한 번만 연결합니다."""
        if self.pipeline.has_audio_input:
            return True

        device = self.devices.microphone()
        if device is None:
            self._publish_error(messages.NO_AUDIO_DEVICE)
            return False
        try:
            mic = self.devices.microphone_input(device)
        except DaihonError as exc:
            self._publish_error(messages.audio_input_error(exc))
            return False

        self.pipeline.begin_configuration()
        added = self.pipeline.can_add_input(mic)
        if added:
            self.pipeline.add_input(mic)
        try:
            self.pipeline.commit_configuration()
        except DaihonError as exc:
            self.pipeline.remove_input(mic)
            self._publish_error(messages.audio_input_error(exc))
            return False
        if not added:
            self._publish_error(messages.CANNOT_ADD_AUDIO_INPUT)
            return False

        self.audio_input = mic
        logger.info("Microphone attached: %s", device.name)
        return True

    def _abort_recording(self, message: str) -> None:
        self._set_phase(RecordingPhase.IDLE)
        self._publish_error(message)

    def _recording_finished_from_output(
        self, path: str, error: Optional[BaseException]
    ) -> None:
        # 출력의 마무리 스레드에서 호출됨
        self._dispatch(lambda: self.on_recording_finished(path, error))

    def on_recording_finished(self, path: str, error: Optional[BaseException]) -> None:
        """녹화 1회가 끝났을 때(성공/실패) UI 스레드에서 한 번 호출됩니다."""
        self._set_phase(RecordingPhase.IDLE)
        self.recording_path = None
        self.state.set_recording(False)

        if error is not None:
            remove_quietly(path)
            self._publish_error(str(error) or type(error).__name__)
            return

        check_gate(
            self.permissions,
            Capability.LIBRARY,
            on_granted=lambda: self._save_to_library(path),
            on_denied=lambda: self._discard(path, messages.LIBRARY_DENIED),
            dispatch=self._dispatch,
        )

    # ------------------------------ Library ------------------------------ #
    def _save_to_library(self, path: str) -> None:
        self.sig_status.emit("Saving to library...")
        self._background(
            lambda: self.library.import_video(path),
            on_done=lambda asset: self._on_saved(path, asset),
            on_error=lambda msg: self._discard(path, msg or messages.SAVE_FAILED),
        )

    def _on_saved(self, path: str, asset: Asset) -> None:
        remove_quietly(path)
        self.sig_status.emit(f"Saved: {asset.path}")
        self.sig_saved.emit(asset)

    def _discard(self, path: str, message: str) -> None:
        remove_quietly(path)
        self._publish_error(message)

    # ------------------------------- State ------------------------------- #
    def clear_error(self) -> None:
        """사용자가 오류를 확인했을 때 호출합니다."""
        self.state.clear_error()

    def shutdown(self, timeout_ms: int = 3000) -> None:
        """녹화와 파이프라인을 멈추고 백그라운드 작업을 기다립니다.

        이벤트 루프가 끝나기 직전에 호출되므로, 큐에 쌓인 완료 콜백과
        라이브러리 저장 결과를 여기서 직접 처리합니다.
        """
        if self.output.is_recording:
            self.stop_recording()
        self.output.wait(timeout_ms / 1000.0)

        deadline = time.monotonic() + timeout_ms / 1000.0
        while self.phase is RecordingPhase.FINALIZING and time.monotonic() < deadline:
            if not _process_events():
                break
        if self._runner is not None:
            self._runner.wait_all(timeout_ms)
            _process_events()

        if self.pipeline.is_running:
            self.pipeline.stop_running()
            self.state.set_running(False)

    def _set_phase(self, phase: RecordingPhase) -> None:
        if phase is not self.phase:
            logger.debug("Recording phase %s -> %s", self.phase.value, phase.value)
            self.phase = phase

    def _publish_error(self, message: str) -> None:
        self.state.publish_error(message)
