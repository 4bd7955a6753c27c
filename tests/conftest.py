"""
Shared fixtures and fakes.

The capture session manager is tested with fake devices, pipeline, output
and library plus synchronous dispatch/background, so no camera, microphone
or Qt event loop is needed.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Any, Callable, List, Optional  # noqa: E402

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from PyQt5 import QtCore, QtWidgets  # noqa: E402

from daihon.capture.devices import AudioDevice, CameraDevice  # noqa: E402
from daihon.capture.manager import CaptureSessionManager  # noqa: E402
from daihon.core import (  # noqa: E402
    Capability,
    PermissionState,
    PermissionStore,
    PrompterConfig,
)
from daihon.library import Asset  # noqa: E402


# =============================================================================
# FAKES
# =============================================================================


class FakeCameraInput:
    media_type = "video"

    def __init__(self):
        self.opened = 0
        self.closed = 0
        self.is_open = False

    def open(self):
        self.opened += 1
        self.is_open = True

    def read(self):
        if not self.is_open:
            return None
        return np.zeros((48, 64, 3), dtype=np.uint8)

    def close(self):
        self.closed += 1
        self.is_open = False


class FakeMicInput:
    media_type = "audio"

    def __init__(self):
        self.started = 0
        self.stopped = 0
        self.on_block: Optional[Callable[[np.ndarray], None]] = None

    def start(self, on_block):
        self.started += 1
        self.on_block = on_block

    def stop(self):
        self.stopped += 1


class FakeDevices:
    """Device catalog returning fakes; counts input creation."""

    def __init__(self):
        self.camera: Optional[CameraDevice] = CameraDevice(index=0, name="fake camera")
        self.mic: Optional[AudioDevice] = AudioDevice(
            index=None, name="fake mic", max_input_channels=1, default_samplerate=48000.0
        )
        self.camera_error: Optional[Exception] = None
        self.mic_error: Optional[Exception] = None
        self.camera_inputs: List[FakeCameraInput] = []
        self.mic_inputs: List[FakeMicInput] = []

    def front_camera(self):
        return self.camera

    def microphone(self):
        return self.mic

    def camera_input(self, device):
        if self.camera_error is not None:
            raise self.camera_error
        inp = FakeCameraInput()
        self.camera_inputs.append(inp)
        return inp

    def microphone_input(self, device):
        if self.mic_error is not None:
            raise self.mic_error
        inp = FakeMicInput()
        self.mic_inputs.append(inp)
        return inp


class FakePipeline(QtCore.QObject):
    sig_frame = QtCore.pyqtSignal(np.ndarray)
    sig_status = QtCore.pyqtSignal(str)
    sig_failed = QtCore.pyqtSignal(str)

    def __init__(self):
        super().__init__()
        self.inputs: List[Any] = []
        self.output: Any = None
        self.is_running = False
        self.start_calls = 0
        self.stop_calls = 0
        self.start_error: Optional[Exception] = None
        self.accept_inputs = True
        self.accept_output = True
        self.commit_error: Optional[Exception] = None

    def begin_configuration(self):
        pass

    def commit_configuration(self):
        if self.commit_error is not None:
            raise self.commit_error

    @property
    def has_audio_input(self):
        return any(i.media_type == "audio" for i in self.inputs)

    def can_add_input(self, inp):
        return self.accept_inputs and all(
            i.media_type != inp.media_type for i in self.inputs
        )

    def add_input(self, inp):
        self.inputs.append(inp)

    def remove_input(self, inp):
        self.inputs.remove(inp)

    def can_add_output(self, output):
        return self.accept_output and self.output is None

    def add_output(self, output):
        self.output = output

    def start_running(self):
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        if self.is_running:
            return False
        self.is_running = True
        return True

    def stop_running(self):
        self.stop_calls += 1
        if not self.is_running:
            return False
        self.is_running = False
        return True


class FakeOutput:
    """Movie output that writes a small file and finishes synchronously on stop."""

    def __init__(self):
        self.is_recording = False
        self.paths: List[str] = []
        self.callbacks = 0
        self.next_error: Optional[BaseException] = None
        self._on_finished = None
        self._path: Optional[str] = None

    def start_recording(self, path, on_finished):
        self.is_recording = True
        self.paths.append(path)
        self._path = path
        self._on_finished = on_finished
        with open(path, "wb") as f:
            f.write(b"\x00" * 16)

    def stop_recording(self):
        if not self.is_recording:
            return
        self.is_recording = False
        self.callbacks += 1
        self._on_finished(self._path, self.next_error)

    def wait(self, timeout=None):
        pass


class FakeLibrary:
    def __init__(self):
        self.imports: List[str] = []
        self.error: Optional[Exception] = None

    def import_video(self, path):
        self.imports.append(path)
        if self.error is not None:
            raise self.error
        return Asset(
            asset_id="abc123",
            path="/library/abc123.mp4",
            created_at="2025-08-10T12:00:00",
            source_name=os.path.basename(path),
            size_bytes=os.path.getsize(path),
        )


def sync_dispatch(func):
    func()


def sync_background(func, on_done=None, on_error=None):
    try:
        result = func()
    except Exception as exc:  # noqa: BLE001
        if on_error is not None:
            on_error(str(exc))
        return
    if on_done is not None:
        on_done(result)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def qapp():
    """QApplication shared by widget tests (offscreen platform)."""
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def config(tmp_path):
    return PrompterConfig(
        temp_dir=str(tmp_path / "tmp"),
        library_dir=str(tmp_path / "library"),
    )


@pytest.fixture
def devices():
    return FakeDevices()


@pytest.fixture
def pipeline():
    return FakePipeline()


@pytest.fixture
def output():
    return FakeOutput()


@pytest.fixture
def library():
    return FakeLibrary()


@pytest.fixture
def permissions():
    return PermissionStore(
        {
            Capability.CAMERA: PermissionState.GRANTED,
            Capability.MICROPHONE: PermissionState.GRANTED,
            Capability.LIBRARY: PermissionState.GRANTED,
        }
    )


@pytest.fixture
def make_manager(config, devices, pipeline, output, library, permissions):
    """Factory building a manager wired to the fakes."""

    def _make(**overrides) -> CaptureSessionManager:
        kwargs = dict(
            permissions=permissions,
            devices=devices,
            pipeline=pipeline,
            output=output,
            library=library,
            dispatch=sync_dispatch,
            background=sync_background,
        )
        kwargs.update(overrides)
        cfg = kwargs.pop("config", config)
        return CaptureSessionManager(cfg, **kwargs)

    return _make


@pytest.fixture
def running_manager(make_manager):
    manager = make_manager()
    manager.start()
    assert manager.state.is_running
    return manager
