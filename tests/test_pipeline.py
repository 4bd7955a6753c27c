"""
Tests for the capture pipeline, using fake inputs and a counting output.
"""

import time

import pytest

from daihon.capture.pipeline import CapturePipeline, FrameThread
from daihon.core import messages
from daihon.core import ConfigurationError, DeviceUnavailableError

from .conftest import FakeCameraInput, FakeMicInput


class CountingOutput:
    def __init__(self):
        self.frames = 0
        self.blocks = 0

    def write_video(self, frame):
        self.frames += 1

    def write_audio(self, block):
        self.blocks += 1


@pytest.fixture
def capture(qapp):
    pipeline = CapturePipeline(mirror_preview=True)
    yield pipeline
    pipeline.stop_running()


def test_one_input_per_media_type(capture):
    capture.add_input(FakeCameraInput())

    assert not capture.can_add_input(FakeCameraInput())
    assert capture.can_add_input(FakeMicInput())
    with pytest.raises(ConfigurationError):
        capture.add_input(FakeCameraInput())


def test_single_output(capture):
    capture.add_output(CountingOutput())

    assert not capture.can_add_output(CountingOutput())
    with pytest.raises(ConfigurationError):
        capture.add_output(CountingOutput())


def test_start_without_camera_raises(capture):
    with pytest.raises(DeviceUnavailableError):
        capture.start_running()


def test_start_and_stop(capture):
    camera = FakeCameraInput()
    out = CountingOutput()
    capture.add_input(camera)
    capture.add_output(out)

    assert capture.start_running() is True
    assert capture.start_running() is False
    assert capture.is_running

    deadline = time.monotonic() + 3
    while out.frames == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    assert out.frames > 0

    assert capture.stop_running() is True
    assert capture.stop_running() is False
    assert camera.closed == 1
    assert not capture.is_running


def test_microphone_added_while_running_starts_on_commit(capture):
    capture.add_input(FakeCameraInput())
    capture.add_output(CountingOutput())
    capture.start_running()
    mic = FakeMicInput()

    capture.begin_configuration()
    capture.add_input(mic)
    assert mic.started == 0
    capture.commit_configuration()

    assert mic.started == 1
    assert capture.has_audio_input


def test_microphone_started_with_pipeline(capture):
    mic = FakeMicInput()
    out = CountingOutput()
    capture.add_input(FakeCameraInput())
    capture.add_input(mic)
    capture.add_output(out)

    capture.start_running()
    mic.on_block(None)

    assert mic.started == 1
    assert out.blocks == 1

    capture.stop_running()
    assert mic.stopped == 1


def test_remove_microphone_stops_it(capture):
    mic = FakeMicInput()
    capture.add_input(mic)

    capture.remove_input(mic)

    assert not capture.has_audio_input
    assert mic.stopped == 1


class StalledCamera(FakeCameraInput):
    """Camera that opens but never delivers a frame."""

    def read(self):
        return None


def test_stalled_camera_reports_failure(capture, qapp, monkeypatch):
    monkeypatch.setattr(FrameThread, "MAX_FAILURES", 3)
    camera = StalledCamera()
    capture.add_input(camera)
    capture.add_output(CountingOutput())
    failures = []
    capture.sig_failed.connect(failures.append)

    capture.start_running()
    deadline = time.monotonic() + 3
    while not failures and time.monotonic() < deadline:
        qapp.processEvents()
        time.sleep(0.01)

    assert failures == [messages.CAMERA_STOPPED]
    assert capture.stop_running() is True
    assert camera.closed == 1
