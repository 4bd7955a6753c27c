"""
Tests for recording start/stop, finalization and library saving.
"""

import os
import time

import pytest

from daihon.core import (
    Capability,
    ConfigurationError,
    DaihonError,
    LibraryError,
    PermissionState,
    PermissionStore,
    PrompterConfig,
    RecordingError,
    RecordingPhase,
)
from daihon.core import messages


def granted_store():
    return PermissionStore({cap: PermissionState.GRANTED for cap in Capability})


def record_once(manager, output):
    manager.start_recording()
    assert manager.state.is_recording
    path = output.paths[-1]
    manager.stop_recording()
    return path


class TestStartRecording:
    def test_starts_with_microphone(self, running_manager, output, pipeline):
        running_manager.start_recording()

        assert running_manager.state.is_recording
        assert running_manager.phase is RecordingPhase.RECORDING
        assert pipeline.has_audio_input
        assert len(output.paths) == 1
        assert os.path.exists(output.paths[0])

    def test_start_twice_creates_one_recording(self, running_manager, output):
        running_manager.start_recording()
        running_manager.start_recording()

        assert len(output.paths) == 1

    def test_microphone_not_declared(self, make_manager, config, devices, output):
        config.microphone_usage_description = None
        manager = make_manager()
        manager.start()

        manager.start_recording()

        assert manager.state.error_message == messages.MIC_NOT_DECLARED
        assert not manager.state.is_recording
        assert devices.mic_inputs == []
        assert output.paths == []

    def test_microphone_denied(self, running_manager, output):
        running_manager.permissions.set_status(
            Capability.MICROPHONE, PermissionState.DENIED
        )

        running_manager.start_recording()

        assert running_manager.state.error_message == messages.MIC_DENIED
        assert running_manager.phase is RecordingPhase.IDLE
        assert output.paths == []

    def test_microphone_limited_is_unknown(self, running_manager, output):
        running_manager.permissions.set_status(
            Capability.MICROPHONE, PermissionState.LIMITED
        )

        running_manager.start_recording()

        assert running_manager.state.error_message == messages.MIC_UNKNOWN
        assert running_manager.phase is RecordingPhase.IDLE
        assert output.paths == []

    def test_microphone_undetermined_prompts(self, make_manager, output):
        phases = []
        store = granted_store()
        store.set_status(Capability.MICROPHONE, PermissionState.UNDETERMINED)
        manager = make_manager(permissions=store)

        def prompt(cap):
            phases.append(manager.phase)
            return True

        store.prompt = prompt
        manager.start()

        manager.start_recording()

        assert phases == [RecordingPhase.REQUESTING_PERMISSION]
        assert manager.state.is_recording
        assert len(output.paths) == 1

    def test_camera_not_running(self, make_manager, output):
        manager = make_manager()

        manager.start_recording()

        assert manager.state.error_message == messages.CAMERA_NOT_RUNNING
        assert output.paths == []

    def test_no_audio_device(self, running_manager, devices, output):
        devices.mic = None

        running_manager.start_recording()

        assert running_manager.state.error_message == messages.NO_AUDIO_DEVICE
        assert running_manager.phase is RecordingPhase.IDLE
        assert output.paths == []

    def test_audio_input_creation_fails(self, running_manager, devices, output):
        devices.mic_error = ConfigurationError("Invalid sample rate")

        running_manager.start_recording()

        assert (
            running_manager.state.error_message
            == "Error creating audio input: Invalid sample rate"
        )
        assert output.paths == []

    def test_cannot_add_audio_input(self, running_manager, pipeline, output):
        pipeline.accept_inputs = False

        running_manager.start_recording()

        assert running_manager.state.error_message == messages.CANNOT_ADD_AUDIO_INPUT
        assert output.paths == []

    def test_audio_commit_failure_detaches_microphone(
        self, running_manager, pipeline, output
    ):
        pipeline.commit_error = DaihonError("stream busy")

        running_manager.start_recording()

        assert not pipeline.has_audio_input
        assert running_manager.audio_input is None
        assert output.paths == []

    def test_microphone_attached_once(self, running_manager, devices, output):
        record_once(running_manager, output)
        record_once(running_manager, output)

        assert len(devices.mic_inputs) == 1
        assert len(output.paths) == 2

    def test_each_recording_gets_fresh_path(self, running_manager, output):
        first = record_once(running_manager, output)
        second = record_once(running_manager, output)

        assert first != second


class TestFinishRecording:
    def test_success_saves_to_library_and_removes_temp(
        self, running_manager, output, library
    ):
        saved = []
        running_manager.sig_saved.connect(saved.append)

        path = record_once(running_manager, output)

        assert library.imports == [path]
        assert not os.path.exists(path)
        assert len(saved) == 1
        assert running_manager.state.is_recording is False
        assert running_manager.phase is RecordingPhase.IDLE
        assert running_manager.state.error_message is None

    def test_recording_error_publishes_raw_message(
        self, running_manager, output, library
    ):
        output.next_error = RecordingError("disk full")

        path = record_once(running_manager, output)

        assert running_manager.state.is_recording is False
        assert running_manager.state.error_message == "disk full"
        assert library.imports == []
        assert not os.path.exists(path)

    def test_library_limited_saves_once(self, make_manager, output, library):
        store = granted_store()
        store.set_status(Capability.LIBRARY, PermissionState.LIMITED)
        manager = make_manager(permissions=store)
        manager.start()

        record_once(manager, output)

        assert len(library.imports) == 1

    def test_library_denied_discards(self, make_manager, output, library):
        store = granted_store()
        store.set_status(Capability.LIBRARY, PermissionState.DENIED)
        manager = make_manager(permissions=store)
        manager.start()

        path = record_once(manager, output)

        assert manager.state.error_message == messages.LIBRARY_DENIED
        assert library.imports == []
        assert not os.path.exists(path)

    def test_library_undetermined_refused(self, make_manager, output, library):
        store = granted_store()
        store.set_status(Capability.LIBRARY, PermissionState.UNDETERMINED)
        store.prompt = lambda cap: False
        manager = make_manager(permissions=store)
        manager.start()

        path = record_once(manager, output)

        assert manager.state.error_message == messages.LIBRARY_DENIED
        assert not os.path.exists(path)

    def test_library_import_failure(self, running_manager, output, library):
        library.error = LibraryError("No space left on device")

        path = record_once(running_manager, output)

        assert running_manager.state.error_message == "No space left on device"
        assert not os.path.exists(path)

    def test_stop_recording_when_idle_is_noop(self, running_manager, output):
        running_manager.stop_recording()

        assert output.callbacks == 0
        assert running_manager.phase is RecordingPhase.IDLE

    def test_stop_session_finishes_recording_first(
        self, running_manager, output, pipeline, library
    ):
        running_manager.start_recording()

        running_manager.stop()

        assert output.callbacks == 1
        assert len(library.imports) == 1
        assert not pipeline.is_running
        assert running_manager.state.is_recording is False


class TestErrorSlot:
    def test_clear_error(self, running_manager, output):
        output.next_error = RecordingError("disk full")
        record_once(running_manager, output)

        running_manager.clear_error()

        assert running_manager.state.error_message is None

    def test_last_error_wins(self, make_manager, devices):
        devices.camera = None
        manager = make_manager()
        manager.start_recording()

        assert manager.state.error_message == messages.CAMERA_NOT_RUNNING


@pytest.mark.parametrize("usage", ["", "   "])
def test_blank_usage_description_blocks_recording(make_manager, tmp_path, usage):
    cfg = PrompterConfig(
        temp_dir=str(tmp_path / "tmp"),
        library_dir=str(tmp_path / "library"),
        microphone_usage_description=usage,
    )
    manager = make_manager(config=cfg)
    manager.start()

    manager.start_recording()

    assert manager.state.error_message == messages.MIC_NOT_DECLARED


def wait_until(app, predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.01)
    return predicate()


class TestShutdown:
    """Shutdown with the real queued dispatcher and background runner."""

    @pytest.fixture
    def live_manager(self, qapp, make_manager):
        manager = make_manager(dispatch=None, background=None)
        manager.start()
        assert wait_until(qapp, lambda: manager.state.is_running)
        return manager

    def test_shutdown_while_recording_saves_clip(
        self, live_manager, output, library, pipeline
    ):
        live_manager.start_recording()
        path = output.paths[-1]

        live_manager.shutdown()

        assert library.imports == [path]
        assert not os.path.exists(path)
        assert live_manager.phase is RecordingPhase.IDLE
        assert live_manager.state.is_recording is False
        assert not pipeline.is_running

    def test_shutdown_after_failed_recording_removes_temp(
        self, live_manager, output, library
    ):
        output.next_error = RecordingError("disk full")
        live_manager.start_recording()
        path = output.paths[-1]

        live_manager.shutdown()

        assert library.imports == []
        assert not os.path.exists(path)
        assert live_manager.state.error_message == "disk full"


class TestCameraFailure:
    def test_camera_failure_stops_session(self, running_manager, pipeline):
        pipeline.sig_failed.emit(messages.CAMERA_STOPPED)

        assert running_manager.state.error_message == messages.CAMERA_STOPPED
        assert running_manager.state.is_running is False
        assert pipeline.stop_calls == 1

    def test_camera_failure_finishes_recording(
        self, running_manager, pipeline, output, library
    ):
        running_manager.start_recording()

        pipeline.sig_failed.emit(messages.CAMERA_STOPPED)

        assert output.callbacks == 1
        assert len(library.imports) == 1
        assert running_manager.state.is_recording is False
        assert running_manager.state.error_message == messages.CAMERA_STOPPED
