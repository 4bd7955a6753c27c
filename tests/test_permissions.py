"""
Tests for the permission store and the gate helper.
"""

import pytest

from daihon.core import Capability, PermissionState, PermissionStore, check_gate


class Recorder:
    """Collects which gate branches ran, in order."""

    def __init__(self):
        self.calls = []

    def __call__(self, name):
        return lambda: self.calls.append(name)


class TestPermissionStore:
    def test_defaults_to_undetermined(self):
        store = PermissionStore()
        for cap in Capability:
            assert store.status(cap) is PermissionState.UNDETERMINED

    def test_from_config(self):
        store = PermissionStore.from_config({"camera": "granted", "library": "limited"})

        assert store.status(Capability.CAMERA) is PermissionState.GRANTED
        assert store.status(Capability.LIBRARY) is PermissionState.LIMITED
        assert store.status(Capability.MICROPHONE) is PermissionState.UNDETERMINED

    def test_request_asks_prompt_once_and_remembers(self):
        asked = []

        def prompt(cap):
            asked.append(cap)
            return True

        store = PermissionStore(prompt=prompt)
        answers = []
        store.request(Capability.MICROPHONE, answers.append)
        store.request(Capability.MICROPHONE, answers.append)

        assert answers == [True, True]
        assert asked == [Capability.MICROPHONE]
        assert store.status(Capability.MICROPHONE) is PermissionState.GRANTED

    def test_request_without_prompt_denies(self):
        store = PermissionStore()
        answers = []
        store.request(Capability.CAMERA, answers.append)

        assert answers == [False]
        assert store.status(Capability.CAMERA) is PermissionState.DENIED

    def test_request_when_decided_does_not_prompt(self):
        store = PermissionStore(
            {Capability.CAMERA: PermissionState.DENIED},
            prompt=lambda cap: pytest.fail("should not prompt"),
        )
        answers = []
        store.request(Capability.CAMERA, answers.append)
        assert answers == [False]

    def test_limited_counts_as_granted(self):
        assert PermissionState.LIMITED.is_granted
        assert PermissionState.GRANTED.is_granted
        assert not PermissionState.DENIED.is_granted
        assert not PermissionState.UNDETERMINED.is_granted


class TestCheckGate:
    def test_granted_runs_granted_branch(self):
        rec = Recorder()
        store = PermissionStore({Capability.CAMERA: PermissionState.GRANTED})

        state = check_gate(store, Capability.CAMERA, rec("granted"), rec("denied"))

        assert state is PermissionState.GRANTED
        assert rec.calls == ["granted"]

    def test_denied_runs_denied_branch(self):
        rec = Recorder()
        store = PermissionStore({Capability.CAMERA: PermissionState.DENIED})

        check_gate(store, Capability.CAMERA, rec("granted"), rec("denied"))

        assert rec.calls == ["denied"]

    def test_undetermined_requests_then_grants(self):
        rec = Recorder()
        store = PermissionStore(prompt=lambda cap: True)

        check_gate(
            store,
            Capability.MICROPHONE,
            rec("granted"),
            rec("denied"),
            on_requesting=rec("requesting"),
        )

        assert rec.calls == ["requesting", "granted"]

    def test_undetermined_requests_then_denies(self):
        rec = Recorder()
        store = PermissionStore(prompt=lambda cap: False)

        check_gate(
            store,
            Capability.MICROPHONE,
            rec("granted"),
            rec("denied"),
            on_requesting=rec("requesting"),
        )

        assert rec.calls == ["requesting", "denied"]

    def test_answer_goes_through_dispatch(self):
        rec = Recorder()
        dispatched = []
        store = PermissionStore(prompt=lambda cap: True)

        check_gate(
            store,
            Capability.CAMERA,
            rec("granted"),
            rec("denied"),
            dispatch=dispatched.append,
        )

        # Branch is handed to the dispatcher, not run inline
        assert rec.calls == []
        assert len(dispatched) == 1
        dispatched[0]()
        assert rec.calls == ["granted"]

    def test_limited_is_granted_for_library(self):
        rec = Recorder()
        store = PermissionStore({Capability.LIBRARY: PermissionState.LIMITED})

        check_gate(store, Capability.LIBRARY, rec("granted"), rec("denied"))

        assert rec.calls == ["granted"]

    def test_limited_is_unknown_for_microphone(self):
        rec = Recorder()
        store = PermissionStore({Capability.MICROPHONE: PermissionState.LIMITED})

        check_gate(
            store,
            Capability.MICROPHONE,
            rec("granted"),
            rec("denied"),
            on_unknown=rec("unknown"),
        )

        assert rec.calls == ["unknown"]

    def test_unknown_falls_back_to_denied(self):
        rec = Recorder()
        store = PermissionStore({Capability.CAMERA: PermissionState.LIMITED})

        check_gate(store, Capability.CAMERA, rec("granted"), rec("denied"))

        assert rec.calls == ["denied"]
