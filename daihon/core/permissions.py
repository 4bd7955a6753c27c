# -*- coding: utf-8 -*-
"""
권한(Permission) 모델.

- 카메라/마이크/미디어 라이브러리 각각에 대한 권한 상태를 메모리에 보관합니다.
- 상태가 결정되지 않은 경우 ``prompt`` 콜백으로 사용자에게 묻습니다.
- 디스크에 저장하지 않으므로 재실행 시 초기 상태로 돌아갑니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, Mapping, Optional


__all__ = [
    "Capability",
    "PermissionProvider",
    "PermissionState",
    "PermissionStore",
    "check_gate",
]


logger = logging.getLogger(__name__)


class Capability(enum.Enum):
    """권한으로 보호되는 자원."""

    CAMERA = "camera"
    MICROPHONE = "microphone"
    LIBRARY = "library"


class PermissionState(enum.Enum):
    """권한 상태. ``LIMITED``는 라이브러리 전용이며 허용으로 취급합니다."""

    GRANTED = "granted"
    LIMITED = "limited"
    DENIED = "denied"
    UNDETERMINED = "undetermined"

    @property
    def is_granted(self) -> bool:
        return self in (PermissionState.GRANTED, PermissionState.LIMITED)


PermissionCallback = Callable[[bool], None]
PromptFunc = Callable[[Capability], bool]


class PermissionProvider:
    """권한 조회/요청 인터페이스.

    ``request``의 콜백은 임의의 스레드에서 호출될 수 있습니다.
    """

    def status(self, capability: Capability) -> PermissionState:
        raise NotImplementedError

    def request(self, capability: Capability, callback: PermissionCallback) -> None:
        raise NotImplementedError


class PermissionStore(PermissionProvider):
    """메모리 기반 권한 저장소.

    Args:
        initial: 기능별 초기 상태. 없는 항목은 ``UNDETERMINED``.
        prompt: 미결정 상태에서 사용자에게 허용 여부를 묻는 함수.
            None이면 요청은 항상 거부됩니다.
    """

    def __init__(
        self,
        initial: Optional[Mapping[Capability, PermissionState]] = None,
        prompt: Optional[PromptFunc] = None,
    ) -> None:
        self._states: Dict[Capability, PermissionState] = {
            cap: PermissionState.UNDETERMINED for cap in Capability
        }
        if initial:
            self._states.update(initial)
        self.prompt = prompt

    @classmethod
    def from_config(
        cls, permissions: Mapping[str, str], prompt: Optional[PromptFunc] = None
    ) -> "PermissionStore":
        """설정 파일의 ``permissions`` 항목으로 저장소를 생성합니다."""
        initial = {
            Capability(name): PermissionState(value)
            for name, value in permissions.items()
        }
        return cls(initial, prompt)

    def status(self, capability: Capability) -> PermissionState:
        return self._states[capability]

    def set_status(self, capability: Capability, state: PermissionState) -> None:
        self._states[capability] = state

    def request(self, capability: Capability, callback: PermissionCallback) -> None:
        """권한을 요청하고 결과를 ``callback(granted)``으로 전달합니다.

        이미 결정된 상태이면 묻지 않고 현재 상태를 그대로 전달합니다.
        """
        state = self._states[capability]
        if state is PermissionState.UNDETERMINED:
            granted = bool(self.prompt(capability)) if self.prompt else False
            state = PermissionState.GRANTED if granted else PermissionState.DENIED
            self._states[capability] = state
            logger.info("Permission %s -> %s", capability.value, state.value)
        callback(state.is_granted)


def check_gate(
    provider: PermissionProvider,
    capability: Capability,
    on_granted: Callable[[], None],
    on_denied: Callable[[], None],
    on_requesting: Optional[Callable[[], None]] = None,
    on_unknown: Optional[Callable[[], None]] = None,
    dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
) -> PermissionState:
    """권한 게이트를 한 번 평가하고 알맞은 분기를 실행합니다.

    - 허용: ``on_granted``
    - 미결정: ``on_requesting`` 호출 후 요청, 결과에 따라 ``on_granted``/``on_denied``
    - 거부: ``on_denied``
    - 그 밖의 상태(``LIMITED``를 허용하지 않는 기능 등): ``on_unknown`` 또는 ``on_denied``

    Args:
        provider: 권한 제공자.
        capability: 검사할 기능.
        on_granted: 허용 시 실행할 함수.
        on_denied: 거부 시 실행할 함수.
        on_requesting: 요청 직전에 실행할 함수.
        on_unknown: 예상하지 못한 상태에서 실행할 함수.
        dispatch: 요청 결과 콜백을 UI 스레드로 넘기는 함수. None이면 바로 호출.

    Returns:
        게이트 평가 시점의 상태.
    """
    state = provider.status(capability)
    if state is PermissionState.GRANTED or (
        state is PermissionState.LIMITED and capability is Capability.LIBRARY
    ):
        on_granted()
    elif state is PermissionState.UNDETERMINED:
        if on_requesting is not None:
            on_requesting()

        def _answer(granted: bool) -> None:
            branch = on_granted if granted else on_denied
            if dispatch is None:
                branch()
            else:
                dispatch(branch)

        provider.request(capability, _answer)
    elif state is PermissionState.DENIED:
        on_denied()
    else:
        (on_unknown or on_denied)()
    return state
