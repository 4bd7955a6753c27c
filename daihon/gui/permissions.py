# -*- coding: utf-8 -*-
"""권한 요청 대화 상자."""
from __future__ import annotations

from typing import Dict, Optional

from PyQt5 import QtWidgets

from ..core.permissions import Capability


__all__ = ["DialogPermissionPrompt"]


_QUESTIONS: Dict[Capability, str] = {
    Capability.CAMERA: "“daihon”がカメラへのアクセスを求めています。",
    Capability.MICROPHONE: "“daihon”がマイクへのアクセスを求めています。",
    Capability.LIBRARY: "“daihon”がライブラリへの保存を求めています。",
}


class DialogPermissionPrompt:
    """미결정 권한을 Qt 질문 대화 상자로 묻는 ``prompt`` 함수.

    Args:
        parent: 대화 상자의 부모 위젯.
        usage: 마이크 사용 목적 문구 (마이크 요청 시 함께 표시).
    """

    def __init__(
        self, parent: Optional[QtWidgets.QWidget] = None, usage: Optional[str] = None
    ) -> None:
        self.parent = parent
        self.usage = usage

    def __call__(self, capability: Capability) -> bool:
        text = _QUESTIONS[capability]
        if capability is Capability.MICROPHONE and self.usage:
            text = f"{text}\n\n{self.usage}"
        answer = QtWidgets.QMessageBox.question(
            self.parent,
            "daihon",
            text,
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
            QtWidgets.QMessageBox.No,
        )
        return answer == QtWidgets.QMessageBox.Yes
