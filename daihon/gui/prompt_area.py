# -*- coding: utf-8 -*-
"""
프롬프트 텍스트 영역.

- 읽기 모드: 가운데 정렬된 텍스트를 세로 스크롤로 표시.
- 편집 모드: 가운데 정렬 텍스트 편집기.
- 편집 모드를 벗어나면 키보드 포커스를 해제합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets


__all__ = ["PromptArea"]


_TEXT_STYLE = "color: white; background: transparent; border: none;"


class PromptArea(QtWidgets.QFrame):
    """반투명 배경 위의 프롬프트 텍스트.

    Signals:
        sig_editing(bool): 편집 모드 변경.
        sig_text_changed(str): 텍스트 변경.
    """

    sig_editing = QtCore.pyqtSignal(bool)
    sig_text_changed = QtCore.pyqtSignal(str)

    def __init__(self, text: str = "", parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("promptArea")
        self.setStyleSheet(
            "#promptArea { background-color: rgba(0, 0, 0, 115); border-radius: 12px; }"
        )
        self._text = text
        self._editing = False

        font = self.font()
        font.setPointSizeF(font.pointSizeF() * 1.6)

        # 읽기 모드
        self.lblText = QtWidgets.QLabel(text)
        self.lblText.setWordWrap(True)
        self.lblText.setAlignment(QtCore.Qt.AlignCenter)
        self.lblText.setFont(font)
        self.lblText.setStyleSheet(_TEXT_STYLE)
        self.lblText.setContentsMargins(16, 16, 16, 16)

        self.scroll = QtWidgets.QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setHorizontalScrollBarPolicy(QtCore.Qt.ScrollBarAlwaysOff)
        self.scroll.setVerticalScrollBarPolicy(QtCore.Qt.ScrollBarAlwaysOff)
        self.scroll.setFrameShape(QtWidgets.QFrame.NoFrame)
        self.scroll.setStyleSheet("background: transparent;")
        self.scroll.viewport().setStyleSheet("background: transparent;")
        self.scroll.setWidget(self.lblText)

        # 편집 모드
        self.editor = QtWidgets.QTextEdit()
        self.editor.setAcceptRichText(False)
        self.editor.setFont(font)
        self.editor.setStyleSheet(_TEXT_STYLE)
        self.editor.document().setDefaultTextOption(QtGui.QTextOption(QtCore.Qt.AlignCenter))
        self.editor.textChanged.connect(self._on_editor_changed)

        self.stack = QtWidgets.QStackedWidget()
        self.stack.addWidget(self.scroll)
        self.stack.addWidget(self.editor)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.addWidget(self.stack)

    # ------------------------------ Public ------------------------------ #
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text == self._text:
            return
        self._text = text
        self.lblText.setText(text)
        if self._editing and self.editor.toPlainText() != text:
            self.editor.setPlainText(text)
        self.sig_text_changed.emit(text)

    def is_editing(self) -> bool:
        return self._editing

    def set_editing(self, editing: bool) -> None:
        """편집 모드를 전환합니다. 편집을 끝내면 포커스를 해제합니다."""
        if editing == self._editing:
            return
        self._editing = editing
        if editing:
            self.editor.blockSignals(True)
            self.editor.setPlainText(self._text)
            self.editor.blockSignals(False)
            self.stack.setCurrentWidget(self.editor)
            self.editor.setFocus(QtCore.Qt.OtherFocusReason)
        else:
            self.editor.clearFocus()
            self.lblText.setText(self._text)
            self.stack.setCurrentWidget(self.scroll)
        self.sig_editing.emit(editing)

    def toggle_editing(self) -> None:
        self.set_editing(not self._editing)

    # ----------------------------- Internals ----------------------------- #
    def _on_editor_changed(self) -> None:
        text = self.editor.toPlainText()
        if text != self._text:
            self._text = text
            self.lblText.setText(text)
            self.sig_text_changed.emit(text)
