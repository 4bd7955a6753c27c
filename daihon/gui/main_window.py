# -*- coding: utf-8 -*-
"""텔레프롬프터 메인 윈도우 모듈."""
from __future__ import annotations

from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from ..capture import CaptureSessionManager
from ..core import messages
from ..library import Asset
from .preview import PreviewView
from .prompt_area import PromptArea


__all__ = ["TeleprompterWindow", "record_icon"]


RECORD_COLOR = QtGui.QColor(52, 199, 89)
STOP_COLOR = QtGui.QColor(255, 59, 48)


def record_icon(recording: bool, size: int = 60) -> QtGui.QIcon:
    """녹화 버튼 아이콘. 대기 중에는 초록 원, 녹화 중에는 빨간 정지 표시."""
    pixmap = QtGui.QPixmap(size, size)
    pixmap.fill(QtCore.Qt.transparent)
    painter = QtGui.QPainter(pixmap)
    try:
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        color = STOP_COLOR if recording else RECORD_COLOR
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(color)
        painter.drawEllipse(0, 0, size, size)
        painter.setBrush(QtCore.Qt.white)
        if recording:
            side = size // 3
            offset = (size - side) // 2
            painter.drawRoundedRect(offset, offset, side, side, 3, 3)
        else:
            ring = size // 8
            painter.drawEllipse(ring, ring, size - 2 * ring, size - 2 * ring)
            painter.setBrush(color)
            inner = size // 5
            painter.drawEllipse(inner, inner, size - 2 * inner, size - 2 * inner)
    finally:
        painter.end()
    return QtGui.QIcon(pixmap)


class TeleprompterWindow(QtWidgets.QMainWindow):
    """카메라 미리보기 위에 프롬프트 텍스트와 녹화 버튼을 겹친 화면."""

    def __init__(
        self,
        manager: CaptureSessionManager,
        prompt_text: Optional[str] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.manager = manager
        self.setWindowTitle("daihon")

        # ---- 미리보기 + 오버레이 (같은 셀에 겹침) ----
        central = QtWidgets.QWidget()
        grid = QtWidgets.QGridLayout(central)
        grid.setContentsMargins(0, 0, 0, 0)

        self.preview = PreviewView()
        self.preview.sig_clicked.connect(self._on_preview_clicked)
        grid.addWidget(self.preview, 0, 0)

        overlay = QtWidgets.QWidget()
        overlay.setAttribute(QtCore.Qt.WA_TranslucentBackground)
        vbox = QtWidgets.QVBoxLayout(overlay)
        vbox.setContentsMargins(12, 12, 12, 12)

        text = prompt_text if prompt_text is not None else manager.config.prompt_text
        self.promptArea = PromptArea(text)
        self.promptArea.setFixedHeight(240)
        self.promptArea.sig_editing.connect(self._on_editing_changed)
        vbox.addWidget(self.promptArea)

        controls = QtWidgets.QWidget()
        controls.setObjectName("controlBar")
        controls.setStyleSheet(
            "#controlBar { background-color: rgba(0, 0, 0, 128); border-radius: 8px; }"
        )
        hbox = QtWidgets.QHBoxLayout(controls)
        hbox.setSpacing(16)
        hbox.addStretch(1)

        self.btnEdit = QtWidgets.QPushButton(messages.EDIT_LABEL)
        self.btnEdit.setStyleSheet(
            "QPushButton { background-color: rgba(255, 255, 255, 217);"
            " border-radius: 14px; padding: 8px 16px; }"
        )
        self.btnEdit.clicked.connect(self.on_edit_clicked)
        hbox.addWidget(self.btnEdit)

        self.btnRecord = QtWidgets.QToolButton()
        self.btnRecord.setIconSize(QtCore.QSize(60, 60))
        self.btnRecord.setAutoRaise(True)
        self.btnRecord.clicked.connect(self.on_record_clicked)
        hbox.addWidget(self.btnRecord)
        hbox.addStretch(1)

        vbox.addWidget(controls)
        vbox.addStretch(1)
        grid.addWidget(overlay, 0, 0, QtCore.Qt.AlignTop)

        self.setCentralWidget(central)

        # ---- 오류 알림 (모달, 확인 시 슬롯 비움) ----
        self._alert = QtWidgets.QMessageBox(
            QtWidgets.QMessageBox.Warning,
            messages.ALERT_TITLE,
            "",
            QtWidgets.QMessageBox.Ok,
            self,
        )
        self._alert.setWindowModality(QtCore.Qt.WindowModal)
        self._alert.finished.connect(self._on_alert_acknowledged)

        # ---- 세션 상태 구독 ----
        state = manager.state
        state.sig_recording.connect(self.set_recording)
        state.sig_error.connect(self.on_error)
        manager.sig_status.connect(self.set_status)
        manager.sig_saved.connect(self.on_saved)
        manager.pipeline.sig_frame.connect(self.preview.set_frame)

        self.set_recording(state.is_recording)
        if state.error_message:
            self.on_error(state.error_message)

    # ------------------------------ Record ------------------------------ #
    def set_status(self, text: str) -> None:
        """상태 바에 상태 텍스트를 표시합니다."""
        if self.statusBar():
            self.statusBar().showMessage(text, 5000)

    @QtCore.pyqtSlot(bool)
    def set_recording(self, recording: bool) -> None:
        """녹화 상태에 맞춰 버튼 아이콘/색을 바꿉니다."""
        self.btnRecord.setIcon(record_icon(recording))
        self.btnRecord.setProperty("recording", recording)
        self.btnRecord.setToolTip("Stop" if recording else "Record")

    def on_record_clicked(self) -> None:
        if self.manager.state.is_recording:
            self.manager.stop_recording()
        else:
            self.manager.start_recording()

    def on_saved(self, asset: Asset) -> None:
        self.set_status(f"Saved: {asset.path}")

    # ------------------------------- Edit ------------------------------- #
    def on_edit_clicked(self) -> None:
        self.promptArea.toggle_editing()

    def _on_editing_changed(self, editing: bool) -> None:
        self.btnEdit.setText(messages.EDIT_DONE_LABEL if editing else messages.EDIT_LABEL)
        if not editing:
            focused = QtWidgets.QApplication.focusWidget()
            if focused is not None:
                focused.clearFocus()

    def _on_preview_clicked(self) -> None:
        if self.promptArea.is_editing():
            self.promptArea.set_editing(False)

    # ------------------------------- Error ------------------------------- #
    @QtCore.pyqtSlot(object)
    def on_error(self, message: Optional[str]) -> None:
        """오류 슬롯이 비어 있지 않으면 알림을 띄우고, 비면 닫습니다."""
        if message:
            self._alert.setText(message)
            if not self._alert.isVisible():
                self._alert.open()
        elif self._alert.isVisible():
            self._alert.done(QtWidgets.QMessageBox.Ok)

    def _on_alert_acknowledged(self, _result: int) -> None:
        self.manager.clear_error()

    # ----------------------------- Qt Events ----------------------------- #
    def showEvent(self, event: QtGui.QShowEvent) -> None:  # noqa: N802
        super().showEvent(event)
        self.manager.start()

    def hideEvent(self, event: QtGui.QHideEvent) -> None:  # noqa: N802
        self.manager.stop()
        super().hideEvent(event)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # noqa: N802
        """윈도우 닫힐 때 녹화/파이프라인 정리."""
        self.manager.shutdown()
        event.accept()
