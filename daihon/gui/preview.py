# -*- coding: utf-8 -*-
"""
카메라 미리보기 위젯.

파이프라인의 BGR 프레임을 받아 위젯 전체를 채우도록(aspect fill) 표시합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

from typing import Optional

import cv2
import numpy as np
from PyQt5 import QtCore, QtGui, QtWidgets


__all__ = ["PreviewView", "crop_to_aspect", "qimage_from_bgr"]


def qimage_from_bgr(mat_bgr: np.ndarray) -> QtGui.QImage:
    """BGR ``numpy.ndarray`` (H, W, 3, uint8)를 ``QImage``로 변환합니다."""
    if mat_bgr is None:
        raise ValueError("입력이 None 입니다.")
    if mat_bgr.dtype != np.uint8:
        raise ValueError(f"지원 dtype은 uint8 뿐입니다. got={mat_bgr.dtype}")
    if mat_bgr.ndim != 3 or mat_bgr.shape[2] != 3:
        raise ValueError(f"지원 형상은 BGR (H, W, 3) 입니다. got shape={mat_bgr.shape}")

    h, w, _ = mat_bgr.shape
    rgb = cv2.cvtColor(np.ascontiguousarray(mat_bgr), cv2.COLOR_BGR2RGB)
    qimg = QtGui.QImage(rgb.data, w, h, 3 * w, QtGui.QImage.Format_RGB888)
    return qimg.copy()


def crop_to_aspect(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """``width:height`` 비율이 되도록 프레임 가운데를 잘라냅니다."""
    if width <= 0 or height <= 0:
        return frame
    h, w = frame.shape[:2]
    target = width / height
    if w / h > target:
        new_w = max(1, int(round(h * target)))
        x0 = (w - new_w) // 2
        return frame[:, x0 : x0 + new_w]
    new_h = max(1, int(round(w / target)))
    y0 = (h - new_h) // 2
    return frame[y0 : y0 + new_h, :]


class PreviewView(QtWidgets.QLabel):
    """전체 화면 미리보기.

    Signals:
        sig_clicked(): 미리보기를 클릭했을 때.
    """

    sig_clicked = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(QtCore.Qt.AlignCenter)
        self.setMinimumSize(1, 1)
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Ignored, QtWidgets.QSizePolicy.Ignored
        )
        self.setStyleSheet("background-color: black;")
        self._last: Optional[np.ndarray] = None

    @QtCore.pyqtSlot(np.ndarray)
    def set_frame(self, frame: np.ndarray) -> None:
        """새 프레임을 위젯 크기에 맞춰 표시합니다."""
        self._last = frame
        self._render()

    def _render(self) -> None:
        if self._last is None:
            return
        cropped = crop_to_aspect(self._last, self.width(), self.height())
        pixmap = QtGui.QPixmap.fromImage(qimage_from_bgr(cropped)).scaled(
            self.width(),
            self.height(),
            QtCore.Qt.KeepAspectRatioByExpanding,
            QtCore.Qt.SmoothTransformation,
        )
        self.setPixmap(pixmap)

    # ----------------------------- Qt Events ----------------------------- #
    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self._render()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        self.sig_clicked.emit()
        super().mousePressEvent(event)
