# -*- coding: utf-8 -*-
"""사용자에게 표시되는 메시지 문자열."""
from __future__ import annotations

__all__ = [
    "ALERT_TITLE",
    "CAMERA_DENIED",
    "CAMERA_NOT_RUNNING",
    "CAMERA_STOPPED",
    "CANNOT_ADD_AUDIO_INPUT",
    "CANNOT_ADD_MOVIE_OUTPUT",
    "CANNOT_ADD_VIDEO_INPUT",
    "EDIT_DONE_LABEL",
    "EDIT_LABEL",
    "LIBRARY_DENIED",
    "MIC_DENIED",
    "MIC_NOT_DECLARED",
    "MIC_UNKNOWN",
    "NO_AUDIO_DEVICE",
    "NO_FRONT_CAMERA",
    "SAVE_FAILED",
    "audio_input_error",
    "video_input_error",
]


ALERT_TITLE = "エラー"
EDIT_LABEL = "編集"
EDIT_DONE_LABEL = "完了"

NO_FRONT_CAMERA = "No front camera available."
CANNOT_ADD_VIDEO_INPUT = "Cannot add video input."
CANNOT_ADD_MOVIE_OUTPUT = "Cannot add movie output."
CANNOT_ADD_AUDIO_INPUT = "Cannot add audio input."
NO_AUDIO_DEVICE = "No audio device available."
CAMERA_STOPPED = "Camera stopped delivering frames."

CAMERA_DENIED = "カメラの権限がありません。設定から許可してください。"
CAMERA_NOT_RUNNING = "カメラが起動していません。"
MIC_DENIED = "マイクの権限がありません。設定から許可してください。"
MIC_UNKNOWN = "マイク権限の状態を取得できません。"
MIC_NOT_DECLARED = (
    "設定ファイルに microphone_usage_description がありません。録音は無効化されます。"
)
LIBRARY_DENIED = "フォトライブラリへの保存権限がありません。"
SAVE_FAILED = "保存に失敗しました"


def video_input_error(reason: object) -> str:
    return f"Error creating video input: {reason}"


def audio_input_error(reason: object) -> str:
    return f"Error creating audio input: {reason}"
