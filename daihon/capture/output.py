# -*- coding: utf-8 -*-
"""
동영상 파일 출력(Movie file output).

- 녹화 중 들어오는 프레임은 ``cv2.VideoWriter``로, 오디오 블록은 WAV로 기록합니다.
- 녹화를 멈추면 별도 스레드에서 파일을 마무리하고, 오디오가 있으면 ffmpeg로
  하나의 MP4로 병합합니다.
- 완료 콜백 ``on_finished(path, error)``은 녹화 1회당 정확히 한 번 호출됩니다.
- 중간 산출물(<id>.video.mp4, <id>.audio.wav)은 항상 삭제됩니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import logging
import os
import subprocess
import threading
import time
import wave
from typing import Any, Callable, List, Optional

import cv2
import numpy as np

from ..core.errors import RecordingError
from ..core.paths import remove_quietly
from ..core.video import fourcc_mp4v


__all__ = ["FinishedCallback", "MovieFileOutput"]


logger = logging.getLogger(__name__)

FinishedCallback = Callable[[str, Optional[BaseException]], None]


class MovieFileOutput:
    """파이프라인에 연결되는 동영상 파일 싱크.

    Args:
        fps: 비디오 파일 FPS.
        sample_rate: WAV 샘플레이트.
        channels: WAV 채널 수.
        ffmpeg: 병합에 사용할 ffmpeg 실행 파일.
    """

    def __init__(
        self,
        fps: int,
        sample_rate: int,
        channels: int,
        ffmpeg: str = "ffmpeg",
    ) -> None:
        self.fps = fps
        self.sample_rate = sample_rate
        self.channels = channels
        self.ffmpeg = ffmpeg

        self._lock = threading.Lock()
        self._recording: bool = False
        self._path: Optional[str] = None
        self._on_finished: Optional[FinishedCallback] = None
        self._video_path: Optional[str] = None
        self._audio_path: Optional[str] = None
        self._video: Optional[cv2.VideoWriter] = None
        self._audio: Optional[wave.Wave_write] = None
        self._frames_written: int = 0
        self._write_error: Optional[BaseException] = None
        self._finalizers: List[threading.Thread] = []

    # ------------------------------ Control ------------------------------ #
    @property
    def is_recording(self) -> bool:
        return self._recording

    def start_recording(self, path: str, on_finished: FinishedCallback) -> None:
        """``path``로 녹화를 시작합니다.

        Raises:
            RecordingError: 이미 녹화 중인 경우.
        """
        with self._lock:
            if self._recording:
                raise RecordingError("Movie output is already recording.")
            stem, _ = os.path.splitext(path)
            self._path = path
            self._on_finished = on_finished
            self._video_path = stem + ".video.mp4"
            self._audio_path = stem + ".audio.wav"
            self._video = None
            self._audio = None
            self._frames_written = 0
            self._write_error = None
            self._recording = True
        logger.info("Recording started: %s", path)

    def stop_recording(self) -> None:
        """녹화를 멈추고 백그라운드에서 파일을 마무리합니다. 녹화 중이 아니면 무시."""
        with self._lock:
            if not self._recording:
                return
            self._recording = False
            job = _FinalizeJob(
                path=self._path or "",
                video_path=self._video_path or "",
                audio_path=self._audio_path or "",
                video=self._video,
                audio=self._audio,
                frames=self._frames_written,
                write_error=self._write_error,
                on_finished=self._on_finished,
                ffmpeg=self.ffmpeg,
            )
            self._video = None
            self._audio = None
            self._on_finished = None
        finalizer = threading.Thread(
            target=job.run, name="daihon-movie-finalize", daemon=True
        )
        self._finalizers = [t for t in self._finalizers if t.is_alive()]
        self._finalizers.append(finalizer)
        finalizer.start()

    def wait(self, timeout: Optional[float] = None) -> None:
        """진행 중인 마무리 작업이 모두 끝날 때까지 기다립니다.

        Args:
            timeout: 전체 대기 시간 (초). None이면 제한 없음.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for finalizer in list(self._finalizers):
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            finalizer.join(remaining)

    # ------------------------------- Sinks ------------------------------- #
    def write_video(self, frame: np.ndarray) -> None:
        """BGR 프레임 하나를 기록합니다. 녹화 중이 아니면 무시."""
        with self._lock:
            if not self._recording or self._write_error is not None:
                return
            try:
                if self._video is None:
                    h, w = frame.shape[:2]
                    self._video = cv2.VideoWriter(
                        self._video_path, fourcc_mp4v(), float(self.fps), (w, h)
                    )
                    if not self._video.isOpened():
                        raise RecordingError(
                            f"Video writer could not be opened: {self._video_path}"
                        )
                self._video.write(frame)
                self._frames_written += 1
            except Exception as exc:  # noqa: BLE001
                logger.exception("Video write failed")
                self._write_error = exc

    def write_audio(self, block: np.ndarray) -> None:
        """float32 오디오 블록을 16bit PCM으로 기록합니다. 녹화 중이 아니면 무시."""
        with self._lock:
            if not self._recording or self._write_error is not None:
                return
            try:
                if self._audio is None:
                    wav = wave.open(self._audio_path, "wb")
                    wav.setnchannels(self.channels)
                    wav.setsampwidth(2)
                    wav.setframerate(self.sample_rate)
                    self._audio = wav
                pcm = (np.clip(block, -1.0, 1.0) * 32767.0).astype(np.int16)
                self._audio.writeframes(pcm.tobytes())
            except Exception as exc:  # noqa: BLE001
                logger.exception("Audio write failed")
                self._write_error = exc


class _FinalizeJob:
    """녹화 한 건의 마무리 작업."""

    def __init__(
        self,
        path: str,
        video_path: str,
        audio_path: str,
        video: Optional[cv2.VideoWriter],
        audio: Optional[wave.Wave_write],
        frames: int,
        write_error: Optional[BaseException],
        on_finished: Optional[FinishedCallback],
        ffmpeg: str,
    ) -> None:
        self.path = path
        self.video_path = video_path
        self.audio_path = audio_path
        self.video = video
        self.audio = audio
        self.frames = frames
        self.write_error = write_error
        self.on_finished = on_finished
        self.ffmpeg = ffmpeg

    def run(self) -> None:
        error: Optional[BaseException] = None
        try:
            self._finish()
        except Exception as exc:  # noqa: BLE001
            error = exc
            remove_quietly(self.path)
        finally:
            remove_quietly(self.video_path)
            remove_quietly(self.audio_path)

        if error is None:
            logger.info("Recording finished: %s (%d frames)", self.path, self.frames)
        else:
            logger.error("Recording failed: %s", error)
        if self.on_finished is not None:
            self.on_finished(self.path, error)

    def _finish(self) -> None:
        if self.video is not None:
            self.video.release()
        if self.audio is not None:
            self.audio.close()

        if self.write_error is not None:
            raise RecordingError(str(self.write_error)) from self.write_error
        if self.frames == 0:
            raise RecordingError("No video frames were captured.")

        if self.audio is None:
            os.replace(self.video_path, self.path)
            return
        self._mux()

    def _mux(self) -> None:
        cmd = [
            self.ffmpeg,
            "-y",
            "-loglevel",
            "error",
            "-i",
            self.video_path,
            "-i",
            self.audio_path,
            "-map",
            "0:v:0",
            "-map",
            "1:a:0",
            "-c:v",
            "copy",
            "-c:a",
            "aac",
            "-shortest",
            self.path,
        ]
        logger.debug("Muxing: %s", " ".join(cmd))
        try:
            result: Any = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise RecordingError(f"ffmpeg not found: {self.ffmpeg}") from exc
        if result.returncode != 0:
            detail = (result.stderr or "").strip().splitlines()
            raise RecordingError(
                "ffmpeg failed: " + (detail[-1] if detail else f"exit {result.returncode}")
            )
