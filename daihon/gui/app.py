# -*- coding: utf-8 -*-
"""
PyQt5 기반 GUI 실행 진입점 모듈.

설정을 읽어 세션 관리자와 TeleprompterWindow를 만들고 QApplication을 실행합니다.

예시
    daihon --camera 1 --text script.txt --library ~/Videos/Daihon

Docstring 스타일: Google Style
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from PyQt5 import QtWidgets

from ..capture import CaptureSessionManager
from ..core import PermissionStore, load_config
from .main_window import TeleprompterWindow
from .permissions import DialogPermissionPrompt


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="daihon", description="Teleprompter with front-camera recording."
    )
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--camera", type=int, help="OpenCV camera index")
    parser.add_argument("--mic", type=int, help="sounddevice input device index")
    parser.add_argument("--library", help="Media library directory")
    parser.add_argument("--text", help="UTF-8 text file used as the prompt")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """애플리케이션 실행 진입점.

    QApplication을 생성하고 TeleprompterWindow를 띄운 후 이벤트 루프를 실행합니다.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            args.config,
            camera_index=args.camera,
            microphone_index=args.mic,
            library_dir=args.library,
        )
        prompt_text = None
        if args.text:
            with open(args.text, "r", encoding="utf-8") as f:
                prompt_text = f.read()
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(2)

    app = QtWidgets.QApplication(sys.argv[:1])
    prompt = DialogPermissionPrompt(usage=config.microphone_usage_description)
    permissions = PermissionStore.from_config(config.permissions, prompt=prompt)
    manager = CaptureSessionManager(config, permissions=permissions)

    window = TeleprompterWindow(manager, prompt_text=prompt_text)
    prompt.parent = window
    window.resize(720, 960)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
