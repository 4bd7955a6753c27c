# -*- coding: utf-8 -*-
"""
미디어 라이브러리.

녹화가 끝난 동영상을 라이브러리 폴더로 복사해 새 에셋으로 등록합니다.
에셋마다 같은 이름의 ``.json`` 메타 파일을 함께 저장합니다.

Docstring 스타일: Google Style
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import List

from ..core.errors import LibraryError
from ..core.paths import asset_filename, ensure_dir


__all__ = ["Asset", "MediaLibrary"]


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Asset:
    """라이브러리에 저장된 동영상 에셋.

    Attributes:
        asset_id: 에셋 식별자.
        path: 라이브러리 안의 동영상 파일 절대 경로.
        created_at: 등록 시각 (ISO 8601).
        source_name: 원본 임시 파일 이름.
        size_bytes: 파일 크기.
    """

    asset_id: str
    path: str
    created_at: str
    source_name: str
    size_bytes: int


class MediaLibrary:
    """폴더 기반 미디어 라이브러리."""

    def __init__(self, root: str) -> None:
        self.root = root

    def import_video(self, source: str) -> Asset:
        """``source`` 동영상을 새 에셋으로 등록합니다.

        원본 파일은 그대로 두며, 정리는 호출자가 담당합니다.

        Args:
            source: 등록할 동영상 파일 경로.

        Returns:
            생성된 에셋.

        Raises:
            LibraryError: 원본이 없거나 복사/메타 저장에 실패한 경우.
        """
        if not os.path.isfile(source):
            raise LibraryError(f"Video file not found: {source}")

        now = datetime.now()
        asset_id = uuid.uuid4().hex[:12]
        try:
            root = ensure_dir(self.root)
            dest = os.path.join(root, asset_filename(asset_id, now))
            shutil.copy2(source, dest)
            asset = Asset(
                asset_id=asset_id,
                path=dest,
                created_at=now.isoformat(timespec="seconds"),
                source_name=os.path.basename(source),
                size_bytes=os.path.getsize(dest),
            )
            meta_path = os.path.splitext(dest)[0] + ".json"
            with open(meta_path, "w", encoding="utf-8") as f:
                json.dump(asdict(asset), f, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise LibraryError(str(exc)) from exc

        logger.info("Saved asset %s -> %s", asset_id, dest)
        return asset

    def list_assets(self) -> List[Asset]:
        """등록된 에셋을 등록 순서대로 반환합니다."""
        if not os.path.isdir(self.root):
            return []
        assets: List[Asset] = []
        for name in sorted(os.listdir(self.root)):
            if not name.endswith(".json"):
                continue
            with open(os.path.join(self.root, name), "r", encoding="utf-8") as f:
                assets.append(Asset(**json.load(f)))
        return assets
