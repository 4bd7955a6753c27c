"""
Tests for file system helpers.
"""

import os
from datetime import datetime

from daihon.core.paths import asset_filename, remove_quietly, temporary_recording_path


def test_temporary_paths_are_unique_and_inside_dir(tmp_path):
    temp_dir = tmp_path / "nested" / "tmp"

    first = temporary_recording_path(str(temp_dir))
    second = temporary_recording_path(str(temp_dir))

    assert first != second
    assert os.path.dirname(first) == str(temp_dir)
    assert first.endswith(".mp4")
    assert temp_dir.is_dir()
    assert not os.path.exists(first)


def test_asset_filename():
    name = asset_filename("abc", datetime(2025, 8, 10, 9, 5, 3))
    assert name == "20250810_090503_abc.mp4"


def test_remove_quietly(tmp_path):
    target = tmp_path / "file.mp4"
    target.write_bytes(b"data")

    assert remove_quietly(str(target)) is True
    assert not target.exists()
    assert remove_quietly(str(target)) is False
    assert remove_quietly(None) is False
