"""GUI package exporting the teleprompter window and its widgets."""
from __future__ import annotations

from .app import main
from .main_window import TeleprompterWindow
from .permissions import DialogPermissionPrompt
from .preview import PreviewView
from .prompt_area import PromptArea

__all__ = [
    "DialogPermissionPrompt",
    "PreviewView",
    "PromptArea",
    "TeleprompterWindow",
    "main",
]
