"""
Движок синтаксиса контролов: парсер деклараций и рендерер итогового текста.
"""

from __future__ import annotations

from .common import CONTROL_SNIPPETS, control_id, default_values, snippet_for, walk_controls
from .model import ControlDeclaration, ControlKind, Occurrence, Span
from .parser import ControlParser, parse_controls
from .renderer import PromptRenderer, render_prompt, stringify_value

__all__ = [
    "ControlDeclaration",
    "ControlKind",
    "Occurrence",
    "Span",
    "ControlParser",
    "parse_controls",
    "PromptRenderer",
    "render_prompt",
    "stringify_value",
    "CONTROL_SNIPPETS",
    "control_id",
    "snippet_for",
    "walk_controls",
    "default_values",
]
