"""
promptstruct: движок синтаксиса контролов для структурированных промптов.

Текст с декларациями вида {{text:Name:Default}}, {{select:Genre:A|B}},
{{slider:Power:50}} и {{toggle:Details}}...{{/toggle:Details}} разбирается
parse_controls() и превращается в итоговый текст render_prompt().
"""

from __future__ import annotations

from .controls import ControlDeclaration, ControlKind, parse_controls, render_prompt

__all__ = ["ControlDeclaration", "ControlKind", "parse_controls", "render_prompt"]
