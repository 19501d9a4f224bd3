from __future__ import annotations

from .model import ELEMENT_SEPARATOR, PreviewMapping, PreviewMode, PreviewPosition, StructuralElement
from .preview import (
    build_preview_mapping,
    collect_controls,
    find_element_at_position,
    render_element,
    render_preview_html,
    render_structure,
)

__all__ = [
    "ELEMENT_SEPARATOR",
    "PreviewMapping",
    "PreviewMode",
    "PreviewPosition",
    "StructuralElement",
    "build_preview_mapping",
    "collect_controls",
    "find_element_at_position",
    "render_element",
    "render_preview_html",
    "render_structure",
]
