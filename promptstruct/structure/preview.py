"""
Сборка превью структуры промпта.

Элементы структуры рендерятся независимо и склеиваются через пустую
строку. В режиме "raw" контент выводится как есть, в режиме "clean"
контролы подставляются значениями.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..controls import ControlDeclaration, ControlKind, parse_controls, render_prompt, walk_controls
from .model import (
    ELEMENT_SEPARATOR,
    PreviewMapping,
    PreviewMode,
    PreviewPosition,
    StructuralElement,
)

logger = logging.getLogger(__name__)

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

EMPTY_PREVIEW_HTML = (
    '<div class="preview-empty">'
    "<p>Your rendered prompt will appear here...</p>"
    "<small>Add some elements to get started</small>"
    "</div>"
)


def escape_html(text: str) -> str:
    for raw, escaped in _HTML_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def _enabled(structure: Iterable[StructuralElement]) -> List[StructuralElement]:
    return [element for element in structure if element.enabled]


def render_element(
    element: StructuralElement,
    values: Optional[Mapping[str, Any]] = None,
    mode: PreviewMode = "clean",
) -> str:
    """Контент одного элемента в выбранном режиме превью."""
    if mode == "raw":
        return element.content
    controls = parse_controls(element.content)
    return render_prompt(element.content, controls, values or {})


def render_structure(
    structure: Iterable[StructuralElement],
    values: Optional[Mapping[str, Any]] = None,
    mode: PreviewMode = "clean",
) -> str:
    """
    Итоговый текст промпта: включенные элементы, разделенные пустой строкой.
    """
    rendered = [render_element(element, values, mode) for element in _enabled(structure)]
    logger.debug("Rendered %d enabled elements in %s mode", len(rendered), mode)
    return ELEMENT_SEPARATOR.join(rendered)


def build_preview_mapping(
    structure: Iterable[StructuralElement],
    values: Optional[Mapping[str, Any]] = None,
    mode: PreviewMode = "clean",
) -> PreviewMapping:
    """
    Строит отображение позиций превью на элементы структуры.

    Позволяет определить, какому элементу принадлежит фрагмент текста
    под курсором. После каждого элемента курсор сдвигается на длину
    разделителя, поэтому total_length включает завершающий разделитель.
    """
    positions: List[PreviewPosition] = []
    current = 0

    for element in _enabled(structure):
        content = render_element(element, values, mode)
        start = current
        end = start + len(content)
        positions.append(PreviewPosition(start, end, element.id, element.name))
        current = end + len(ELEMENT_SEPARATOR)

    return PreviewMapping(positions=positions, total_length=current)


def find_element_at_position(mapping: PreviewMapping, position: int) -> Optional[PreviewPosition]:
    """Находит элемент, которому принадлежит позиция превью, или None (например, на разделителе)."""
    return mapping.find(position)


def render_preview_html(
    structure: Iterable[StructuralElement],
    values: Optional[Mapping[str, Any]] = None,
    mode: PreviewMode = "clean",
) -> str:
    """
    HTML превью: каждый элемент оборачивается в span с data-атрибутами
    для подсветки при наведении.
    """
    enabled = _enabled(structure)
    if not enabled:
        return EMPTY_PREVIEW_HTML

    parts = []
    for element in enabled:
        content = escape_html(render_element(element, values, mode))
        parts.append(
            f'<span data-element-id="{escape_html(element.id)}" '
            f'data-element-name="{escape_html(element.name)}">{content}</span>'
        )
    return ELEMENT_SEPARATOR.join(parts)


def collect_controls(structure: Iterable[StructuralElement]) -> List[Tuple[StructuralElement, ControlDeclaration]]:
    """
    Собирает контролы всего документа для глобальных редакторов значений.

    Учитываются все элементы, включая отключенные. Для каждой пары
    (kind, name) остается первое вхождение в порядке элементов; вложенные
    в toggle контролы тоже попадают в результат.

    Returns:
        Пары (элемент, декларация) в порядке обнаружения
    """
    seen: Dict[Tuple[ControlKind, str], None] = {}
    result: List[Tuple[StructuralElement, ControlDeclaration]] = []
    for element in structure:
        for declaration in walk_controls(parse_controls(element.content)):
            if declaration.identity in seen:
                continue
            seen[declaration.identity] = None
            result.append((element, declaration))
    return result


__all__ = [
    "EMPTY_PREVIEW_HTML",
    "escape_html",
    "render_element",
    "render_structure",
    "build_preview_mapping",
    "find_element_at_position",
    "render_preview_html",
    "collect_controls",
]
