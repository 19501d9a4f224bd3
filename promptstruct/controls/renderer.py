"""
Рендерер текста с контролами.

Подставляет значения контролов в исходный текст по span'ам, найденным
парсером. Все замены собираются в один план непересекающихся вставок,
поэтому имена контролов никогда не превращаются в регулярные выражения.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .common import walk_controls
from .model import VALUE_KINDS, ControlDeclaration, ControlKind, Occurrence, Span
from .parser import find_directives, parse_directive
from .tokens import CLOSE_MARK, OPEN_MARK

logger = logging.getLogger(__name__)

# Вставка: заменяемый диапазон и текст замены
Edit = Tuple[Span, str]


def stringify_value(value: Any) -> str:
    """
    Приводит значение контрола к строке.

    Булевы значения дают "true"/"false", целочисленные float печатаются
    без дробной части.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def is_enabled(value: Any) -> bool:
    """Истинность значения toggle. Строка "false" считается истинной."""
    return bool(value)


def resolve_value(declaration: ControlDeclaration, values: Mapping[str, Any]) -> str:
    """Значение из values (если задано и не None) или значение по умолчанию."""
    value = values.get(declaration.name)
    if value is None:
        return declaration.default_value or ""
    return stringify_value(value)


class PromptRenderer:
    """
    Рендерер текста по готовому списку деклараций.

    Для toggle-блоков с истинным значением сохраняется внутреннее
    содержимое (с подставленными вложенными контролами), с ложным или
    отсутствующим значением блок удаляется целиком вместе с тегами.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self.values: Mapping[str, Any] = values if values is not None else {}

    def render(self, text: Any, declarations: Iterable[ControlDeclaration]) -> str:
        if not isinstance(text, str):
            return ""
        if not text:
            return text

        blocks: List[Tuple[Occurrence, bool]] = []
        edits: List[Edit] = []
        located: Optional[Dict[Tuple[ControlKind, str], List[Span]]] = None

        for declaration in walk_controls(declarations):
            if declaration.kind is ControlKind.TOGGLE:
                enabled = is_enabled(self.values.get(declaration.name))
                occurrences = declaration.occurrences or (_locate_toggle(text, declaration),)
                blocks.extend((occ, enabled) for occ in occurrences)
            elif declaration.kind in VALUE_KINDS:
                replacement = resolve_value(declaration, self.values)
                spans = [occ.span for occ in declaration.occurrences]
                if not spans:
                    # Декларация собрана без парсера: ищем все вхождения в тексте
                    if located is None:
                        located = _locate_directives(text)
                    spans = located.get(declaration.identity) or [declaration.span]
                edits.extend((span, replacement) for span in spans)
            else:
                logger.debug("Ignoring control of unknown kind %r", declaration.kind)

        plan = self._build_plan(text, blocks, edits)
        logger.debug("Rendering %d replacements over text of length %d", len(plan), len(text))
        return _apply(text, plan)

    def _build_plan(
        self,
        text: str,
        blocks: List[Tuple[Occurrence, bool]],
        edits: List[Edit],
    ) -> List[Edit]:
        """
        Собирает итоговый план замен верхнего уровня.

        Замены внутри toggle-блока сворачиваются в текст замены самого блока.
        Вставки, выходящие за пределы текста или пересекающие уже принятые,
        отбрасываются.
        """
        length = len(text)
        accepted_blocks: List[Tuple[Occurrence, bool]] = []
        for occurrence, enabled in sorted(blocks, key=lambda b: b[0].span.start):
            if not _fits(occurrence.span, length):
                continue
            if accepted_blocks and accepted_blocks[-1][0].span.overlaps(occurrence.span):
                continue
            accepted_blocks.append((occurrence, enabled))

        nested: Dict[int, List[Edit]] = {}
        top_level: List[Edit] = []
        for span, replacement in edits:
            if not _fits(span, length):
                continue
            owner = next(
                (i for i, (occ, _) in enumerate(accepted_blocks) if occ.span.overlaps(span)),
                None,
            )
            if owner is None:
                top_level.append((span, replacement))
                continue
            body = accepted_blocks[owner][0].body
            if body is not None and body.contains(span):
                nested.setdefault(owner, []).append((span, replacement))

        plan = _non_overlapping(top_level)
        for i, (occurrence, enabled) in enumerate(accepted_blocks):
            replacement = ""
            if enabled and occurrence.body is not None:
                body = occurrence.body
                local = [
                    (span.shift(-body.start), value)
                    for span, value in _non_overlapping(nested.get(i, []))
                ]
                replacement = _apply(text[body.start:body.end], local)
            plan.append((occurrence.span, replacement))

        return sorted(plan, key=lambda edit: edit[0].start)


def _locate_toggle(text: str, declaration: ControlDeclaration) -> Occurrence:
    """
    Восстанавливает тело toggle-блока без occurrences.

    Тело начинается сразу за первым '}}' внутри span'а (имя в теге может
    содержать пробелы) и имеет длину inner_text; без inner_text оно
    заканчивается перед последним '{{' span'а.
    """
    span = declaration.span
    close = text.find(CLOSE_MARK, span.start, span.end)
    if close < 0:
        return Occurrence(span)
    start = close + len(CLOSE_MARK)
    if declaration.inner_text is not None:
        end = start + len(declaration.inner_text)
    else:
        end = text.rfind(OPEN_MARK, start, span.end)
        if end < 0:
            end = span.end
    return Occurrence(span, Span(start, min(end, span.end)))


def _locate_directives(text: str) -> Dict[Tuple[ControlKind, str], List[Span]]:
    """Span'ы всех одиночных контролов текста, сгруппированные по (kind, name)."""
    located: Dict[Tuple[ControlKind, str], List[Span]] = {}
    for directive in find_directives(text):
        declaration = parse_directive(directive)
        if declaration is not None:
            located.setdefault(declaration.identity, []).append(directive.span)
    return located


def _fits(span: Span, length: int) -> bool:
    return 0 <= span.start <= span.end <= length


def _non_overlapping(edits: List[Edit]) -> List[Edit]:
    result: List[Edit] = []
    for span, replacement in sorted(edits, key=lambda edit: edit[0].start):
        if result and result[-1][0].overlaps(span):
            continue
        result.append((span, replacement))
    return result


def _apply(text: str, plan: List[Edit]) -> str:
    """Применяет отсортированный план непересекающихся замен за один проход."""
    parts: List[str] = []
    cursor = 0
    for span, replacement in plan:
        parts.append(text[cursor:span.start])
        parts.append(replacement)
        cursor = span.end
    parts.append(text[cursor:])
    return "".join(parts)


def render_prompt(
    text: Any,
    declarations: Iterable[ControlDeclaration],
    values: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Рендерит текст: toggle-блоки раскрываются или удаляются, остальные
    контролы заменяются значениями из values или значениями по умолчанию.

    Args:
        text: Исходный текст, по которому были получены декларации
        declarations: Результат parse_controls(text)
        values: Отображение имя контрола → значение; лишние ключи игнорируются

    Returns:
        Итоговый текст
    """
    return PromptRenderer(values).render(text, declarations)


__all__ = [
    "PromptRenderer",
    "render_prompt",
    "resolve_value",
    "stringify_value",
    "is_enabled",
]
