"""
Парсер синтаксиса контролов.

Строит список деклараций контролов из последовательности токенов.

Грамматика:
control      → "{{" kind ":" name [":" rest] "}}"
kind         → "text" | "select" | "slider"
toggle-open  → "{{toggle:" name "}}"
toggle-close → "{{/toggle:" name "}}"
toggle-block → toggle-open inner-text toggle-close   (имена совпадают буквально)
select-rest  → option ("|" option)*
slider-rest  → default [":" min ":" max]

Разбор выполняется в три шага: поиск директив {{...}}, сопоставление
toggle-блоков и разбор одиночных контролов (на верхнем уровне и внутри
блоков). Некорректный синтаксис не порождает деклараций и никогда не
приводит к исключению.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .lexer import tokenize_controls
from .model import (
    ControlDeclaration,
    ControlKind,
    DEFAULT_SLIDER_MAX,
    DEFAULT_SLIDER_MIN,
    DEFAULT_SLIDER_VALUE,
    Occurrence,
    Span,
)
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

TOGGLE_OPEN_PREFIX = "toggle:"
TOGGLE_CLOSE_PREFIX = "/toggle:"


@dataclass(frozen=True)
class Directive:
    """Содержимое между {{ и }} вместе с полным span'ом конструкции."""
    body: str
    span: Span


@dataclass(frozen=True)
class ToggleBlock:
    """Сопоставленная пара открывающего и закрывающего тегов."""
    name: str
    span: Span
    body: Span
    inner_text: str
    inner: Tuple[Directive, ...]


@dataclass
class _Entry:
    """Запись реестра дедупликации: первое вхождение и все последующие."""
    declaration: ControlDeclaration
    container: Optional[str] = None  # имя toggle, внутри блока которого найдено первое вхождение
    occurrences: List[Occurrence] = field(default_factory=list)


class ControlParser:
    """
    Парсер текста с контролами.

    Экземпляр не хранит состояния между вызовами parse().
    """

    def parse(self, text: Any) -> List[ControlDeclaration]:
        """
        Парсит текст в отсортированный список деклараций.

        Args:
            text: Исходный текст. None и не-строки дают пустой список.

        Returns:
            Декларации верхнего уровня, отсортированные по начальной позиции.
            Контролы внутри toggle-блоков доступны через children.
        """
        if not isinstance(text, str) or not text:
            return []

        directives = self._scan_directives(tokenize_controls(text))
        if not directives:
            return []

        blocks, top_level = self._match_toggle_blocks(directives, text)

        # Все находки в порядке сканирования: (позиция, блок или директива, контейнер)
        found: List[Tuple[int, Any, Optional[str]]] = []
        for block in blocks:
            found.append((block.span.start, block, None))
            for directive in block.inner:
                found.append((directive.span.start, directive, block.name))
        for directive in top_level:
            found.append((directive.span.start, directive, None))
        found.sort(key=lambda item: item[0])

        registry: Dict[Tuple[ControlKind, str], _Entry] = {}
        for _, item, container in found:
            if isinstance(item, ToggleBlock):
                declaration = ControlDeclaration(
                    kind=ControlKind.TOGGLE,
                    name=item.name,
                    span=item.span,
                    inner_text=item.inner_text,
                )
                occurrence = Occurrence(item.span, item.body)
            else:
                declaration = parse_directive(item)
                if declaration is None:
                    continue
                occurrence = Occurrence(item.span)

            entry = registry.get(declaration.identity)
            if entry is None:
                entry = _Entry(declaration, container)
                registry[declaration.identity] = entry
            entry.occurrences.append(occurrence)

        result = self._assemble(registry)
        logger.debug(
            "Parsed %d directives into %d top-level declarations (%d identities)",
            len(directives), len(result), len(registry),
        )
        return result

    # Шаг 1: директивы

    def _scan_directives(self, tokens: List[Token]) -> List[Directive]:
        """
        Находит последовательности OPEN TEXT CLOSE.

        Тело директивы не может содержать '}'. Тело с вложенными '{{'
        (OPEN TEXT (OPEN TEXT)* CLOSE) принимается, только если оно
        разбирается как одиночный контрол, например {{text:A:x{{y}};
        иначе сканирование продолжается со следующего OPEN.
        OPEN без корректного продолжения считается обычным текстом.
        """
        directives: List[Directive] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.type is TokenType.OPEN:
                close_index = self._find_close(tokens, i + 1)
                if close_index is not None:
                    parts = tokens[i + 1:close_index]
                    body = "".join(t.value for t in parts)
                    directive = Directive(body, Span(token.position, tokens[close_index].end))
                    compound = any(t.type is TokenType.OPEN for t in parts)
                    if body and "}" not in body and (not compound or parse_directive(directive)):
                        directives.append(directive)
                        i = close_index + 1
                        continue
            i += 1
        return directives

    @staticmethod
    def _find_close(tokens: List[Token], start: int) -> Optional[int]:
        """Индекс первого CLOSE после start, если до него встречаются только TEXT и OPEN."""
        for j in range(start, len(tokens)):
            if tokens[j].type is TokenType.CLOSE:
                return j
            if tokens[j].type is TokenType.EOF:
                return None
        return None

    # Шаг 2: toggle-блоки

    def _match_toggle_blocks(
        self, directives: List[Directive], text: str
    ) -> Tuple[List[ToggleBlock], List[Directive]]:
        """
        Сопоставляет открывающие и закрывающие теги toggle.

        Закрывающим считается первый последующий тег с буквально тем же
        именем. После блока сканирование продолжается за закрывающим тегом,
        поэтому вложенные toggle остаются обычным содержимым блока.

        Returns:
            (блоки, директивы вне блоков)
        """
        blocks: List[ToggleBlock] = []
        top_level: List[Directive] = []

        i = 0
        while i < len(directives):
            opener = directives[i]
            raw_name = _toggle_name(opener.body, TOGGLE_OPEN_PREFIX)
            if raw_name is None:
                top_level.append(opener)
                i += 1
                continue

            closing_body = TOGGLE_CLOSE_PREFIX + raw_name
            close_index = next(
                (j for j in range(i + 1, len(directives)) if directives[j].body == closing_body),
                None,
            )
            if close_index is None:
                # Блок без закрывающего тега не совпадает
                top_level.append(opener)
                i += 1
                continue

            closer = directives[close_index]
            body = Span(opener.span.end, closer.span.start)
            blocks.append(ToggleBlock(
                name=raw_name.strip(),
                span=Span(opener.span.start, closer.span.end),
                body=body,
                inner_text=text[body.start:body.end],
                inner=tuple(directives[i + 1:close_index]),
            ))
            i = close_index + 1

        return blocks, top_level

    # Финальная сборка

    def _assemble(self, registry: Dict[Tuple[ControlKind, str], _Entry]) -> List[ControlDeclaration]:
        """Переносит все вхождения в декларации и раскладывает вложенные контролы по toggle."""
        children: Dict[str, List[ControlDeclaration]] = {}
        top_level: List[ControlDeclaration] = []

        for entry in registry.values():
            declaration = replace(entry.declaration, occurrences=tuple(entry.occurrences))
            if entry.container is None:
                top_level.append(declaration)
            else:
                children.setdefault(entry.container, []).append(declaration)

        result = []
        for declaration in top_level:
            nested = children.get(declaration.name) if declaration.is_toggle else None
            if nested:
                declaration = replace(
                    declaration,
                    children=tuple(sorted(nested, key=lambda d: d.start_index)),
                )
            result.append(declaration)

        return sorted(result, key=lambda d: d.start_index)


def _toggle_name(body: str, prefix: str) -> Optional[str]:
    """Возвращает буквальное имя toggle-тега или None, если тело не является тегом."""
    if not body.startswith(prefix):
        return None
    name = body[len(prefix):]
    if ":" in name or not name.strip():
        return None
    return name


def _parse_int(raw: str, fallback: int) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return fallback


def parse_directive(directive: Directive) -> Optional[ControlDeclaration]:
    """
    Разбирает одиночный контрол kind:name[:rest].

    Returns:
        Декларацию или None для toggle-тегов, неизвестных типов и
        синтаксически неполных директив
    """
    kind_raw, sep, remainder = directive.body.partition(":")
    if not sep:
        return None

    kind = ControlKind.from_keyword(kind_raw)
    if kind is None or kind is ControlKind.TOGGLE:
        return None

    name_raw, sep, rest_raw = remainder.partition(":")
    name = name_raw.strip()
    if not name:
        return None
    rest = rest_raw if sep and rest_raw else None

    if kind is ControlKind.TEXT:
        return ControlDeclaration(
            kind=kind,
            name=name,
            span=directive.span,
            default_value=rest.strip() if rest is not None else "",
        )

    if kind is ControlKind.SLIDER:
        # Двоеточия внутри rest допускаются только для слайдера
        segments = rest.split(":") if rest is not None else []
        default = segments[0].strip() if segments else ""
        low, high = DEFAULT_SLIDER_MIN, DEFAULT_SLIDER_MAX
        if len(segments) >= 3:
            low = _parse_int(segments[1], DEFAULT_SLIDER_MIN)
            high = _parse_int(segments[2], DEFAULT_SLIDER_MAX)
        return ControlDeclaration(
            kind=kind,
            name=name,
            span=directive.span,
            default_value=default or DEFAULT_SLIDER_VALUE,
            min=low,
            max=high,
        )

    options = tuple(option.strip() for option in rest.split("|")) if rest is not None else ()
    return ControlDeclaration(
        kind=kind,
        name=name,
        span=directive.span,
        default_value=options[0] if options else "",
        options=options,
    )


def parse_controls(text: Any) -> List[ControlDeclaration]:
    """
    Удобная функция для разбора текста с контролами.

    Args:
        text: Исходный текст (None и не-строки допустимы)

    Returns:
        Отсортированный список деклараций верхнего уровня
    """
    return ControlParser().parse(text)


def find_directives(text: str) -> List[Directive]:
    """Все директивы {{...}} текста в порядке следования, без сопоставления toggle-блоков."""
    return ControlParser()._scan_directives(tokenize_controls(text))


__all__ = [
    "ControlParser",
    "Directive",
    "ToggleBlock",
    "find_directives",
    "parse_directive",
    "parse_controls",
]
