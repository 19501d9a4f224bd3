"""
Модели данных для синтаксиса контролов.

Декларация контрола описывает один динамический плейсхолдер, найденный
в тексте. Декларации неизменяемы и живут только в рамках одного цикла
parse → render.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

_WHITESPACE_RE = re.compile(r"\s+")


class ControlKind(str, Enum):
    """Типы контролов. Набор закрыт."""
    TEXT = "text"
    SELECT = "select"
    SLIDER = "slider"
    TOGGLE = "toggle"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["ControlKind"]:
        """Возвращает тип по ключевому слову директивы или None для неизвестных."""
        try:
            return cls(keyword.strip())
        except ValueError:
            return None


# Типы контролов, которые подставляются значением (все, кроме toggle)
VALUE_KINDS = frozenset({ControlKind.TEXT, ControlKind.SELECT, ControlKind.SLIDER})

DEFAULT_SLIDER_VALUE = "50"
DEFAULT_SLIDER_MIN = 0
DEFAULT_SLIDER_MAX = 100


def control_id(name: str) -> str:
    """Стабильный идентификатор контрола для UI: control_<имя в нижнем регистре>."""
    return "control_" + _WHITESPACE_RE.sub("_", name.lower())


@dataclass(frozen=True, order=True)
class Span:
    """Полуоткрытый диапазон [start, end) в исходном тексте."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return max(0, self.end - self.start)

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def shift(self, offset: int) -> "Span":
        return Span(self.start + offset, self.end + offset)


@dataclass(frozen=True)
class Occurrence:
    """
    Одно буквальное вхождение контрола в текст.

    Для toggle-блоков body указывает на внутреннее содержимое
    между открывающим и закрывающим тегами.
    """
    span: Span
    body: Optional[Span] = None


@dataclass(frozen=True)
class ControlDeclaration:
    """
    Декларация контрола.

    Идентичность контрола задается парой (kind, name). Все повторные вхождения
    той же пары схлопываются в одну декларацию, а их span'ы сохраняются
    в occurrences, чтобы рендерер заменил каждое из них.
    """
    kind: ControlKind
    name: str
    span: Span
    default_value: str = ""
    options: Tuple[str, ...] = ()
    min: Optional[int] = None
    max: Optional[int] = None
    inner_text: Optional[str] = None
    occurrences: Tuple[Occurrence, ...] = ()
    children: Tuple["ControlDeclaration", ...] = ()

    def __post_init__(self) -> None:
        # Декларации, собранные вручную, могут передавать тип строкой
        if not isinstance(self.kind, ControlKind):
            kind = ControlKind.from_keyword(str(self.kind))
            if kind is not None:
                object.__setattr__(self, "kind", kind)

    @property
    def start_index(self) -> int:
        return self.span.start

    @property
    def end_index(self) -> int:
        return self.span.end

    @property
    def identity(self) -> Tuple[ControlKind, str]:
        return self.kind, self.name

    @property
    def is_toggle(self) -> bool:
        return self.kind is ControlKind.TOGGLE

    @property
    def control_id(self) -> str:
        return control_id(self.name)

    def all_occurrences(self) -> Tuple[Occurrence, ...]:
        """
        Известные вхождения: occurrences или, для деклараций без них,
        один основной span. Поиск вхождений по тексту выполняет рендерер.
        """
        return self.occurrences or (Occurrence(self.span),)


__all__ = [
    "ControlKind",
    "VALUE_KINDS",
    "DEFAULT_SLIDER_VALUE",
    "DEFAULT_SLIDER_MIN",
    "DEFAULT_SLIDER_MAX",
    "control_id",
    "Span",
    "Occurrence",
    "ControlDeclaration",
]
