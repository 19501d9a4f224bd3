from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

PreviewMode = Literal["clean", "raw"]

# Разделитель между элементами структуры в превью
ELEMENT_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class StructuralElement:
    """
    Один блок структуры промпта.

    Отключенные элементы не попадают в превью, но их контролы
    по-прежнему видны глобальным редакторам значений.
    """
    id: str
    name: str
    enabled: bool = True
    content: str = ""


@dataclass(frozen=True)
class PreviewPosition:
    """Диапазон [start, end) итогового превью, занятый одним элементом."""
    start: int
    end: int
    element_id: str
    element_name: str


@dataclass(frozen=True)
class PreviewMapping:
    positions: List[PreviewPosition]
    total_length: int

    def find(self, position: int) -> Optional[PreviewPosition]:
        for pos in self.positions:
            if pos.start <= position < pos.end:
                return pos
        return None


__all__ = [
    "PreviewMode",
    "ELEMENT_SEPARATOR",
    "StructuralElement",
    "PreviewPosition",
    "PreviewMapping",
]
