"""
Лексические типы синтаксиса контролов.

Синтаксис контролов намеренно беден: лексеру достаточно различать
открывающие и закрывающие двойные скобки и текст между ними.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в тексте с контролами."""

    TEXT = "TEXT"
    OPEN = "OPEN"      # {{
    CLOSE = "CLOSE"    # }}
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией.

    Позиция нужна парсеру для построения span'ов, строка и колонка
    используются только в отладочном выводе.
    """
    type: TokenType
    value: str
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)

    @property
    def end(self) -> int:
        return self.position + len(self.value)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


OPEN_MARK = "{{"
CLOSE_MARK = "}}"


__all__ = ["TokenType", "Token", "OPEN_MARK", "CLOSE_MARK"]
