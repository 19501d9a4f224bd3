"""
Лексический анализатор синтаксиса контролов.

Разбивает произвольный пользовательский текст на последовательность
токенов TEXT / OPEN / CLOSE за один проход. Лексер никогда не падает:
любой символ, не входящий в разделитель, является частью текста.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .tokens import OPEN_MARK, Token, TokenType

logger = logging.getLogger(__name__)


class ControlLexer:
    """
    Лексер текста с контролами.

    Правила для серий фигурных скобок:
    - в серии из трех и более '{' открывающим разделителем считаются
      две последние скобки, остальные остаются текстом;
    - в серии '}' закрывающим разделителем считаются две первые скобки,
      остаток разбирается дальше как обычно.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов с EOF в конце.
        """
        tokens: List[Token] = []

        while self.position < self.length:
            special = self._find_next_special_sequence(self.position)
            text_end = special[0] if special else self.length

            if text_end > self.position:
                tokens.append(self._emit(TokenType.TEXT, text_end - self.position))

            if special:
                _, token_type = special
                tokens.append(self._emit(token_type, 2))

        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column))

        logger.debug("Tokenized text of length %d into %d tokens", self.length, len(tokens))
        return tokens

    def _emit(self, token_type: TokenType, count: int) -> Token:
        """Создает токен из следующих count символов и сдвигает позицию."""
        token = Token(
            token_type,
            self.text[self.position:self.position + count],
            self.position,
            self.line,
            self.column,
        )
        self._advance(count)
        return token

    def _advance(self, count: int) -> None:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == '\n':
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1

    def _find_next_special_sequence(self, start: int) -> Optional[Tuple[int, TokenType]]:
        """
        Находит ближайший разделитель ({{ или }}) начиная с позиции start.

        Returns:
            Пара (позиция, тип токена) или None, если разделителей больше нет
        """
        pos = start
        while pos < self.length:
            char = self.text[pos]
            if char not in "{}":
                pos += 1
                continue

            run_end = pos
            while run_end < self.length and self.text[run_end] == char:
                run_end += 1

            if run_end - pos >= 2:
                if char == "{":
                    return run_end - len(OPEN_MARK), TokenType.OPEN
                return pos, TokenType.CLOSE

            pos = run_end
        return None


def tokenize_controls(text: str) -> List[Token]:
    """
    Удобная функция для токенизации текста с контролами.

    Args:
        text: Исходный текст

    Returns:
        Список токенов, последний из которых EOF
    """
    return ControlLexer(text).tokenize()


__all__ = ["ControlLexer", "tokenize_controls"]
