"""
Загрузка файлов структуры и значений контролов.

YAML читается через ruamel.yaml в безопасном режиме (JSON тоже
является валидным YAML), результат валидируется pydantic-схемами.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import PromptStructUserError
from .schema import ControlValues, StructureFile

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


class ConfigLoadError(PromptStructUserError):
    """Ошибка чтения или валидации файла конфигурации."""
    pass


class ValuesFormatError(ConfigLoadError):
    """Некорректные значения контролов (файл или присваивания NAME=VALUE)."""
    pass


def read_text_source(source: str) -> str:
    """
    Читает текст из файла или из stdin, если source равен "-".

    Raises:
        ConfigLoadError: Если файл не найден или не читается
    """
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise ConfigLoadError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"Failed to read {path}: {e}") from e


def _read_yaml(path: Path) -> Any:
    text = read_text_source(str(path))
    try:
        return _yaml.load(text)
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e


def _validation_message(path: Path, error: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()
    )
    return f"{path}: {details}"


def load_values(path: Path) -> Dict[str, Any]:
    """
    Загружает значения контролов из YAML/JSON файла.

    Пустой файл дает пустое отображение.

    Raises:
        ValuesFormatError: Если корень не отображение или значения не скалярные
    """
    raw = _read_yaml(path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValuesFormatError(f"Values file must be a mapping: {path}")
    try:
        values = ControlValues.model_validate({str(k): v for k, v in raw.items()}).root
    except ValidationError as e:
        raise ValuesFormatError(_validation_message(path, e)) from e
    logger.debug("Loaded %d control values from %s", len(values), path)
    return values


def load_structure(path: Path) -> StructureFile:
    """
    Загружает файл структуры промпта.

    Поддерживаются два формата: список элементов или отображение
    с ключами structure / globalControlValues / previewMode.

    Raises:
        ConfigLoadError: При ошибке чтения или валидации
    """
    raw = _read_yaml(path)
    if raw is None:
        raw = {}
    if isinstance(raw, list):
        raw = {"structure": raw}
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"Structure file must be a list or a mapping: {path}")
    try:
        structure = StructureFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(_validation_message(path, e)) from e
    logger.debug("Loaded %d structural elements from %s", len(structure.structure), path)
    return structure


def _scalar(raw: str) -> Any:
    """Типизирует значение присваивания как YAML-скаляр; все прочее остается строкой."""
    if raw == "":
        return ""
    try:
        value = _yaml.load(raw)
    except YAMLError:
        return raw
    if isinstance(value, (str, bool, int, float)):
        return value
    return raw


def parse_assignments(assignments: Optional[Iterable[str]]) -> Dict[str, Any]:
    """
    Парсит присваивания вида NAME=VALUE из командной строки.

    Значения "true"/"false" становятся булевыми, числа становятся числами.
    Имя обрезается по краям, значение остается как есть.

    Raises:
        ValuesFormatError: Если присваивание не содержит '=' или имя пустое
    """
    result: Dict[str, Any] = {}
    if not assignments:
        return result

    for item in assignments:
        if "=" not in item:
            raise ValuesFormatError(f"Invalid value assignment '{item}'. Expected 'NAME=VALUE'")
        name, raw = item.split("=", 1)
        name = name.strip()
        if not name:
            raise ValuesFormatError(f"Invalid value assignment '{item}'. Control name is empty")
        result[name] = _scalar(raw)

    return result


def merge_values(*layers: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Объединяет слои значений; последующие слои перекрывают предыдущие."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


__all__ = [
    "ConfigLoadError",
    "ValuesFormatError",
    "read_text_source",
    "load_values",
    "load_structure",
    "parse_assignments",
    "merge_values",
]
