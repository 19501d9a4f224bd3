"""
Общие утилиты для работы с декларациями контролов.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional, Union

from .model import ControlDeclaration, ControlKind, control_id


# Заготовки для вставки контролов в редакторе
CONTROL_SNIPPETS: Dict[ControlKind, str] = {
    ControlKind.TEXT: "{{text:Name:Default}}",
    ControlKind.SELECT: "{{select:Name:Option1|Option2|Option3}}",
    ControlKind.SLIDER: "{{slider:Name:50}}",
    ControlKind.TOGGLE: "{{toggle:Name}}...content...{{/toggle:Name}}",
}


def snippet_for(kind: Union[ControlKind, str], name: Optional[str] = None) -> str:
    """
    Возвращает заготовку синтаксиса для типа контрола.

    Если задано имя, оно подставляется вместо "Name".

    Raises:
        ValueError: Для неизвестного типа контрола
    """
    resolved = kind if isinstance(kind, ControlKind) else ControlKind.from_keyword(kind)
    if resolved is None:
        raise ValueError(f"Unknown control kind: {kind!r}")
    snippet = CONTROL_SNIPPETS[resolved]
    if name:
        snippet = snippet.replace(":Name", f":{name.strip()}")
    return snippet


def walk_controls(declarations: Iterable[ControlDeclaration]) -> Iterator[ControlDeclaration]:
    """Обходит декларации верхнего уровня и вложенные в toggle контролы (в глубину)."""
    for declaration in declarations:
        yield declaration
        if declaration.children:
            yield from walk_controls(declaration.children)


def default_values(declarations: Iterable[ControlDeclaration]) -> Dict[str, Any]:
    """
    Начальные значения для панели контролов.

    Для text/select/slider берется значение по умолчанию, для toggle False.
    При совпадении имен у разных типов побеждает первый найденный контрол.
    """
    values: Dict[str, Any] = {}
    for declaration in walk_controls(declarations):
        if declaration.name in values:
            continue
        if declaration.kind is ControlKind.TOGGLE:
            values[declaration.name] = False
        else:
            values[declaration.name] = declaration.default_value
    return values


__all__ = [
    "CONTROL_SNIPPETS",
    "control_id",
    "snippet_for",
    "walk_controls",
    "default_values",
]
