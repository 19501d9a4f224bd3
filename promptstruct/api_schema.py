"""
JSON-схема ответов CLI.

Ключи сериализуются в camelCase, как их ожидает редактор.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .controls import ControlDeclaration


class Control(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: str
    name: str
    default_value: str = Field(alias="defaultValue")
    options: Optional[List[str]] = None
    min: Optional[int] = None
    max: Optional[int] = None
    inner_text: Optional[str] = Field(None, alias="innerText")
    start_index: int = Field(alias="startIndex")
    end_index: int = Field(alias="endIndex")
    occurrences: List[List[int]] = Field(default_factory=list)
    children: Optional[List["Control"]] = None
    element_id: Optional[str] = Field(None, alias="elementId")


Control.model_rebuild()


class ControlsList(BaseModel):
    controls: List[Control]


def control_from_declaration(
    declaration: ControlDeclaration,
    element_id: Optional[str] = None,
    with_children: bool = True,
) -> Control:
    kind = getattr(declaration.kind, "value", str(declaration.kind))
    return Control(
        id=declaration.control_id,
        kind=kind,
        name=declaration.name,
        default_value=declaration.default_value,
        options=list(declaration.options) if kind == "select" else None,
        min=declaration.min,
        max=declaration.max,
        inner_text=declaration.inner_text,
        start_index=declaration.start_index,
        end_index=declaration.end_index,
        occurrences=[[occ.span.start, occ.span.end] for occ in declaration.all_occurrences()],
        children=(
            [control_from_declaration(child) for child in declaration.children] or None
            if with_children else None
        ),
        element_id=element_id,
    )


__all__ = ["Control", "ControlsList", "control_from_declaration"]
