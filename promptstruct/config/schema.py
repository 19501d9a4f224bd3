"""
Схемы файлов конфигурации.

Файл структуры повторяет формат экспорта редактора: список элементов
и, опционально, глобальные значения контролов и режим превью.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictBool, StrictFloat, StrictInt, field_validator

from ..structure.model import StructuralElement

# Допустимое значение контрола
ControlValue = Optional[Union[StrictBool, StrictInt, StrictFloat, str]]


class ControlValues(RootModel[Dict[str, ControlValue]]):
    """Отображение имя контрола → скалярное значение."""
    root: Dict[str, ControlValue]


class ElementSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    enabled: bool = True
    content: str = ""

    @field_validator("id", "name", mode="before")
    @classmethod
    def _stringify(cls, value):
        # YAML превращает id вида 1 или 2024 в числа
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("content", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return "" if value is None else value

    def to_element(self) -> StructuralElement:
        return StructuralElement(id=self.id, name=self.name, enabled=self.enabled, content=self.content)


class StructureFile(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    structure: List[ElementSchema] = Field(default_factory=list)
    global_control_values: Dict[str, ControlValue] = Field(default_factory=dict, alias="globalControlValues")
    preview_mode: Literal["clean", "raw"] = Field("clean", alias="previewMode")

    def elements(self) -> List[StructuralElement]:
        return [element.to_element() for element in self.structure]


__all__ = ["ControlValue", "ControlValues", "ElementSchema", "StructureFile"]
