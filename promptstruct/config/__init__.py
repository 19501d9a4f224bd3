from __future__ import annotations

from .load import (
    ConfigLoadError,
    ValuesFormatError,
    load_structure,
    load_values,
    merge_values,
    parse_assignments,
    read_text_source,
)
from .schema import StructureFile

__all__ = [
    "ConfigLoadError",
    "ValuesFormatError",
    "StructureFile",
    "load_structure",
    "load_values",
    "merge_values",
    "parse_assignments",
    "read_text_source",
]
