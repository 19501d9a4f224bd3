from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .api_schema import ControlsList, control_from_declaration
from .config import (
    load_structure,
    load_values,
    merge_values,
    parse_assignments,
    read_text_source,
)
from .controls import parse_controls, render_prompt
from .errors import PromptStructUserError
from .jsonic import dumps as jdumps
from .structure import (
    build_preview_mapping,
    collect_controls,
    render_preview_html,
    render_structure,
)
from .version import tool_version

_LOG = logging.getLogger("promptstruct")


def _setup_logging_once() -> None:
    if getattr(_setup_logging_once, "_inited", False):
        return
    _setup_logging_once._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if os.environ.get("PROMPTSTRUCT_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="promptstruct",
        description="Structured prompt builder: control syntax parser and renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--pretty", action="store_true", help="форматировать JSON-вывод с отступами")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для значений контролов
    def add_values(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--values",
            metavar="FILE",
            help="YAML/JSON файл со значениями контролов (имя: значение)",
        )
        sp.add_argument(
            "--set",
            action="append",
            metavar="NAME=VALUE",
            dest="assignments",
            help="значение контрола (можно указать несколько, перекрывает --values)",
        )

    sp_controls = sub.add_parser("controls", help="JSON-список контролов в тексте")
    sp_controls.add_argument("source", help="файл с текстом или - для чтения из stdin")

    sp_render = sub.add_parser("render", help="Итоговый текст с подставленными значениями")
    sp_render.add_argument("source", help="файл с текстом или - для чтения из stdin")
    add_values(sp_render)

    sp_preview = sub.add_parser("preview", help="Превью всей структуры промпта")
    sp_preview.add_argument("structure", help="YAML/JSON файл структуры")
    sp_preview.add_argument(
        "--mode",
        choices=["clean", "raw"],
        default=None,
        help="режим превью (по умолчанию берется из файла структуры)",
    )
    output = sp_preview.add_mutually_exclusive_group()
    output.add_argument("--html", action="store_true", help="HTML с data-атрибутами элементов")
    output.add_argument("--mapping", action="store_true", help="JSON-карта позиций элементов в превью")
    add_values(sp_preview)

    sp_list = sub.add_parser("list", help="Списки сущностей (JSON)")
    sp_list.add_argument("what", choices=["controls"], help="что вывести")
    sp_list.add_argument("structure", help="YAML/JSON файл структуры")

    return p


def _values(ns: argparse.Namespace, base: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Слои значений: файл структуры < --values < --set."""
    from_file = load_values(Path(ns.values)) if getattr(ns, "values", None) else None
    overrides = parse_assignments(getattr(ns, "assignments", None))
    return merge_values(base, from_file, overrides)


def _dump(ns: argparse.Namespace, data: Any) -> None:
    sys.stdout.write(jdumps(data, pretty=bool(ns.pretty)) + "\n")


def main(argv: List[str] | None = None) -> int:
    _setup_logging_once()
    ns = _build_parser().parse_args(argv)

    try:
        if ns.cmd == "controls":
            text = read_text_source(ns.source)
            result = ControlsList(controls=[control_from_declaration(d) for d in parse_controls(text)])
            _dump(ns, result.model_dump(by_alias=True, exclude_none=True))
            return 0

        if ns.cmd == "render":
            text = read_text_source(ns.source)
            sys.stdout.write(render_prompt(text, parse_controls(text), _values(ns)))
            return 0

        if ns.cmd == "preview":
            structure_file = load_structure(Path(ns.structure))
            elements = structure_file.elements()
            values = _values(ns, structure_file.global_control_values)
            mode = ns.mode or structure_file.preview_mode
            if ns.mapping:
                mapping = build_preview_mapping(elements, values, mode)
                _dump(ns, {
                    "positions": [
                        {
                            "start": pos.start,
                            "end": pos.end,
                            "elementId": pos.element_id,
                            "elementName": pos.element_name,
                        }
                        for pos in mapping.positions
                    ],
                    "totalLength": mapping.total_length,
                })
            elif ns.html:
                sys.stdout.write(render_preview_html(elements, values, mode))
            else:
                sys.stdout.write(render_structure(elements, values, mode))
            return 0

        if ns.cmd == "list":
            structure_file = load_structure(Path(ns.structure))
            controls = [
                control_from_declaration(declaration, element_id=element.id, with_children=False)
                for element, declaration in collect_controls(structure_file.elements())
            ]
            _dump(ns, ControlsList(controls=controls).model_dump(by_alias=True, exclude_none=True))
            return 0

    except PromptStructUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
