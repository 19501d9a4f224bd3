from __future__ import annotations

import json
from typing import Any


def dumps(obj: Any, *, pretty: bool = False) -> str:
    """
    JSON-дампер для ответов CLI.
    ensure_ascii=False, чтобы имена контролов на любом языке оставались читаемыми;
    завершающий перевод строки добавляет CLI.
    """
    if pretty:
        return json.dumps(obj, ensure_ascii=False, indent=2)
    return json.dumps(obj, ensure_ascii=False)
