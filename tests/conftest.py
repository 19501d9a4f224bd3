from pathlib import Path

import pytest

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.file_utils import write, write_structure
from tests.infrastructure.cli_utils import run_cli, jload


@pytest.fixture
def prompt_file(tmp_path: Path) -> Path:
    """Текст промпта с контролом каждого типа."""
    return write(
        tmp_path / "prompt.txt",
        "Hello {{text:Name:John}}! Tone: {{select:Tone:Calm|Loud}}. "
        "Level {{slider:Level:30:0:10}}."
        "{{toggle:Extra}} Bye, {{text:Name}}.{{/toggle:Extra}}",
    )


@pytest.fixture
def structure_file(tmp_path: Path) -> Path:
    """Файл структуры в формате экспорта редактора: элементы + глобальные значения."""
    return write_structure(
        tmp_path / "structure.yaml",
        """
        structure:
          - id: intro
            name: Intro
            content: "Hello {{text:Name:John}}!"
          - id: hidden
            name: Hidden
            enabled: false
            content: "{{slider:Secret:7}}"
          - id: tone
            name: Tone
            content: "<b>{{select:Tone:Calm|Loud}}</b>"
        globalControlValues:
          Tone: Loud
        previewMode: clean
        """,
    )


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    # отладочный вывод в stderr ломает проверки CLI
    monkeypatch.delenv("PROMPTSTRUCT_DEBUG", raising=False)


__all__ = ["run_cli", "jload"]
