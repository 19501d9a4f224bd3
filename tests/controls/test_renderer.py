"""
Тесты для рендерера текста с контролами.
"""

import pytest

from promptstruct.controls import parse_controls, render_prompt
from promptstruct.controls.model import ControlDeclaration, ControlKind, Span
from promptstruct.controls.renderer import PromptRenderer, is_enabled, stringify_value


def render(text, values=None):
    return render_prompt(text, parse_controls(text), values or {})


class TestRenderControls:
    """Подстановка значений в одиночные контролы."""

    def test_text_control(self):
        assert render("Hello {{text:Name:John}}!", {"Name": "Alice"}) == "Hello Alice!"

    def test_select_control(self):
        assert render("Choose {{select:Genre:Fantasy|Sci-Fi|Mystery}}", {"Genre": "Sci-Fi"}) == "Choose Sci-Fi"

    def test_slider_control(self):
        assert render("Set {{slider:Creativity:75}}", {"Creativity": "90"}) == "Set 90"

    def test_defaults_when_no_values(self):
        assert render("Hello {{text:Name:John}}!") == "Hello John!"

    def test_slider_default_with_bounds(self):
        assert render("Set {{slider:Creativity:75:0:100}}") == "Set 75"

    def test_select_without_options_renders_empty(self):
        assert render("Mood: [{{select:Mood}}]") == "Mood: []"

    def test_complex_multi_control_prompt(self):
        text = "{{text:Character:Hero}} in {{select:Genre:Fantasy|Sci-Fi}} with {{slider:Power:50}} power"
        values = {"Character": "Wizard", "Genre": "Fantasy", "Power": "80"}

        assert render(text, values) == "Wizard in Fantasy with 80 power"

    def test_none_value_uses_default(self):
        assert render("Hello {{text:Name:John}}!", {"Name": None}) == "Hello John!"

    def test_empty_string_value_is_used(self):
        assert render("Hello {{text:Name:John}}!", {"Name": ""}) == "Hello !"

    def test_extra_values_ignored(self):
        assert render("Hello {{text:Name:John}}!", {"Other": "x", "Name": "Ann"}) == "Hello Ann!"

    def test_text_without_controls_unchanged(self):
        text = "Plain text with {single} braces"
        assert render(text, {"single": "x"}) == text

    def test_unknown_syntax_left_verbatim(self):
        assert render("{{unknown:X}} {{text:Y:z}}") == "{{unknown:X}} z"

    def test_literal_braces_preserved(self):
        assert render("{{{text:A:b}}}") == "{b}"

    def test_none_text(self):
        assert render_prompt(None, [], {}) == ""

    def test_values_may_be_omitted(self):
        text = "Hello {{text:Name:John}}!"
        assert render_prompt(text, parse_controls(text)) == "Hello John!"


class TestRenderToggles:
    """Раскрытие и удаление toggle-блоков."""

    TEXT = "{{toggle:Include_Details}}Show extra details{{/toggle:Include_Details}}"

    def test_enabled(self):
        assert render(self.TEXT, {"Include_Details": True}) == "Show extra details"

    def test_disabled(self):
        assert render(self.TEXT, {"Include_Details": False}) == ""

    def test_missing_value_removes_block(self):
        assert render("Before {{toggle:T}}x{{/toggle:T}} after") == "Before  after"

    @pytest.mark.parametrize("value", [True, 1, "yes", "false", 0.5])
    def test_truthy_values(self, value):
        assert render(self.TEXT, {"Include_Details": value}) == "Show extra details"

    @pytest.mark.parametrize("value", [False, 0, 0.0, "", None])
    def test_falsy_values(self, value):
        assert render(self.TEXT, {"Include_Details": value}) == ""

    def test_nested_control_uses_default(self):
        text = "{{toggle:Show}}Name: {{text:Character:Hero}}{{/toggle:Show}}"

        assert render(text, {"Show": True}) == "Name: Hero"

    def test_nested_control_uses_value(self):
        text = "{{toggle:Show}}Name: {{text:Character:Hero}}{{/toggle:Show}}"

        assert render(text, {"Show": True, "Character": "Wizard"}) == "Name: Wizard"

    def test_nested_controls_removed_with_block(self):
        text = "A{{toggle:Show}} {{text:Character:Hero}} {{slider:Age:30}}{{/toggle:Show}}B"

        assert render(text, {"Character": "Wizard"}) == "AB"

    def test_several_nested_controls(self):
        text = "{{toggle:Show}}{{text:A:1}}-{{text:B:2}}-{{text:A}}{{/toggle:Show}}"

        assert render(text, {"Show": 1, "B": "two"}) == "1-two-1"

    def test_duplicate_blocks_share_value(self):
        text = "{{toggle:T}}one{{/toggle:T}}|{{toggle:T}}two{{/toggle:T}}"

        assert render(text, {"T": True}) == "one|two"
        assert render(text, {"T": False}) == "|"

    def test_nested_toggle_tags_kept_verbatim(self):
        """Вложенные toggle не поддерживаются: внутренние теги остаются текстом."""
        text = "{{toggle:A}}x{{toggle:B}}y{{/toggle:B}}z{{/toggle:A}}"

        assert render(text, {"A": True, "B": False}) == "x{{toggle:B}}y{{/toggle:B}}z"

    def test_multiline_block(self):
        text = "Intro\n{{toggle:Extra}}\nMore: {{text:Topic:AI}}\n{{/toggle:Extra}}\nOutro"

        assert render(text, {"Extra": True}) == "Intro\n\nMore: AI\n\nOutro"
        assert render(text, {}) == "Intro\n\nOutro"


class TestMultiOccurrence:
    """Все вхождения одного контрола получают одно значение."""

    TEXT = "{{text:Foo:Bar}}, {{text:Foo:Baz}}, {{text:Foo}}"

    def test_defaults(self):
        assert render(self.TEXT) == "Bar, Bar, Bar"

    def test_value(self):
        assert render(self.TEXT, {"Foo": "X"}) == "X, X, X"

    def test_inside_and_outside_toggle(self):
        text = "{{text:N:x}} {{toggle:T}}[{{text:N:y}}]{{/toggle:T}}"

        assert render(text) == "x "
        assert render(text, {"T": True}) == "x [x]"
        assert render(text, {"T": True, "N": "v"}) == "v [v]"

    def test_first_inside_toggle(self):
        text = "{{toggle:T}}[{{text:N:y}}]{{/toggle:T}} {{text:N:x}}"

        assert render(text) == " y"
        assert render(text, {"T": 1}) == "[y] y"

    def test_same_name_different_kinds_share_value(self):
        text = "{{text:Level:high}}/{{slider:Level:3}}"

        assert render(text) == "high/3"
        assert render(text, {"Level": 7}) == "7/7"


class TestStringification:

    @pytest.mark.parametrize("value, expected", [
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (-3, "-3"),
        (80.0, "80"),
        (1.5, "1.5"),
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ])
    def test_stringify_value(self, value, expected):
        assert stringify_value(value) == expected

    def test_boolean_value_in_text(self):
        assert render("Flag: {{text:Flag:no}}", {"Flag": False}) == "Flag: false"

    def test_string_false_is_truthy(self):
        assert is_enabled("false") is True
        assert is_enabled("") is False


class TestHandBuiltDeclarations:
    """Рендерер работает и без парсера, по вручную собранным декларациям."""

    def test_toggle_without_occurrences(self):
        text = "{{toggle:T}}hi{{/toggle:T}}"
        declaration = ControlDeclaration(
            kind=ControlKind.TOGGLE, name="T", span=Span(0, len(text)), inner_text="hi"
        )

        assert render_prompt(text, [declaration], {"T": 1}) == "hi"
        assert render_prompt(text, [declaration], {}) == ""

    def test_text_without_occurrences(self):
        text = "Hi {{text:Name:Bob}}"
        declaration = ControlDeclaration(
            kind=ControlKind.TEXT, name="Name", span=Span(3, len(text)), default_value="Bob"
        )

        assert render_prompt(text, [declaration], {}) == "Hi Bob"

    def test_unknown_kind_ignored(self):
        text = "{{checkbox:X}}"
        declaration = ControlDeclaration(kind="checkbox", name="X", span=Span(0, len(text)))

        assert render_prompt(text, [declaration], {"X": "y"}) == text

    def test_stale_spans_do_not_fail(self):
        declaration = ControlDeclaration(kind=ControlKind.TEXT, name="X", span=Span(0, 100))

        assert render_prompt("short", [declaration], {"X": "y"}) == "short"

    def test_overlapping_spans_skipped(self):
        text = "abcdef"
        first = ControlDeclaration(kind=ControlKind.TEXT, name="A", span=Span(0, 3))
        second = ControlDeclaration(kind=ControlKind.TEXT, name="B", span=Span(2, 5))

        assert render_prompt(text, [first, second], {"A": "X", "B": "Y"}) == "Xdef"

    def test_renderer_class(self):
        text = "Hello {{text:Name:John}}!"
        renderer = PromptRenderer({"Name": "Eve"})

        assert renderer.render(text, parse_controls(text)) == "Hello Eve!"

    def test_toggle_with_spaced_name_without_occurrences(self):
        """Тело блока находится за первым '}}', даже если имя в теге окружено пробелами."""
        text = "{{toggle: T }}hi{{/toggle: T }}"
        declaration = ControlDeclaration(
            kind=ControlKind.TOGGLE, name="T", span=Span(0, len(text)), inner_text="hi"
        )

        assert render_prompt(text, [declaration], {"T": True}) == "hi"
        assert render_prompt("<" + text + ">", [
            ControlDeclaration(kind=ControlKind.TOGGLE, name="T", span=Span(1, len(text) + 1), inner_text="hi")
        ], {"T": True}) == "<hi>"

    def test_toggle_without_inner_text_keeps_nested_controls(self):
        text = "{{toggle:T}}Hi {{text:N:x}}{{/toggle:T}}"
        toggle = ControlDeclaration(kind=ControlKind.TOGGLE, name="T", span=Span(0, len(text)))
        nested = ControlDeclaration(kind=ControlKind.TEXT, name="N", span=Span(15, 27), default_value="x")

        assert render_prompt(text, [toggle, nested], {"T": 1, "N": "Bob"}) == "Hi Bob"
        assert render_prompt(text, [toggle, nested], {"N": "Bob"}) == ""

    def test_every_occurrence_replaced_without_parser(self):
        """Одна декларация без occurrences заменяет все вхождения своего (kind, name)."""
        text = "{{text:Foo:Bar}} {{text:Foo:Baz}} {{text:Foo}}"
        declaration = ControlDeclaration(
            kind=ControlKind.TEXT, name="Foo", span=Span(0, 16), default_value="Bar"
        )

        assert render_prompt(text, [declaration], {"Foo": "X"}) == "X X X"
        assert render_prompt(text, [declaration], {}) == "Bar Bar Bar"

    def test_occurrences_matched_by_kind_and_name(self):
        text = "{{text:Foo:a}} {{slider:Foo:1}}"
        declaration = ControlDeclaration(kind=ControlKind.TEXT, name="Foo", span=Span(0, 14))

        assert render_prompt(text, [declaration], {"Foo": "X"}) == "X {{slider:Foo:1}}"


class TestBracesInsideDirectives:

    def test_opening_braces_in_default(self):
        assert render("{{text:A:x{{y}}") == "x{{y"
        assert render("{{text:A:x{{y}}", {"A": "z"}) == "z"
