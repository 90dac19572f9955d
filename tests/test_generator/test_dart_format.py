"""Tests for the Dart formatter service (assetgen.generator.dart_format)."""

from __future__ import annotations

import pytest

from assetgen.errors import FormatError
from assetgen.generator.dart_format import BasicDartFormatter, NoopFormatter

pytestmark = pytest.mark.unit

RAW_CLASS = (
    "// Generated by assetgen on 2026-01-15 10:30:00\n"
    "\n"
    "class Images {\n"
    "\tstatic const String a = 'assets/a.png';\n"
    "\tstatic const String b = 'assets/b.jpg';   \n"
    "}"
)


class TestBasicDartFormatter:
    def test_reindents_class(self):
        result = BasicDartFormatter().format(RAW_CLASS)
        assert result == (
            "// Generated by assetgen on 2026-01-15 10:30:00\n"
            "\n"
            "class Images {\n"
            "  static const String a = 'assets/a.png';\n"
            "  static const String b = 'assets/b.jpg';\n"
            "}\n"
        )

    def test_idempotent(self):
        formatter = BasicDartFormatter()
        once = formatter.format(RAW_CLASS)
        assert formatter.format(once) == once

    def test_collapses_blank_lines(self):
        result = BasicDartFormatter().format("\n\n// header\n\n\n\nclass A {\n\tString a = 'x';\n}\n\n")
        assert result == "// header\n\nclass A {\n  String a = 'x';\n}\n"

    def test_nested_blocks(self):
        source = "void main() {\ntest('x', () {\nexpect(1, 1);\n});\n}"
        assert BasicDartFormatter().format(source) == (
            "void main() {\n"
            "  test('x', () {\n"
            "    expect(1, 1);\n"
            "  });\n"
            "}\n"
        )

    def test_braces_inside_strings_ignored(self):
        source = "class A {\n\tstatic const String a = 'assets/{weird}}.png';\n}"
        assert "'assets/{weird}}.png'" in BasicDartFormatter().format(source)

    def test_escaped_quote_inside_string(self):
        source = "class A {\n\tstatic const String a = 'it\\'s {.png';\n}"
        BasicDartFormatter().format(source)

    @pytest.mark.parametrize("word", ["class", "new", "switch", "null"])
    def test_reserved_word_identifier_rejected(self, word: str):
        source = f"class A {{\n\tstatic const String {word} = 'assets/{word}.png';\n}}"
        with pytest.raises(FormatError, match="reserved word"):
            BasicDartFormatter().format(source)

    def test_reserved_class_name_rejected(self):
        with pytest.raises(FormatError, match="reserved word"):
            BasicDartFormatter().format("class switch {\n}")

    def test_invalid_identifier_rejected(self):
        source = "class A {\n\tstatic const String 2x = 'a';\n}"
        with pytest.raises(FormatError, match="not a valid identifier"):
            BasicDartFormatter().format(source)

    def test_duplicate_field_rejected(self):
        source = "class A {\n\tString a = 'x';\n\tString a = 'y';\n}"
        with pytest.raises(FormatError, match="already declared"):
            BasicDartFormatter().format(source)

    def test_same_field_in_different_classes_allowed(self):
        source = "class A {\n\tString a = 'x';\n}\nclass B {\n\tString a = 'y';\n}"
        BasicDartFormatter().format(source)

    def test_missing_closing_brace(self):
        with pytest.raises(FormatError, match="not closed"):
            BasicDartFormatter().format("class A {\n\tString a = 'x';\n")

    def test_unexpected_closing_brace(self):
        with pytest.raises(FormatError):
            BasicDartFormatter().format("}\n")

    def test_unterminated_string(self):
        with pytest.raises(FormatError, match="Unterminated"):
            BasicDartFormatter().format("class A {\n\tString a = 'x;\n}")

    def test_custom_indent(self):
        result = BasicDartFormatter(indent="    ").format("class A {\nString a = 'x';\n}")
        assert "    String a = 'x';" in result


class TestNoopFormatter:
    def test_returns_input(self):
        assert NoopFormatter().format(RAW_CLASS) == RAW_CLASS
