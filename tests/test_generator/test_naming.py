"""Tests for identifier, path-literal and file-name formatting.

Covers:
- split_words on separators and case/digit boundaries
- format_identifier in camelCase and snake_case, prefixes, leading digits
- format_path_literal escaping and separator normalisation
- format_file_name / format_extension normalisation
- Idempotence of every transform
"""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from assetgen.generator import naming
from assetgen.generator.naming import (
    format_extension,
    format_file_name,
    format_identifier,
    format_path_literal,
    split_words,
)

pytestmark = pytest.mark.unit


def _parse_dart_single_quoted(body: str) -> str:
    """Evaluate the body of a single-quoted Dart string literal."""
    escapes = {"n": "\n", "r": "\r", "t": "\t"}
    out: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch == "'":
            raise AssertionError(f"unescaped quote in {body!r}")
        if ch == "$":
            raise AssertionError(f"unescaped interpolation in {body!r}")
        if ch == "\\":
            nxt = next(chars)
            out.append(escapes.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


RAW_NAMES = [
    "home_icon",
    "HomeIcon",
    "my-icon@2x",
    "HTTPServer",
    "a.b c",
    "2x-logo",
    "ABC_def",
    "my_HTTP_server",
    "icon2x",
    "___",
    "x",
    "splash screen (dark)",
]


# ---------------------------------------------------------------------------
# split_words
# ---------------------------------------------------------------------------


class TestSplitWords:
    def test_separators(self):
        assert split_words("my-icon@2x") == ["my", "icon", "2", "x"]

    def test_camel_case_boundaries(self):
        assert split_words("myIcon2x") == ["my", "Icon", "2", "x"]

    def test_acronym_followed_by_word(self):
        assert split_words("HTTPServer") == ["HTTP", "Server"]

    def test_only_separators(self):
        assert split_words("-_ .!") == []


# ---------------------------------------------------------------------------
# format_identifier
# ---------------------------------------------------------------------------


class TestFormatIdentifier:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("home_icon", "homeIcon"),
            ("my icon", "myIcon"),
            ("HomeIcon", "homeIcon"),
            ("HTTP_server", "httpServer"),
            ("ABC", "abc"),
            ("splash-screen@2x", "splashScreen2X"),
        ],
    )
    def test_camel_case(self, raw: str, expected: str):
        assert format_identifier(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("HomeIcon", "home_icon"),
            ("home-icon", "home_icon"),
            ("my icon 2", "my_icon_2"),
        ],
    )
    def test_underscores(self, raw: str, expected: str):
        assert format_identifier(raw, use_underscores=True) == expected

    def test_prefix_camel(self):
        assert format_identifier("home_icon", prefix="ic") == "icHomeIcon"

    def test_prefix_underscores(self):
        assert format_identifier("home", prefix="ic", use_underscores=True) == "ic_home"

    def test_prefix_not_repeated(self):
        assert format_identifier("icHomeIcon", prefix="ic") == "icHomeIcon"

    def test_leading_digit_gets_underscore(self):
        assert format_identifier("2x-logo") == "_2XLogo"
        assert format_identifier("2x-logo", use_underscores=True) == "_2_x_logo"

    def test_invalid_characters_only(self):
        assert format_identifier("!!!") == "asset"

    def test_empty_name_with_prefix(self):
        assert format_identifier("", prefix="ic") == "ic"

    @pytest.mark.parametrize("raw", RAW_NAMES)
    @pytest.mark.parametrize("use_underscores", [False, True])
    @pytest.mark.parametrize("prefix", ["", "ic", "img_"])
    def test_idempotent(self, raw: str, use_underscores: bool, prefix: str):
        once = format_identifier(raw, prefix, use_underscores)
        assert format_identifier(once, prefix, use_underscores) == once

    @pytest.mark.parametrize("raw", RAW_NAMES)
    def test_result_is_valid_identifier(self, raw: str):
        result = format_identifier(raw)
        assert result
        assert result[0].isalpha() or result[0] == "_"
        assert result.replace("_", "").isalnum() or result == "_"


# ---------------------------------------------------------------------------
# format_path_literal
# ---------------------------------------------------------------------------


class TestFormatPathLiteral:
    def test_plain_path_unchanged(self):
        assert format_path_literal("assets/images/a.png") == "assets/images/a.png"

    def test_accepts_pure_path(self):
        assert format_path_literal(PurePosixPath("assets/a.png")) == "assets/a.png"

    def test_escapes_quote(self):
        assert format_path_literal("assets/it's.png") == "assets/it\\'s.png"

    def test_escapes_interpolation(self):
        assert format_path_literal("assets/$price.png") == "assets/\\$price.png"

    def test_escapes_backslash(self):
        assert format_path_literal("assets/a\\b.png") == "assets/a\\\\b.png"

    def test_native_separators_normalised(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(naming.os, "sep", "\\")
        assert format_path_literal("assets\\images\\a.png") == "assets/images/a.png"

    @pytest.mark.parametrize(
        "path",
        [
            "assets/a.png",
            "assets/it's.png",
            "assets/$x{y}.png",
            "assets/back\\slash.png",
            "assets/tab\tand\nnewline.png",
            "assets/\\'mixed'\\.png",
        ],
    )
    def test_round_trip(self, path: str):
        assert _parse_dart_single_quoted(format_path_literal(path)) == path

    @pytest.mark.parametrize("path", ["assets/a.png", "assets/images/home icon.webp"])
    def test_idempotent_without_escapes(self, path: str):
        once = format_path_literal(path)
        assert format_path_literal(once) == once


# ---------------------------------------------------------------------------
# format_file_name / format_extension
# ---------------------------------------------------------------------------


class TestFormatFileName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("AppImages", "app_images"),
            ("icons.dart", "icons"),
            ("My Icons", "my_icons"),
            ("svg-icons", "svg_icons"),
            ("", "assets"),
        ],
    )
    def test_format(self, name: str, expected: str):
        assert format_file_name(name) == expected

    @pytest.mark.parametrize("name", ["AppImages", "icons.dart", "HTTPAssets", "a b c"])
    def test_idempotent(self, name: str):
        once = format_file_name(name)
        assert format_file_name(once) == once


class TestFormatExtension:
    @pytest.mark.parametrize(
        ("ext", "expected"),
        [
            ("png", ".png"),
            (".png", ".png"),
            ("*.PNG", ".png"),
            (" webp ", ".webp"),
            (".Jpg", ".jpg"),
        ],
    )
    def test_format(self, ext: str, expected: str):
        assert format_extension(ext) == expected

    def test_idempotent(self):
        assert format_extension(format_extension("*.SVG")) == ".svg"
