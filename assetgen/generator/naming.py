"""Name and path formatting for generated Dart code.

Pure, deterministic string transforms.  Raw asset file names are turned into
valid Dart identifiers, asset paths into escaped single-quoted string
literal bodies, and class names into output file names.
"""

from __future__ import annotations

import os
import re
from pathlib import PurePath


# Uppercase runs before a capitalised word, capitalised/lowercase words,
# bare uppercase runs, digit runs.  Everything else separates words.
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")

# Order matters: the backslash must be escaped before anything that adds one.
_LITERAL_ESCAPES: tuple[tuple[str, str], ...] = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ("$", "\\$"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

_FALLBACK_IDENTIFIER = "asset"
_FALLBACK_FILE_NAME = "assets"


def split_words(raw: str) -> list[str]:
    """Split *raw* into words on separators and case/digit boundaries.

    Examples::

        split_words("my-icon@2x")  -> ["my", "icon", "2", "x"]
        split_words("HTTPServer")  -> ["HTTP", "Server"]
    """
    return _WORD_RE.findall(raw)


def _join_camel(words: list[str]) -> str:
    head, *tail = words
    return head.lower() + "".join(w[0].upper() + w[1:] for w in tail)


def _join_snake(words: list[str]) -> str:
    return "_".join(w.lower() for w in words)


def format_identifier(raw: str, prefix: str = "", use_underscores: bool = False) -> str:
    """Turn a raw asset name into a valid identifier.

    Characters that cannot appear in an identifier are dropped and the
    remaining words are joined in camelCase, or lower snake_case when
    *use_underscores* is set.  A non-empty *prefix* is prepended unless the
    name already starts with it, which keeps the transform idempotent.  As a
    consequence ``launcher`` and ``ic_launcher`` both become ``icLauncher``
    with prefix ``ic``; the class generator reports such collisions.

    Examples::

        format_identifier("home_icon")                   -> "homeIcon"
        format_identifier("home_icon", prefix="ic")      -> "icHomeIcon"
        format_identifier("HomeIcon", use_underscores=True) -> "home_icon"
        format_identifier("2x-logo")                     -> "_2XLogo"
    """
    words = split_words(raw)
    prefix_words = split_words(prefix)
    if prefix_words:
        lowered = [w.lower() for w in prefix_words]
        if [w.lower() for w in words[: len(prefix_words)]] != lowered:
            words = prefix_words + words
    if not words:
        words = [_FALLBACK_IDENTIFIER]

    result = _join_snake(words) if use_underscores else _join_camel(words)
    if result[0].isdigit():
        result = "_" + result
    return result


def format_path_literal(path: str | PurePath) -> str:
    """Escape *path* for use inside a single-quoted Dart string literal.

    Native directory separators are converted to ``/`` first, then
    backslashes, quotes, ``$`` (string interpolation) and control
    characters are escaped.
    """
    text = str(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    for char, replacement in _LITERAL_ESCAPES:
        text = text.replace(char, replacement)
    return text


def format_file_name(name: str) -> str:
    """Normalise a class or group name into a Dart file name (without extension).

    Examples::

        format_file_name("AppImages")   -> "app_images"
        format_file_name("icons.dart")  -> "icons"
    """
    stem = name[: -len(".dart")] if name.lower().endswith(".dart") else name
    words = split_words(stem)
    if not words:
        return _FALLBACK_FILE_NAME
    return _join_snake(words)


def format_extension(ext: str) -> str:
    """Normalise a configured file type to its ``.ext`` lower-case form.

    ``png``, ``*.png`` and ``.PNG`` all become ``.png``.
    """
    value = ext.strip().lstrip("*").lower()
    if not value.startswith("."):
        value = "." + value
    return value
