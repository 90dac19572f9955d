"""Dart source canonicalisation.

The class generator hands its raw output to a formatter service before
writing it.  :class:`BasicDartFormatter` checks the generated code for the
mistakes the generator can actually make (reserved words or invalid names
used as identifiers, duplicate declarations, broken string literals,
unbalanced braces) and re-indents it the way ``dart format`` lays out simple
declarations.  :class:`NoopFormatter` passes text through untouched.
"""

from __future__ import annotations

import re
from typing import Protocol

from assetgen.errors import FormatError

INDENT = "  "

DART_RESERVED_WORDS: frozenset[str] = frozenset({
    "assert", "break", "case", "catch", "class", "const", "continue",
    "default", "do", "else", "enum", "extends", "false", "final", "finally",
    "for", "if", "in", "is", "new", "null", "rethrow", "return", "super",
    "switch", "this", "throw", "true", "try", "var", "void", "while", "with",
})

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_CLASS_RE = re.compile(r"^(?:abstract\s+)?class\s+(\S+?)\s*\{")
_FIELD_RE = re.compile(r"^(?:static\s+)?(?:const\s+|final\s+)?[A-Z][A-Za-z0-9_]*\??\s+(\S+?)\s*=")


class DartFormatter(Protocol):
    """A pure ``raw source -> canonical source`` transform."""

    def format(self, source: str) -> str:
        """Return canonical *source*, raising ``FormatError`` if it is invalid."""
        ...


class NoopFormatter:
    """Formatter that returns its input unchanged."""

    def format(self, source: str) -> str:
        return source


class BasicDartFormatter:
    """Validating re-indenter for generated Dart code."""

    def __init__(self, indent: str = INDENT) -> None:
        self.indent = indent

    def format(self, source: str) -> str:
        lines: list[str] = []
        depth = 0
        declared: list[set[str]] = [set()]

        for lineno, raw_line in enumerate(source.splitlines(), start=1):
            stripped = raw_line.strip()
            if not stripped:
                if lines and lines[-1] != "":
                    lines.append("")
                continue

            self._check_declaration(stripped, lineno, declared[-1])
            opens, closes = _count_braces(stripped, lineno)

            level = depth - 1 if stripped.startswith("}") else depth
            if level < 0:
                raise FormatError(f"Unexpected '}}' on line {lineno}")
            lines.append(self.indent * level + stripped)

            depth += opens - closes
            if depth < 0:
                raise FormatError(f"Unbalanced braces on line {lineno}")
            for _ in range(closes):
                declared.pop()
            for _ in range(opens):
                declared.append(set())

        if depth != 0:
            raise FormatError(f"Unbalanced braces: {depth} block(s) not closed")
        return "\n".join(lines).strip("\n") + "\n"

    @staticmethod
    def _check_declaration(line: str, lineno: int, scope: set[str]) -> None:
        match = _CLASS_RE.match(line) or _FIELD_RE.match(line)
        if match is None:
            return
        name = match.group(1)
        if not _IDENTIFIER_RE.match(name):
            raise FormatError(f"'{name}' is not a valid identifier (line {lineno})")
        if name in DART_RESERVED_WORDS:
            raise FormatError(f"'{name}' is a reserved word and cannot be an identifier (line {lineno})")
        if name in scope:
            raise FormatError(f"'{name}' is already declared (line {lineno})")
        scope.add(name)


def _count_braces(line: str, lineno: int) -> tuple[int, int]:
    """Count ``{`` and ``}`` outside string literals and line comments."""
    opens = closes = 0
    quote: str | None = None
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif line.startswith("//", i):
            break
        elif ch == "{":
            opens += 1
        elif ch == "}":
            closes += 1
        i += 1
    if quote:
        raise FormatError(f"Unterminated string literal on line {lineno}")
    return opens, closes
