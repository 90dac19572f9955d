"""Shared console and file-system helpers for assetgen.

All user-facing output goes through a single Rich ``Console`` so that tests
can redirect or capture it in one place.  The four severities the generator
reports are verbose (trace detail, hidden unless enabled), info (progress),
success (completion) and error.  Fatal errors are not printed here; they are
raised and reported once by the CLI boundary.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)

_DEFAULT_FILE_MODE = 0o644

_verbose = os.environ.get("ASSETGEN_VERBOSE", "").lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Verbosity
# ---------------------------------------------------------------------------


def set_verbose(enabled: bool) -> None:
    """Enable or disable verbose (trace) output."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    """Return ``True`` when verbose output is enabled."""
    return _verbose


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_verbose(message: str) -> None:
    """Print a dim trace message, only when verbose output is enabled."""
    if _verbose:
        console.print(f"[dim]{escape(message)}[/dim]")


def print_info(message: str) -> None:
    """Print a progress message."""
    console.print(f"[cyan]{escape(message)}[/cyan]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def printable(value: str | Path) -> str:
    """Return *value* as text that can always be encoded as UTF-8.

    File names that are not valid UTF-8 come back from the OS with lone
    surrogates; those are shown as backslash escapes.
    """
    return str(value).encode("utf-8", "backslashreplace").decode("utf-8")


def write_file(path: str | Path, content: str) -> Path:
    """Create parent directories and replace *path* with *content*.

    The text is written to a temporary sibling first and moved into place,
    so a failed write leaves any existing file untouched.

    Returns:
        The path that was written.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    mode = stat.S_IMODE(file_path.stat().st_mode) if file_path.exists() else _DEFAULT_FILE_MODE

    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, file_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return file_path
