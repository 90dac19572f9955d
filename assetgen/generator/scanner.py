"""Asset directory scanning.

Lists the direct children of each configured source directory, keeps the
regular files whose extension is allowed, and merges the result into a
single ``{base name: asset path}`` mapping.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from assetgen.errors import AssetIOError, EmptyDirectoryError
from assetgen.utils import print_verbose, print_warning, printable

if TYPE_CHECKING:
    from assetgen.config import AssetGroup


def is_valid_asset(entry: Path, types: Iterable[str]) -> bool:
    """Return ``True`` if *entry* should be included in the asset map.

    1. It must be a regular file (or a symlink to one), not a directory.
    2. If any *types* are given, its extension must be one of them.  The
       comparison is exact; ``types`` are expected in normalised form.
    """
    allowed = list(types)
    return entry.is_file() and (not allowed or entry.suffix in allowed)


def scan_directory(directory: Path, types: Iterable[str]) -> list[Path]:
    """Return the valid assets directly inside *directory*, sorted by name.

    Raises:
        AssetIOError: If the directory cannot be listed or an asset name
            is not valid UTF-8.
    """
    allowed = list(types)
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise AssetIOError("Unable to list directory", directory, exc) from exc

    selected: list[Path] = []
    for entry in entries:
        valid = is_valid_asset(entry, allowed)
        print_verbose(
            f"Asset - {printable(entry.name)} is {'selected' if valid else 'not selected'}"
        )
        if valid:
            _check_encodable(entry)
            selected.append(entry)
    return selected


def _check_encodable(entry: Path) -> None:
    # Generated sources are UTF-8; names the OS could not decode cannot appear in them.
    try:
        entry.name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise AssetIOError("Asset file name is not valid UTF-8", entry, exc) from exc


def create_file_map(group: AssetGroup, root: Path | None = None) -> dict[str, str]:
    """Build the asset map for *group*.

    Keys are file names without their final extension, values are the asset
    paths as configured (source path joined with the file name, POSIX form).
    Directories are scanned in configured order; when two files share a base
    name the first one wins and the later one is reported.

    Args:
        group: The asset group to scan.
        root: Project root the group's relative paths are resolved against.
            Defaults to the current working directory.

    Raises:
        EmptyDirectoryError: If no asset survives filtering.
        AssetIOError: If a directory cannot be listed.
    """
    base = Path(root) if root is not None else Path.cwd()
    file_map: dict[str, str] = {}

    for source in group.paths:
        for entry in scan_directory(base / source, group.types):
            asset_path = str(PurePosixPath(Path(source).as_posix()) / entry.name)
            name = entry.stem
            if name in file_map:
                print_warning(
                    f"Asset {asset_path} skipped: name '{name}' already used by {file_map[name]}"
                )
                continue
            file_map[name] = asset_path

    if not file_map:
        raise EmptyDirectoryError(group.paths)
    return file_map
