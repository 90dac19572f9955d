"""Dart class generation for one asset group.

Scans the group's directories, turns every asset into a ``String`` constant,
renders the class source, canonicalises it through the injected formatter
and writes it into the configured output directory.  The companion export
library and asset-existence test are produced here as well.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from assetgen.errors import AssetIOError, FormatError
from assetgen.generator.dart_format import BasicDartFormatter, DartFormatter
from assetgen.generator.naming import format_identifier, format_path_literal
from assetgen.generator.scanner import create_file_map
from assetgen.generator.templates import (
    CLASS_TEMPLATE,
    EXPORT_TEMPLATE,
    TEST_TEMPLATE,
    TemplateRenderer,
)
from assetgen.utils import print_info, print_success, print_verbose, write_file

if TYPE_CHECKING:
    from assetgen.config import AssetGroup, Config

TOOL_NAME = "assetgen"
FIELD_TYPE = "String"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one successful generation pass."""

    group: AssetGroup
    output_path: Path
    identifiers: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.identifiers)


def header_comment(now: datetime | None = None) -> str:
    """Return the ``// Generated by ...`` header line."""
    stamp = (now or datetime.now()).isoformat(sep=" ")
    return f"// Generated by {TOOL_NAME} on {stamp}"


def field_line(group: AssetGroup, name: str, path: str) -> str:
    """Build the declaration line for a single asset.

    Example::

        \tstatic const String homeIcon = 'assets/home_icon.png';
    """
    line = "\tstatic " if group.use_static else "\t"
    line += "const " if group.use_const else ""
    identifier = format_identifier(name, group.prefix, group.use_underscores)
    return f"{line}{FIELD_TYPE} {identifier} = '{format_path_literal(path)}';"


def _write(path: Path, content: str) -> Path:
    try:
        return write_file(path, content)
    except (OSError, UnicodeError) as exc:
        raise AssetIOError("Unable to write file", path, exc) from exc


class ClassGenerator:
    """Generates the Dart class for a single :class:`AssetGroup`.

    ``busy`` is set by the change watcher while a regeneration is pending or
    running, so that at most one pass per group is ever in flight.
    """

    def __init__(
        self,
        group: AssetGroup,
        config: Config,
        root: str | Path,
        formatter: DartFormatter | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.group = group
        self.config = config
        self.root = Path(root)
        self.formatter = formatter if formatter is not None else BasicDartFormatter()
        self.renderer = renderer if renderer is not None else TemplateRenderer()
        self.busy = False

    @property
    def output_path(self) -> Path:
        return self.config.output_dir(self.root) / f"{self.group.file_name}.dart"

    def build_source(self, file_map: dict[str, str], now: datetime | None = None) -> str:
        """Assemble the raw (unformatted) class source for *file_map*."""
        group = self.group
        lines: list[str] = []
        owners: dict[str, str] = {}
        for name, path in file_map.items():
            print_verbose(f"processing {PurePosixPath(path).name}")
            identifier = format_identifier(name, group.prefix, group.use_underscores)
            if identifier in owners:
                raise FormatError(
                    f"Assets {owners[identifier]} and {path} both map to identifier "
                    f"'{identifier}' in class {group.class_name}"
                )
            owners[identifier] = path
            lines.append(field_line(group, name, path))
        return self.renderer.render(
            CLASS_TEMPLATE,
            {
                "header": None if self.config.no_comments else header_comment(now),
                "class_name": self.group.class_name,
                "body": "\n".join(lines),
            },
        )

    def generate(self) -> GenerationResult:
        """Run one full scan → assemble → format → write pass.

        Raises:
            EmptyDirectoryError: If the group's directories hold no assets.
            FormatError: If two assets map to the same identifier or the
                formatter rejects the generated source.
            AssetIOError: If a directory cannot be listed or the file written.
        """
        group = self.group
        sources = ", ".join(group.paths)
        print_info(f"Processing path: {sources}")

        print_verbose(f"Creating file map from {sources}")
        file_map = create_file_map(group, self.root)
        print_verbose(f"File map created for path {sources}")

        print_verbose(f"Constructing dart class for {group.class_name}")
        raw = self.build_source(file_map)
        content = self.formatter.format(raw)

        target = self.output_path
        print_verbose(f"Writing class {group.class_name} to file {target}")
        _write(target, content)

        identifiers = tuple(
            format_identifier(name, group.prefix, group.use_underscores) for name in file_map
        )
        print_success(f"Processed items for class {group.class_name}: {len(identifiers)}")
        return GenerationResult(group=group, output_path=target, identifiers=identifiers)


# ---------------------------------------------------------------------------
# Companion files
# ---------------------------------------------------------------------------


def write_export_file(
    config: Config,
    root: str | Path,
    formatter: DartFormatter,
    renderer: TemplateRenderer,
) -> Path | None:
    """Write the library that exports every group's generated file.

    Returns the written path, or ``None`` when exporting is disabled.
    """
    if not config.export:
        return None
    target = config.output_dir(Path(root)) / f"{config.export_file}.dart"
    raw = renderer.render(
        EXPORT_TEMPLATE,
        {
            "header": None if config.no_comments else header_comment(),
            "library_name": config.export_file,
            "files": [f"{group.file_name}.dart" for group in config.groups],
        },
    )
    print_verbose(f"Writing export file {target}")
    return _write(target, formatter.format(raw))


def write_test_file(
    config: Config,
    root: str | Path,
    results: Sequence[GenerationResult],
    formatter: DartFormatter,
    renderer: TemplateRenderer,
) -> Path | None:
    """Write a Dart test asserting that every generated asset path exists.

    Returns the written path, or ``None`` when test generation is disabled.
    """
    if not config.generate_tests:
        return None
    target = config.test_dir(Path(root)) / f"{config.export_file}_test.dart"
    groups = [
        {
            "class_name": result.group.class_name,
            "file_name": result.group.file_name,
            "accessor": (
                result.group.class_name
                if result.group.use_static
                else f"{result.group.class_name}()"
            ),
            "identifiers": result.identifiers,
        }
        for result in results
    ]
    raw = renderer.render(
        TEST_TEMPLATE,
        {
            "header": None if config.no_comments else header_comment(),
            "package": config.package,
            "groups": groups,
        },
    )
    print_verbose(f"Writing test file {target}")
    return _write(target, formatter.format(raw))
