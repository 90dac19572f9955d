"""assetgen build orchestrator and command-line entry point.

Loads the configuration, generates one Dart class per asset group plus the
export library and optional asset test, and optionally keeps everything up
to date by watching the asset directories.

Usage::

    python -m assetgen build
    python -m assetgen build --smart-watch -v
    python -m assetgen create --json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from rich.panel import Panel

from assetgen.config import Config, create_default_config, load_config
from assetgen.errors import GeneratorError
from assetgen.generator import (
    BasicDartFormatter,
    ClassGenerator,
    DartFormatter,
    GenerationResult,
    NoopFormatter,
    TemplateRenderer,
    write_export_file,
    write_test_file,
)
from assetgen.utils import (
    console,
    is_verbose,
    print_error,
    print_info,
    print_success,
    print_verbose,
    printable,
    set_verbose,
)
from assetgen.watcher import DEBOUNCE_DELAY, ChangeWatcher, WatchMode


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class AssetPipeline:
    """Drives generation for every configured asset group.

    Attributes:
        config: Validated configuration.
        root: Project root that source paths and outputs are relative to.
        generators: One :class:`ClassGenerator` per group, in config order.
        results: Latest successful result per class name.
    """

    def __init__(
        self,
        config: Config,
        root: str | Path,
        formatter: DartFormatter | None = None,
    ) -> None:
        self.config = config
        self.root = Path(root)
        self.formatter = formatter if formatter is not None else BasicDartFormatter()
        self.renderer = TemplateRenderer()
        self.generators = [
            ClassGenerator(group, config, self.root, self.formatter, self.renderer)
            for group in config.groups
        ]
        self.results: dict[str, GenerationResult] = {}

    def build(self) -> list[GenerationResult]:
        """Generate every group once, then the companion files."""
        start = time.monotonic()
        for generator in self.generators:
            result = generator.generate()
            self.results[result.group.class_name] = result
        self.write_companions()
        print_verbose(f"Build finished in {time.monotonic() - start:.2f}s")
        return list(self.results.values())

    def write_companions(self) -> None:
        """(Re)write the export library and asset test from the latest results."""
        export_path = write_export_file(self.config, self.root, self.formatter, self.renderer)
        if export_path is not None:
            print_verbose(f"Export file written to {export_path}")
        ordered = [
            self.results[g.group.class_name]
            for g in self.generators
            if g.group.class_name in self.results
        ]
        test_path = write_test_file(
            self.config, self.root, ordered, self.formatter, self.renderer
        )
        if test_path is not None:
            print_verbose(f"Test file written to {test_path}")

    def _on_regenerated(self, result: GenerationResult) -> None:
        self.results[result.group.class_name] = result
        self.write_companions()

    async def watch(
        self,
        mode: WatchMode,
        delay: float = DEBOUNCE_DELAY,
        initial_build: bool = True,
    ) -> None:
        """Watch every group until interrupted or a regeneration fails.

        The watchers subscribe before the initial build, so changes made
        while it runs still schedule a regeneration.

        Raises:
            GeneratorError: The first fatal error raised by the initial build
                or by any watcher.
        """
        watchers = [
            ChangeWatcher(generator, mode, delay, on_regenerated=self._on_regenerated)
            for generator in self.generators
        ]
        try:
            for watcher in watchers:
                watcher.start()
            if initial_build:
                self.build()
            print_info("Press Ctrl+C to stop watching.")
            await asyncio.gather(*(watcher.wait() for watcher in watchers))
        finally:
            for watcher in watchers:
                watcher.stop()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetgen",
        description="Generate Dart constant classes for Flutter asset directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  assetgen create\n"
            "  assetgen build\n"
            "  assetgen build --watch\n"
            "  assetgen -v build --smart-watch\n"
        ),
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Config file (default: assetgen.yaml/.yml/.json in the project root)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Generate code for all asset groups")
    watch_group = build.add_mutually_exclusive_group()
    watch_group.add_argument(
        "--watch", "-w",
        action="store_true",
        help="Regenerate whenever a watched directory changes",
    )
    watch_group.add_argument(
        "--smart-watch", "-s",
        action="store_true",
        help="Regenerate only when allowed files are added or removed",
    )
    build.add_argument(
        "--no-format",
        action="store_true",
        help="Write generated code without canonical formatting",
    )

    create = subparsers.add_parser("create", help="Create a sample config file")
    create.add_argument(
        "--json",
        action="store_true",
        help="Write assetgen.json instead of assetgen.yaml",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, run the requested command and return the exit status."""
    args = _build_parser().parse_args(argv)
    if args.verbose:
        set_verbose(True)
    root = Path(args.root)

    try:
        if args.command == "create":
            path = create_default_config(root, "json" if args.json else "yaml")
            print_success(f"Config file created: {path}")
            return 0

        config = load_config(root, args.config)
        formatter = NoopFormatter() if args.no_format else BasicDartFormatter()
        pipeline = AssetPipeline(config, root, formatter)

        if args.watch or args.smart_watch:
            mode = WatchMode.SMART if args.smart_watch else WatchMode.WATCH
            console.print(
                Panel(
                    f"[bold]assetgen[/bold] {mode.value} mode\n"
                    f"Groups : {', '.join(g.class_name for g in config.groups)}",
                    border_style="bright_cyan",
                )
            )
            asyncio.run(pipeline.watch(mode))
        else:
            pipeline.build()
        return 0

    except GeneratorError as exc:
        print_error(printable(exc.message))
        if exc.cause is not None:
            print_error(f"Cause: {printable(exc.cause)}")
        if is_verbose():
            console.print_exception()
        return 1
    except KeyboardInterrupt:
        print_info("Watch stopped.")
        return 130


def main() -> None:
    """CLI entry point for ``assetgen`` / ``python -m assetgen``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
