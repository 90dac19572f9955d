"""Jinja2 template rendering for generated Dart sources.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``assetgen/generator/templates/`` directory and renders them with the
per-group context assembled by the class generator.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from assetgen.generator.naming import format_path_literal


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

CLASS_TEMPLATE = "class.dart.j2"
EXPORT_TEMPLATE = "export.dart.j2"
TEST_TEMPLATE = "test.dart.j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated Dart files.

    The renderer loads ``.j2`` template files from a configurable
    template directory.  Output is plain text, so autoescaping is off; the
    ``dart_string`` filter escapes values placed inside Dart string literals.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["dart_string"] = format_path_literal

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"class.dart.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)
