"""assetgen generator -- turns asset directories into Dart constant classes.

Quick usage::

    from assetgen.config import load_config
    from assetgen.generator import ClassGenerator

    config = load_config(".")
    for group in config.groups:
        ClassGenerator(group, config, ".").generate()
"""

from assetgen.generator.class_gen import (
    ClassGenerator,
    GenerationResult,
    write_export_file,
    write_test_file,
)
from assetgen.generator.dart_format import BasicDartFormatter, DartFormatter, NoopFormatter
from assetgen.generator.templates import TemplateRenderer

__all__ = [
    "BasicDartFormatter",
    "ClassGenerator",
    "DartFormatter",
    "GenerationResult",
    "NoopFormatter",
    "TemplateRenderer",
    "write_export_file",
    "write_test_file",
]
