"""assetgen configuration.

Typed configuration for the generator.  The configuration file (YAML or
JSON) is parsed, then validated into Pydantic v2 models so that every later
stage works with normalised, immutable values.  Any problem is reported as a
single :class:`~assetgen.errors.ConfigError` naming the offending field.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from assetgen.errors import ConfigError
from assetgen.generator.naming import format_extension, format_file_name

CONFIG_FILE_NAMES: tuple[str, ...] = ("assetgen.yaml", "assetgen.yml", "assetgen.json")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

DEFAULT_CONFIG: dict[str, Any] = {
    "generate_tests": False,
    "no_comments": False,
    "export": True,
    "export_file": "resources",
    "package": "resources",
    "groups": [
        {
            "class_name": "Images",
            "path": "assets/images",
            "types": [".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".svg"],
        },
    ],
}


class AssetGroup(BaseModel):
    """One asset collection and the Dart class generated for it.

    Immutable once validated; the same instance is reused for every
    regeneration of the group.
    """

    model_config = ConfigDict(frozen=True)

    class_name: str = Field(..., min_length=1, description="Name of the generated Dart class")
    file_name: str = Field(default="", description="Output file name without extension")
    paths: list[str] = Field(..., min_length=1, description="Directories to scan, in order")
    types: list[str] = Field(
        default_factory=list,
        description="Allowed extensions in '.ext' form; empty allows every file",
    )
    prefix: str = Field(default="", description="Prefix prepended to every field name")
    use_static: bool = Field(default=True)
    use_const: bool = Field(default=True)
    use_underscores: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthands(cls, data: Any) -> Any:
        """Accept ``path`` for a single directory and derive ``file_name``."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "paths" not in data and data.get("path") is not None:
            data["paths"] = [str(data["path"])]
        data.pop("path", None)
        if not data.get("file_name") and data.get("class_name"):
            data["file_name"] = str(data["class_name"])
        return data

    @field_validator("class_name")
    @classmethod
    def _check_class_name(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"{value!r} is not a valid class name")
        return value

    @field_validator("file_name")
    @classmethod
    def _normalise_file_name(cls, value: str) -> str:
        return format_file_name(value) if value else value

    @field_validator("types")
    @classmethod
    def _normalise_types(cls, value: list[str]) -> list[str]:
        normalised: list[str] = []
        for ext in value:
            formatted = format_extension(str(ext))
            if formatted not in normalised:
                normalised.append(formatted)
        return normalised


class Config(BaseModel):
    """Top-level assetgen configuration."""

    groups: list[AssetGroup] = Field(..., min_length=1)
    package: str = Field(default="resources", description="Output directory under lib/")
    no_comments: bool = Field(default=False, description="Omit the generation timestamp header")
    export: bool = Field(default=True, description="Write a library exporting all generated files")
    export_file: str = Field(default="resources")
    generate_tests: bool = Field(default=False, description="Write a Dart test checking every asset")

    @field_validator("export_file")
    @classmethod
    def _normalise_export_file(cls, value: str) -> str:
        return format_file_name(value)

    @model_validator(mode="after")
    def _check_unique_groups(self) -> "Config":
        seen_classes: set[str] = set()
        seen_files: set[str] = set()
        for group in self.groups:
            if group.class_name in seen_classes:
                raise ValueError(f"duplicate class name {group.class_name!r}")
            if group.file_name in seen_files:
                raise ValueError(f"duplicate file name {group.file_name!r}")
            seen_classes.add(group.class_name)
            seen_files.add(group.file_name)
        if self.export and self.export_file in seen_files:
            raise ValueError(f"export file {self.export_file!r} clashes with a group file name")
        return self

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def output_dir(self, root: Path) -> Path:
        """Directory that receives the generated Dart files."""
        return Path(root) / "lib" / self.package

    def test_dir(self, root: Path) -> Path:
        """Directory that receives the generated Dart test file."""
        return Path(root) / "test"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def find_config(root: Path) -> Path | None:
    """Return the first known configuration file in *root*, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(root) / name
        if candidate.is_file():
            return candidate
    return None


def _parse_file(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}", cause=exc) from exc
    try:
        if path.suffix.lower() == ".json":
            return json.loads(raw)
        return yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to parse config file {path}", cause=exc) from exc


def parse_config(data: Any) -> Config:
    """Validate raw configuration data into a :class:`Config`.

    Raises:
        ConfigError: naming the first offending field.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping of options")
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigError(f"Invalid configuration: {first['msg']}", field=field, cause=exc) from exc


def check_paths(config: Config, root: Path) -> None:
    """Ensure every configured source path is an existing directory."""
    for index, group in enumerate(config.groups):
        for source in group.paths:
            if not (Path(root) / source).is_dir():
                raise ConfigError(
                    f"Path {source} does not exist or is not a directory",
                    field=f"groups.{index}.paths",
                )


def load_config(root: str | Path, path: str | Path | None = None) -> Config:
    """Locate, parse and validate the configuration for the project at *root*.

    Args:
        root: Project root; source paths are resolved against it.
        path: Explicit config file.  Defaults to the first of
            :data:`CONFIG_FILE_NAMES` found in *root*.

    Returns:
        A validated ``Config`` whose source directories all exist.
    """
    root = Path(root)
    config_path = Path(path) if path else find_config(root)
    if config_path is None:
        names = ", ".join(CONFIG_FILE_NAMES)
        raise ConfigError(f"Config file not found in {root} (looked for {names})")
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    config = parse_config(_parse_file(config_path))
    check_paths(config, root)
    return config


def create_default_config(root: str | Path, fmt: str = "yaml") -> Path:
    """Write a sample configuration file into *root*.

    Args:
        root: Project root.
        fmt: ``"yaml"`` or ``"json"``.

    Returns:
        The path of the written file.

    Raises:
        ConfigError: If a configuration file already exists.
    """
    root = Path(root)
    existing = find_config(root)
    if existing is not None:
        raise ConfigError(f"Config file already exists: {existing}")

    if fmt == "json":
        target = root / "assetgen.json"
        content = json.dumps(DEFAULT_CONFIG, indent=2) + "\n"
    else:
        target = root / "assetgen.yaml"
        content = yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False)
    target.write_text(content, encoding="utf-8")
    return target
