"""Shared pytest fixtures for the assetgen test suite.

Provides reusable fixtures for:
- A temporary Flutter-style project with asset directories
- Validated configurations built from plain dicts
- Verbose-mode toggling
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from assetgen.config import AssetGroup, Config, parse_config
from assetgen.utils import set_verbose


# ---------------------------------------------------------------------------
# Projects & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project with ``assets/`` holding mixed file types.

    Layout::

        assets/a.png
        assets/b.jpg
        assets/c.txt
        assets/nested/        (directory, never an asset)
        icons/home_icon.svg
        icons/settings.svg
    """
    root = tmp_path / "app"
    assets = root / "assets"
    assets.mkdir(parents=True)
    (assets / "a.png").write_bytes(b"png")
    (assets / "b.jpg").write_bytes(b"jpg")
    (assets / "c.txt").write_text("text", encoding="utf-8")
    (assets / "nested").mkdir()
    (assets / "nested" / "deep.png").write_bytes(b"png")

    icons = root / "icons"
    icons.mkdir()
    (icons / "home_icon.svg").write_text("<svg/>", encoding="utf-8")
    (icons / "settings.svg").write_text("<svg/>", encoding="utf-8")
    yield root


@pytest.fixture
def sample_config_dict() -> dict[str, Any]:
    """A sample assetgen config as a plain dict."""
    return {
        "package": "resources",
        "export": True,
        "groups": [
            {
                "class_name": "Images",
                "path": "assets",
                "types": ["png", ".JPG"],
            },
            {
                "class_name": "AppIcons",
                "paths": ["icons"],
                "types": [".svg"],
                "prefix": "ic",
            },
        ],
    }


@pytest.fixture
def sample_config(sample_config_dict: dict[str, Any]) -> Config:
    """The sample config, validated."""
    return parse_config(sample_config_dict)


@pytest.fixture
def make_group() -> Callable[..., AssetGroup]:
    """Factory building an ``AssetGroup`` from keyword overrides."""

    def _make(**overrides: Any) -> AssetGroup:
        data: dict[str, Any] = {"class_name": "Images", "path": "assets"}
        data.update(overrides)
        return AssetGroup.model_validate(data)

    return _make


@pytest.fixture
def make_config() -> Callable[..., Config]:
    """Factory building a single-group ``Config`` from keyword overrides."""

    def _make(groups: list[dict[str, Any]] | None = None, **overrides: Any) -> Config:
        data: dict[str, Any] = {
            "groups": groups or [{"class_name": "Images", "path": "assets"}],
        }
        data.update(overrides)
        return parse_config(data)

    return _make


@pytest.fixture
def verbose():
    """Enable verbose output for the duration of a test."""
    set_verbose(True)
    yield
    set_verbose(False)
