"""Exception hierarchy for assetgen.

Every failure the generator can hit is fatal for the run that raised it.
Components raise these exceptions and never terminate the process
themselves; :func:`assetgen.pipeline.run` is the single place that turns them
into an error message and a non-zero exit status.
"""

from __future__ import annotations

from pathlib import Path

from assetgen.utils import printable


class GeneratorError(Exception):
    """Base class for all fatal assetgen errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigError(GeneratorError):
    """Raised when the configuration is missing, malformed or invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"{message} (field: {field})"
        super().__init__(message, cause)


class EmptyDirectoryError(GeneratorError):
    """Raised when scanning a group's directories yields no assets."""

    def __init__(self, paths: list[str]) -> None:
        self.paths = list(paths)
        joined = ", ".join(self.paths)
        super().__init__(f"Directory {joined} does not contain any assets!")


class AssetIOError(GeneratorError):
    """Raised when listing, reading or writing a file fails."""

    def __init__(self, message: str, path: str | Path, cause: BaseException | None = None) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {printable(path)}", cause)


class FormatError(GeneratorError):
    """Raised when the Dart formatter rejects generated source text."""


class RegenerationError(GeneratorError):
    """Raised when a watch-triggered regeneration fails unexpectedly."""
