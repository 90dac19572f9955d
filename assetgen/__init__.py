"""assetgen -- Dart constant classes for Flutter asset directories."""

__version__ = "0.1.0"
