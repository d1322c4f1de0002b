"""Kambi MMA odds normalization and CSV export."""

from importlib import metadata

try:
    __version__ = metadata.version("mma-odds")
except metadata.PackageNotFoundError:  # pragma: no cover - during editable installs
    __version__ = "0.0.0"

__all__ = ["__version__"]
