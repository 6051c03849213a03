"""Maintain a separate module for the version to avoid circular imports."""

import importlib.metadata


__all__ = ["__version__"]

__version__: str

try:
    __version__ = importlib.metadata.version("ddtrace-hooks")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"
