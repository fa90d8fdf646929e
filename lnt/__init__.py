"""Live Note Taker transcript ingestion package."""

from importlib import metadata

try:
    __version__ = metadata.version("live-note-taker")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
