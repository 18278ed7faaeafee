"""Concrete infrastructure implementations."""

from .io.filesystem import LocalFileSystem
from .pool import JsonPoolProvider

__all__ = ["JsonPoolProvider", "LocalFileSystem"]
