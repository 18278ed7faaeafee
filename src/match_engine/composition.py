"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from pathlib import Path

from .cli import CliDependencies, create_app
from .infrastructure import JsonPoolProvider, LocalFileSystem


def build_cli_dependencies(*, pool_path: Path) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        pool_path: JSON pool file served by the pool provider.
    """
    fs = LocalFileSystem()
    return CliDependencies(fs=fs, provider=JsonPoolProvider(path=pool_path, fs=fs))


app = create_app(build_cli_dependencies)
