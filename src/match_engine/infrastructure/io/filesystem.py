"""Local disk access for pool files, weight catalogues, config and CSV exports.

Usage example:
    from pathlib import Path

    from match_engine.infrastructure.io.filesystem import LocalFileSystem

    fs = LocalFileSystem()
    pool = fs.read_json(Path("data/pool.json"))
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import override

import pandas as pd

from ...protocols import FileSystem
from .validation import IncomingDataError, validate_json_as

_ENCODING = "utf-8"


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class LocalFileSystem(FileSystem):
    """Read and write engine inputs and reports on the local disk.

    Writers create missing parent directories. CSV reads return every column as
    text with blanks as empty strings, matching what ``write_matches_csv`` emits.
    """

    @override
    def read_json(self, path: Path) -> dict[str, object]:
        try:
            return validate_json_as(dict[str, object], self.read_text(path))
        except IncomingDataError as exc:
            raise ValueError(f"{path} must contain a JSON object.") from exc

    @override
    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        self.write_text(json.dumps(dict(data), ensure_ascii=False, indent=2), path)

    @override
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding=_ENCODING)

    @override
    def write_text(self, content: str, path: Path) -> None:
        _ensure_parent(path).write_text(content, encoding=_ENCODING)

    @override
    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        df.to_csv(_ensure_parent(path), index=False, encoding=_ENCODING)

    @override
    def read_csv(self, path: Path) -> pd.DataFrame:
        return pd.read_csv(path, dtype=str, encoding=_ENCODING, keep_default_na=False)

    @override
    def exists(self, path: Path) -> bool:
        return path.exists()

    @override
    def mkdir(self, path: Path, parents: bool = True) -> None:
        path.mkdir(parents=parents, exist_ok=True)
