from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from crystpdb.core.errors import ErrorLevel, PDBError

COLUMNS = ["path", "level", "severity", "title", "message", "line", "column_start", "column_end"]


def error_row(path: str, error: PDBError) -> dict:
    ctx = error.context
    columns = ctx.columns
    return {
        "path": path,
        "level": error.level.descriptor,
        "severity": int(error.level),
        "title": error.short_description,
        "message": error.long_description,
        "line": ctx.linenumber if ctx.kind in ("line", "full_line") else None,
        "column_start": columns[0] if columns else None,
        "column_end": columns[1] if columns else None,
    }


@dataclass(frozen=True)
class DiagnosticsReport:
    """Diagnostics of one or more parsed files as a table.

    Convention:
      - one row per diagnostic, in encounter order per file
      - `severity` is the numeric ErrorLevel, `level` its name
    """

    df: pd.DataFrame

    @classmethod
    def from_errors(cls, items: Iterable[tuple[str, list[PDBError]]]) -> "DiagnosticsReport":
        rows = [error_row(path, e) for path, errors in items for e in errors]
        return cls(pd.DataFrame(rows, columns=COLUMNS))

    def save(self, path: Path) -> None:
        """Write as parquet for a .parquet suffix, CSV otherwise."""
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".parquet":
            self.df.to_parquet(path, index=False)
        else:
            self.df.to_csv(path, index=False)

    @staticmethod
    def load(path: Path) -> "DiagnosticsReport":
        if path.suffix == ".parquet":
            return DiagnosticsReport(pd.read_parquet(path))
        return DiagnosticsReport(pd.read_csv(path))

    def count(self, level: Optional[ErrorLevel] = None) -> int:
        if level is None:
            return int(len(self.df))
        return int((self.df["severity"] == int(level)).sum())

    def failing(self, strictness: ErrorLevel) -> pd.DataFrame:
        return self.df[self.df["severity"] >= int(strictness)]
