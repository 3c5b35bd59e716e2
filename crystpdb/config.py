from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

from crystpdb.core.errors import ErrorLevel

_env_path = Path(__file__).resolve().parents[1] / ".env"
if _env_path.is_file():
    load_dotenv(_env_path, override=False)


@dataclass
class CrystPDBSettings:
    """Configuration loaded from CRYSTPDB_* environment variables.

      CRYSTPDB_STRICTNESS=strict            general | loose | strict | breaking
      CRYSTPDB_ANISOU_LOOKUP=scan           scan | index
      CRYSTPDB_REPORT_UNMATCHED_ANISOU=false
      CRYSTPDB_LOG_LEVEL=INFO
    """

    # Lowest level that makes `crystpdb check` exit non-zero
    strictness: ErrorLevel = ErrorLevel.STRICT_WARNING

    # How ANISOU records find their atom: reverse scan of the current model,
    # or a serial-number index kept while atoms are added
    anisou_lookup: Literal["scan", "index"] = "scan"

    # Emit a LOOSE_WARNING (instead of only logging) for ANISOU records without an atom
    report_unmatched_anisou: bool = False

    log_level: str = "INFO"


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def load_settings() -> CrystPDBSettings:
    """Load settings from environment variables."""
    lookup = os.environ.get("CRYSTPDB_ANISOU_LOOKUP", "scan").lower()
    if lookup not in ("scan", "index"):
        raise ValueError(f"CRYSTPDB_ANISOU_LOOKUP must be 'scan' or 'index', got {lookup!r}")

    return CrystPDBSettings(
        strictness=ErrorLevel.from_name(os.environ.get("CRYSTPDB_STRICTNESS", "strict")),
        anisou_lookup=lookup,
        report_unmatched_anisou=_flag("CRYSTPDB_REPORT_UNMATCHED_ANISOU"),
        log_level=os.environ.get("CRYSTPDB_LOG_LEVEL", "INFO").upper(),
    )
