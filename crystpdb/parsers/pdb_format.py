"""Legacy PDB format reader.

Reads .pdb / .ent files (optionally gzipped) one line at a time, decodes
each line and folds it into a PDB. The file is never loaded wholesale.

Result: (PDB, diagnostics) when the file could be read, or a raised
PDBErrorException carrying the single fatal diagnostic.
"""

from __future__ import annotations

import gzip
import zlib
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

from crystpdb.config import CrystPDBSettings, load_settings
from crystpdb.core.errors import Context, ErrorLevel, PDBError, PDBErrorException
from crystpdb.core.logging_utils import get_logger
from crystpdb.parsers.builder import build
from crystpdb.parsers.lexer import decode_line
from crystpdb.parsers.records import Record
from crystpdb.structs import PDB

logger = get_logger(__name__)


def decode_lines(lines: Iterable[Union[str, bytes]], source: str = "") -> Iterator[Union[Record, PDBError]]:
    """Decode lines (text or UTF-8 bytes, newline included or not) in order."""
    for linenumber, raw in enumerate(lines, start=1):
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError:
                yield PDBError(
                    ErrorLevel.BREAKING_ERROR,
                    "Could not read line",
                    f"Could not read line {linenumber} while parsing the input file.",
                    Context.show(source),
                )
                return
        yield decode_line(linenumber, raw.rstrip("\r\n"))


def parse_stream(
    stream: Union[IO[bytes], IO[str], Iterable[str]],
    source: str = "<stream>",
    settings: Optional[CrystPDBSettings] = None,
) -> tuple[PDB, list[PDBError]]:
    """Parse an already opened stream (or any iterable of lines)."""
    settings = settings or load_settings()
    return build(
        decode_lines(stream, source),
        source=source,
        anisou_lookup=settings.anisou_lookup,
        report_unmatched_anisou=settings.report_unmatched_anisou,
    )


def _open(path: Path) -> IO[bytes]:
    if path.suffix == ".gz":
        return gzip.open(path, "rb")
    return open(path, "rb")


def parse(path: Union[str, Path], settings: Optional[CrystPDBSettings] = None) -> tuple[PDB, list[PDBError]]:
    """Parse a PDB file into a PDB and the non-fatal diagnostics found.

    Raises PDBErrorException when the file cannot be opened or read, or when
    any line carries a BREAKING_ERROR.
    """
    path = Path(path)
    source = str(path)
    try:
        f = _open(path)
    except OSError as e:
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Could not open file",
            "Could not open the specified file, make sure the path is correct, you have permission, "
            f"and that it is not open in another program ({e.strerror or e}).",
            Context.show(source),
        )) from e

    logger.debug("Parsing %s", source)
    try:
        with f:
            pdb, errors = parse_stream(f, source=source, settings=settings)
    # gzip reports truncated or corrupt data as EOFError or zlib.error
    except (OSError, EOFError, zlib.error) as e:
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Could not read file",
            f"Reading the file failed part way through ({e}).",
            Context.show(source),
        )) from e
    logger.debug("Parsed %s: %d model(s), %d atom(s), %d diagnostic(s)",
                 source, pdb.model_count(), pdb.total_atom_count(), len(errors))
    return pdb, errors


class PDBFormatParser:
    """Parse PDB-format files (.pdb, .ent, .ent.gz) into a PDB."""

    def __init__(self, settings: Optional[CrystPDBSettings] = None):
        self._settings = settings

    def parse(self, path: Union[str, Path]) -> tuple[PDB, list[PDBError]]:
        return parse(path, settings=self._settings)

    @staticmethod
    def extensions() -> list[str]:
        return [".pdb", ".ent", ".pdb.gz", ".ent.gz"]

    @classmethod
    def handles(cls, path: Union[str, Path]) -> bool:
        name = str(path).lower()
        return any(name.endswith(ext) for ext in cls.extensions())
