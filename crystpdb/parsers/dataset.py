"""StructureDataset: parse a list of PDB files into PDB objects.

Files are parsed lazily (on access) and cached together with their
diagnostics. A file that fails with a fatal diagnostic is kept as a
failure rather than stopping iteration over the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, overload

from crystpdb.core.errors import ErrorLevel, PDBError, PDBErrorException
from crystpdb.parsers.pdb_format import PDBFormatParser
from crystpdb.structs import PDB

logger = logging.getLogger(__name__)


@dataclass
class ParsedFile:
    """Outcome of parsing one file."""

    path: Path
    pdb: Optional[PDB] = None
    errors: list[PDBError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.pdb is not None

    def fails(self, strictness: ErrorLevel) -> bool:
        return not self.ok or any(e.fails(strictness) for e in self.errors)


class StructureDataset:
    """A dataset of parsed PDB files.

    Usage::

        ds = StructureDataset.from_paths(["1abc.pdb", "2xyz.ent.gz"])
        for item in ds:
            if item.ok:
                print(item.path, item.pdb.total_atom_count())

        strict_clean = ds.filter(lambda item: not item.fails(ErrorLevel.STRICT_WARNING))
    """

    def __init__(self, paths: list[Path], parser: Optional[PDBFormatParser] = None):
        self._paths = paths
        self._parser = parser or PDBFormatParser()
        self._cache: dict[int, ParsedFile] = {}

    @classmethod
    def from_paths(cls, paths: list[str | Path], parser: Optional[PDBFormatParser] = None) -> "StructureDataset":
        """Create from a list of file paths (strings or Path objects)."""
        return cls([Path(p) for p in paths], parser=parser)

    def __len__(self) -> int:
        return len(self._paths)

    @overload
    def __getitem__(self, idx: int) -> ParsedFile: ...
    @overload
    def __getitem__(self, idx: slice) -> list[ParsedFile]: ...

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return [self._load(i) for i in range(*idx.indices(len(self)))]
        if idx < 0:
            idx = len(self) + idx
        return self._load(idx)

    def __iter__(self) -> Iterator[ParsedFile]:
        for i in range(len(self)):
            yield self._load(i)

    def _load(self, idx: int) -> ParsedFile:
        if idx in self._cache:
            return self._cache[idx]
        path = self._paths[idx]
        try:
            pdb, errors = self._parser.parse(path)
            item = ParsedFile(path, pdb, errors)
        except PDBErrorException as e:
            logger.error("Failed to parse %s: %s", path, e.error.short_description)
            item = ParsedFile(path, None, [e.error])
        self._cache[idx] = item
        return item

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def filter(self, predicate) -> "StructureDataset":
        """Return a new dataset with only the files matching the predicate.

        The predicate receives a ParsedFile and returns bool.
        Note: this triggers parsing of all files.
        """
        indices = [i for i in range(len(self)) if predicate(self._load(i))]
        ds = StructureDataset([self._paths[i] for i in indices], parser=self._parser)
        for new_idx, old_idx in enumerate(indices):
            ds._cache[new_idx] = self._cache[old_idx]
        return ds

    def to_list(self) -> list[ParsedFile]:
        return [self._load(i) for i in range(len(self))]

    def summary(self) -> dict:
        """Parse all and return summary statistics."""
        items = self.to_list()
        parsed = [i for i in items if i.ok]
        by_level: dict[str, int] = {}
        for item in items:
            for e in item.errors:
                by_level[e.level.descriptor] = by_level.get(e.level.descriptor, 0) + 1
        return {
            "total": len(items),
            "parsed": len(parsed),
            "failed": len(items) - len(parsed),
            "total_models": sum(i.pdb.model_count() for i in parsed),
            "total_atoms": sum(i.pdb.total_atom_count() for i in parsed),
            "diagnostics": by_level,
        }

    def __repr__(self) -> str:
        return f"<StructureDataset n={len(self)} paths={self._paths[:3]}...>"
