"""The top-level PDB structure."""

from __future__ import annotations

from itertools import chain as concat
from typing import Callable, Iterator, Optional

from crystpdb.structs.base import Atom, Chain, Residue
from crystpdb.structs.crystal import MtriX, OrigX, Scale, Symmetry, UnitCell
from crystpdb.structs.model import Model
from crystpdb.structs.transformation import TransformationMatrix


class PDB:
    """A parsed PDB file.

    Holds the models in file order, the REMARK lines, and the optional
    crystallographic records (CRYST1, SCALEn, ORIGXn, MTRIXn).
    """

    def __init__(self) -> None:
        self.remarks: list[tuple[int, str]] = []
        self.unit_cell: Optional[UnitCell] = None
        self.symmetry: Optional[Symmetry] = None
        self.scale: Optional[Scale] = None
        self.origx: Optional[OrigX] = None
        self.mtrix: list[MtriX] = []
        self.models: list[Model] = []

    # -- remarks -----------------------------------------------------------

    def add_remark(self, remark_type: int, text: str) -> None:
        self.remarks.append((remark_type, text))

    def remark_count(self) -> int:
        return len(self.remarks)

    def remarks_of_type(self, remark_type: int) -> list[str]:
        return [text for num, text in self.remarks if num == remark_type]

    # -- crystallography ---------------------------------------------------

    def find_mtrix(self, serial_number: int) -> Optional[MtriX]:
        for m in self.mtrix:
            if m.serial_number == serial_number:
                return m
        return None

    def add_mtrix(self, mtrix: MtriX) -> None:
        if self.find_mtrix(mtrix.serial_number) is not None:
            raise ValueError(f"MTRIX serial number {mtrix.serial_number} is already present")
        self.mtrix.append(mtrix)

    # -- models ------------------------------------------------------------

    def add_model(self, model: Model) -> None:
        self.models.append(model)

    def model_count(self) -> int:
        return len(self.models)

    def model(self, index: int) -> Optional[Model]:
        if 0 <= index < len(self.models):
            return self.models[index]
        return None

    def find_model(self, serial_number: int) -> Optional[Model]:
        for m in self.models:
            if m.serial_number == serial_number:
                return m
        return None

    def remove_model_serial_number(self, serial_number: int) -> bool:
        for i, m in enumerate(self.models):
            if m.serial_number == serial_number:
                del self.models[i]
                return True
        return False

    # -- counts and traversal over all models ------------------------------

    def atom_count(self) -> int:
        """Standard atoms over all models."""
        return sum(m.atom_count() for m in self.models)

    def total_atom_count(self) -> int:
        """Standard and hetero atoms over all models."""
        return sum(m.total_atom_count() for m in self.models)

    def total_chain_count(self) -> int:
        return sum(m.total_chain_count() for m in self.models)

    def total_residue_count(self) -> int:
        return sum(m.total_residue_count() for m in self.models)

    def all_chains(self) -> Iterator[Chain]:
        return concat.from_iterable(m.all_chains() for m in self.models)

    def all_residues(self) -> Iterator[Residue]:
        return concat.from_iterable(m.all_residues() for m in self.models)

    def all_atoms(self) -> Iterator[Atom]:
        return concat.from_iterable(m.all_atoms() for m in self.models)

    # -- mutation ----------------------------------------------------------

    def remove_atoms_by(self, predicate: Callable[[Atom], bool]) -> None:
        for m in self.models:
            m.remove_atoms_by(predicate)

    def remove_residues_by(self, predicate: Callable[[Residue], bool]) -> None:
        for m in self.models:
            m.remove_residues_by(predicate)

    def remove_chains_by(self, predicate: Callable[[Chain], bool]) -> None:
        for m in self.models:
            m.remove_chains_by(predicate)

    def apply_transformation(self, transformation: TransformationMatrix) -> None:
        for m in self.models:
            m.apply_transformation(transformation)

    def renumber(self) -> None:
        """Renumber atoms (per model) and residues (per chain) from 1 in iteration order."""
        for m in self.models:
            for serial, atom in enumerate(m.all_atoms(), start=1):
                atom.serial_number = serial
            for c in m.all_chains():
                for serial, residue in enumerate(c.residues, start=1):
                    residue.serial_number = serial

    def to_dict(self) -> dict:
        """Flat dict for summaries / DataFrame usage."""
        return {
            "model_count": self.model_count(),
            "chain_count": self.total_chain_count(),
            "residue_count": self.total_residue_count(),
            "atom_count": self.atom_count(),
            "total_atom_count": self.total_atom_count(),
            "remark_count": self.remark_count(),
            "space_group": self.symmetry.symbol if self.symmetry else None,
            "cell": list(self.unit_cell.size + self.unit_cell.angles) if self.unit_cell else None,
            "has_scale": self.scale is not None and self.scale.valid(),
            "has_origx": self.origx is not None and self.origx.valid(),
            "mtrix_count": len(self.mtrix),
        }

    def __repr__(self) -> str:
        return f"<PDB models={self.model_count()} atoms={self.total_atom_count()} remarks={self.remark_count()}>"
