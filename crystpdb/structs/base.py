"""Atoms, residues and chains.

Hierarchy:
    Chain
    └── residues: list[Residue]   (unique by serial number + insertion code)
        └── atoms: list[Atom]

Growth is append-only: iteration order always equals first-insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from crystpdb.structs.transformation import TransformationMatrix

AnisotropicFactors = tuple[tuple[float, float, float], tuple[float, float, float]]


def check_text(value: str, what: str, max_length: Optional[int] = None) -> str:
    """Validate a fixed-column text field: printable ASCII, bounded length."""
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{what} {value!r} is longer than {max_length} characters")
    for ch in value:
        if not (" " <= ch <= "~"):
            raise ValueError(f"{what} {value!r} contains an invalid character {ch!r}")
    return value


@dataclass
class Atom:
    """Single atom with position, crystallographic factors and identity."""

    serial_number: int
    name: str
    x: float
    y: float
    z: float
    occupancy: float = 1.0
    b_factor: float = 0.0
    element: str = ""
    charge: int = 0
    alternate_location: str = ""
    segment_id: str = ""
    anisotropic_temperature_factors: Optional[AnisotropicFactors] = None

    def __post_init__(self) -> None:
        self.name = check_text(self.name.strip(), "Atom name", 4)
        self.element = check_text(self.element.strip(), "Element", 2)
        self.alternate_location = check_text(self.alternate_location.strip(), "Alternate location", 1)
        self.segment_id = check_text(self.segment_id.strip(), "Segment id", 4)

    @property
    def pos(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def set_pos(self, pos: tuple[float, float, float]) -> None:
        self.x, self.y, self.z = pos

    def apply_transformation(self, transformation: TransformationMatrix) -> None:
        self.set_pos(transformation.apply(self.pos))

    def __repr__(self) -> str:
        return f"<Atom {self.serial_number} {self.name} ({self.x:.3f}, {self.y:.3f}, {self.z:.3f})>"


@dataclass
class Residue:
    """Single residue (amino acid, nucleotide, ligand or water)."""

    serial_number: int
    name: str
    insertion_code: str = ""
    atoms: list[Atom] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = check_text(self.name.strip(), "Residue name", 3)
        self.insertion_code = check_text(self.insertion_code.strip(), "Insertion code", 1)

    @property
    def id(self) -> tuple[int, str]:
        return (self.serial_number, self.insertion_code)

    def atom_count(self) -> int:
        return len(self.atoms)

    def add_atom(self, atom: Atom) -> None:
        self.atoms.append(atom)

    def remove_atoms_by(self, predicate: Callable[[Atom], bool]) -> None:
        self.atoms = [a for a in self.atoms if not predicate(a)]

    def __iter__(self) -> Iterator[Atom]:
        return iter(self.atoms)

    def __len__(self) -> int:
        return len(self.atoms)

    def __repr__(self) -> str:
        return f"<Residue {self.serial_number}{self.insertion_code} {self.name} atoms={len(self.atoms)}>"


@dataclass
class Chain:
    """Single chain of residues, identified by one character."""

    id: str
    residues: list[Residue] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.id) != 1:
            raise ValueError(f"Chain id {self.id!r} must be a single character")
        check_text(self.id, "Chain id")

    def residue_count(self) -> int:
        return len(self.residues)

    def atom_count(self) -> int:
        return sum(len(r.atoms) for r in self.residues)

    def atoms(self) -> Iterator[Atom]:
        for residue in self.residues:
            yield from residue.atoms

    def find_residue(self, serial_number: int, insertion_code: str = "") -> Optional[Residue]:
        for residue in self.residues:
            if residue.serial_number == serial_number and residue.insertion_code == insertion_code:
                return residue
        return None

    def add_atom(
        self,
        atom: Atom,
        residue_serial_number: int,
        residue_name: str,
        insertion_code: str = "",
    ) -> Residue:
        """Append `atom` to the residue with this serial number, creating it if needed.

        The residue name only populates a newly created residue; it is not
        part of the match.
        """
        insertion_code = insertion_code.strip()
        residue = self.find_residue(residue_serial_number, insertion_code)
        if residue is None:
            residue = Residue(residue_serial_number, residue_name, insertion_code)
            self.residues.append(residue)
        residue.add_atom(atom)
        return residue

    def remove_atoms_by(self, predicate: Callable[[Atom], bool]) -> None:
        for residue in self.residues:
            residue.remove_atoms_by(predicate)

    def remove_residues_by(self, predicate: Callable[[Residue], bool]) -> None:
        self.residues = [r for r in self.residues if not predicate(r)]

    def __iter__(self) -> Iterator[Residue]:
        return iter(self.residues)

    def __len__(self) -> int:
        return len(self.residues)

    def __repr__(self) -> str:
        return f"<Chain {self.id} residues={len(self.residues)}>"
