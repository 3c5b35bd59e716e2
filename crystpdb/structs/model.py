"""A Model: one set of coordinates, split into standard and hetero chains."""

from __future__ import annotations

from itertools import chain as concat, islice
from typing import Callable, Iterator, Optional

from crystpdb.structs.base import Atom, Chain, Residue
from crystpdb.structs.transformation import TransformationMatrix


class Model:
    """Chains of one model, kept in two partitions.

    ATOM records go to `chains`, HETATM records to `hetero_chains`. A chain
    id may appear once in each partition. The combined views are the
    standard partition followed by the hetero partition.
    """

    def __init__(self, serial_number: int = 0):
        self.serial_number = serial_number
        self.chains: list[Chain] = []
        self.hetero_chains: list[Chain] = []

    # -- insertion ---------------------------------------------------------

    def add_atom(
        self,
        atom: Atom,
        chain_id: str,
        residue_serial_number: int,
        residue_name: str,
        insertion_code: str = "",
    ) -> None:
        """Add a standard atom, creating its chain and residue on first use."""
        _upsert(self.chains, chain_id).add_atom(atom, residue_serial_number, residue_name, insertion_code)

    def add_hetero_atom(
        self,
        atom: Atom,
        chain_id: str,
        residue_serial_number: int,
        residue_name: str,
        insertion_code: str = "",
    ) -> None:
        """Add a hetero atom, creating its chain and residue on first use."""
        _upsert(self.hetero_chains, chain_id).add_atom(atom, residue_serial_number, residue_name, insertion_code)

    # -- counts ------------------------------------------------------------

    def chain_count(self) -> int:
        return len(self.chains)

    def residue_count(self) -> int:
        return sum(c.residue_count() for c in self.chains)

    def atom_count(self) -> int:
        return sum(c.atom_count() for c in self.chains)

    def hetero_atom_count(self) -> int:
        return sum(c.atom_count() for c in self.hetero_chains)

    def total_chain_count(self) -> int:
        return len(self.chains) + len(self.hetero_chains)

    def total_residue_count(self) -> int:
        return sum(c.residue_count() for c in self.all_chains())

    def total_atom_count(self) -> int:
        return self.atom_count() + self.hetero_atom_count()

    # -- traversal ---------------------------------------------------------

    def all_chains(self) -> Iterator[Chain]:
        return concat(self.chains, self.hetero_chains)

    def residues(self) -> Iterator[Residue]:
        for c in self.chains:
            yield from c.residues

    def hetero_residues(self) -> Iterator[Residue]:
        for c in self.hetero_chains:
            yield from c.residues

    def all_residues(self) -> Iterator[Residue]:
        return concat(self.residues(), self.hetero_residues())

    def atoms(self) -> Iterator[Atom]:
        for c in self.chains:
            yield from c.atoms()

    def hetero_atoms(self) -> Iterator[Atom]:
        for c in self.hetero_chains:
            yield from c.atoms()

    def all_atoms(self) -> Iterator[Atom]:
        return concat(self.atoms(), self.hetero_atoms())

    def chain(self, index: int) -> Optional[Chain]:
        return _nth(self.all_chains(), index)

    def residue(self, index: int) -> Optional[Residue]:
        return _nth(self.all_residues(), index)

    def atom(self, index: int) -> Optional[Atom]:
        return _nth(self.all_atoms(), index)

    # -- mutation ----------------------------------------------------------

    def remove_atoms_by(self, predicate: Callable[[Atom], bool]) -> None:
        for c in self.all_chains():
            c.remove_atoms_by(predicate)

    def remove_residues_by(self, predicate: Callable[[Residue], bool]) -> None:
        for c in self.all_chains():
            c.remove_residues_by(predicate)

    def remove_chains_by(self, predicate: Callable[[Chain], bool]) -> None:
        self.chains = [c for c in self.chains if not predicate(c)]
        self.hetero_chains = [c for c in self.hetero_chains if not predicate(c)]

    def remove_chain_id(self, chain_id: str) -> bool:
        """Remove the first standard chain with this id. True if one was removed."""
        for i, c in enumerate(self.chains):
            if c.id == chain_id:
                del self.chains[i]
                return True
        return False

    def apply_transformation(self, transformation: TransformationMatrix) -> None:
        for atom in self.all_atoms():
            atom.apply_transformation(transformation)

    def join(self, other: "Model") -> None:
        """Move all chains of `other` into this model, keeping this serial number."""
        self.chains.extend(other.chains)
        self.hetero_chains.extend(other.hetero_chains)
        other.chains, other.hetero_chains = [], []

    def __repr__(self) -> str:
        return f"<Model {self.serial_number} chains={self.total_chain_count()} atoms={self.total_atom_count()}>"


def _upsert(chains: list[Chain], chain_id: str) -> Chain:
    for c in chains:
        if c.id == chain_id:
            return c
    new_chain = Chain(chain_id)
    chains.append(new_chain)
    return new_chain


def _nth(iterator: Iterator, index: int):
    if index < 0:
        return None
    return next(islice(iterator, index, None), None)
