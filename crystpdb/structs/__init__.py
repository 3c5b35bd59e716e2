"""crystpdb.structs: the hierarchical structure model.

Hierarchy:
    PDB (top-level)
    ├── remarks, unit_cell, symmetry, scale, origx, mtrix
    └── models: list[Model]
        ├── chains: list[Chain]          (ATOM)
        └── hetero_chains: list[Chain]   (HETATM)
            └── residues: list[Residue]
                └── atoms: list[Atom]
"""

from crystpdb.structs.base import Atom, Chain, Residue
from crystpdb.structs.crystal import MtriX, OrigX, RowMatrix, Scale, Symmetry, UnitCell
from crystpdb.structs.model import Model
from crystpdb.structs.pdb import PDB
from crystpdb.structs.transformation import TransformationMatrix

__all__ = [
    "PDB",
    "Model",
    "Chain",
    "Residue",
    "Atom",
    "UnitCell",
    "Symmetry",
    "RowMatrix",
    "Scale",
    "OrigX",
    "MtriX",
    "TransformationMatrix",
]
