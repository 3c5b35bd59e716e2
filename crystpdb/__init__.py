"""crystpdb: read, check and write legacy fixed-column PDB files.

Usage::

    import crystpdb

    pdb, errors = crystpdb.parse("1ubq.pdb")
    for error in errors:
        print(error)

    pdb.remove_atoms_by(lambda atom: atom.element == "H")
    crystpdb.save(pdb, "1ubq_no_h.pdb")
"""

from crystpdb.core.errors import Context, ErrorLevel, PDBError, PDBErrorException
from crystpdb.parsers import StructureDataset, parse, parse_stream, validate
from crystpdb.structs import (
    PDB,
    Atom,
    Chain,
    Model,
    MtriX,
    OrigX,
    Residue,
    Scale,
    Symmetry,
    TransformationMatrix,
    UnitCell,
)
from crystpdb.writers import dump, save

__version__ = "0.1.0"

__all__ = [
    "parse",
    "parse_stream",
    "validate",
    "save",
    "dump",
    "StructureDataset",
    "PDB",
    "Model",
    "Chain",
    "Residue",
    "Atom",
    "UnitCell",
    "Symmetry",
    "Scale",
    "OrigX",
    "MtriX",
    "TransformationMatrix",
    "ErrorLevel",
    "Context",
    "PDBError",
    "PDBErrorException",
]
