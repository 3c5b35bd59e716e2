"""crystpdb.parsers: reading legacy PDB files.

Architecture:
    - records.py: typed values for each decoded line
    - lexer.py: decode_line() and the per record decoders (fixed columns)
    - builder.py: BuildState + fold(), folding records into a PDB
    - validate.py: MASTER reconciliation and post-parse checks
    - pdb_format.py: parse() / PDBFormatParser, the file driver
    - dataset.py: StructureDataset over many files

Usage::

    from crystpdb.parsers import parse

    pdb, errors = parse("1ubq.pdb")
    for error in errors:
        print(error)
"""

from crystpdb.parsers.builder import BuildState, build, finish, fold
from crystpdb.parsers.dataset import ParsedFile, StructureDataset
from crystpdb.parsers.lexer import decode_line
from crystpdb.parsers.pdb_format import PDBFormatParser, decode_lines, parse, parse_stream
from crystpdb.parsers.validate import reconcile_master, validate

__all__ = [
    "parse",
    "parse_stream",
    "decode_line",
    "decode_lines",
    "PDBFormatParser",
    "BuildState",
    "fold",
    "finish",
    "build",
    "validate",
    "reconcile_master",
    "StructureDataset",
    "ParsedFile",
]
