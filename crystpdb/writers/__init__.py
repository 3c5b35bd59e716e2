"""crystpdb.writers: writing PDB files."""

from crystpdb.writers.pdb_writer import dump, save

__all__ = ["dump", "save"]
