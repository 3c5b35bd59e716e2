"""Typed values produced by decoding one line of a PDB file."""

from __future__ import annotations

from dataclasses import dataclass, field

Row = tuple[float, float, float, float]


@dataclass(frozen=True)
class Record:
    """Base for all decoded records; remembers where it came from."""

    linenumber: int = field(default=0, kw_only=True)
    line: str = field(default="", kw_only=True, repr=False, compare=False)


@dataclass(frozen=True)
class RemarkRecord(Record):
    number: int
    text: str


@dataclass(frozen=True)
class AtomRecord(Record):
    """ATOM or HETATM."""

    hetero: bool
    serial_number: int
    name: str
    alternate_location: str
    residue_name: str
    chain_id: str
    residue_serial_number: int
    insertion_code: str
    x: float
    y: float
    z: float
    occupancy: float = 1.0
    b_factor: float = 0.0
    segment_id: str = ""
    element: str = ""
    charge: int = 0


@dataclass(frozen=True)
class AnisouRecord(Record):
    serial_number: int
    name: str
    alternate_location: str
    residue_name: str
    chain_id: str
    residue_serial_number: int
    insertion_code: str
    factors: tuple[tuple[float, float, float], tuple[float, float, float]]
    segment_id: str = ""
    element: str = ""
    charge: str = ""


@dataclass(frozen=True)
class CrystalRecord(Record):
    """CRYST1: unit cell plus space group."""

    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float
    space_group: str
    z: int = 1


@dataclass(frozen=True)
class ScaleRecord(Record):
    row: int
    values: Row


@dataclass(frozen=True)
class OrigXRecord(Record):
    row: int
    values: Row


@dataclass(frozen=True)
class MtriXRecord(Record):
    row: int
    serial_number: int
    values: Row
    given: bool = False


@dataclass(frozen=True)
class ModelRecord(Record):
    serial_number: int


@dataclass(frozen=True)
class MasterRecord(Record):
    """MASTER: declared record counts for the whole file."""

    num_remark: int
    num_empty: int
    num_het: int
    num_helix: int
    num_sheet: int
    num_turn: int
    num_site: int
    num_xform: int
    num_coord: int
    num_ter: int
    num_connect: int
    num_seq: int


@dataclass(frozen=True)
class EndModelRecord(Record):
    pass


@dataclass(frozen=True)
class TerRecord(Record):
    pass


@dataclass(frozen=True)
class EndRecord(Record):
    pass


@dataclass(frozen=True)
class EmptyRecord(Record):
    pass
