"""Shared line builders for the PDB tests."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def make_atom_line(
    serial: int = 1,
    name: str = " CA",
    resname: str = "ALA",
    chain: str = "A",
    resseq: int = 1,
    x: float = 1.0,
    y: float = 2.0,
    z: float = 3.0,
    occupancy: float = 1.0,
    b_factor: float = 10.0,
    element: str = "C",
    charge: str = "  ",
    hetero: bool = False,
    alt: str = " ",
    icode: str = " ",
    segment: str = "",
) -> str:
    tag = "HETATM" if hetero else "ATOM"
    return (
        f"{tag:<6}{serial:>5} {name:<4}{alt}{resname:>3} {chain}{resseq:>4}{icode}   "
        f"{x:8.3f}{y:8.3f}{z:8.3f}{occupancy:6.2f}{b_factor:6.2f}      "
        f"{segment:<4}{element:>2}{charge}"
    )


def make_anisou_line(serial: int = 1, factors=(100, 200, 300, -10, 20, -30), name: str = " CA") -> str:
    u = "".join(f"{v:7d}" for v in factors)
    return f"ANISOU{serial:>5} {name:<4} ALA A   1  {u}       C  "


def make_master_line(remark=0, empty=0, xform=0, coord=0, ter=0) -> str:
    counts = [remark, empty, 0, 0, 0, 0, 0, xform, coord, ter, 0, 0]
    return "MASTER    " + "".join(f"{n:5d}" for n in counts)


def make_matrix_line(tag: str, row: int, values=(1.0, 0.0, 0.0, 0.0), serial: int = 1, given: bool = False) -> str:
    a, b, c, d = values
    serial_text = f"{serial:>4}" if tag == "MTRIX" else "    "
    line = f"{tag}{row}{serial_text}{a:10.6f}{b:10.6f}{c:10.6f}     {d:10.5f}"
    if tag == "MTRIX" and given:
        line += "    1"
    return line


@pytest.fixture
def sample_pdb() -> Path:
    return FIXTURES / "sample.pdb"
