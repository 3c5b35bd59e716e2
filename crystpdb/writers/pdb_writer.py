"""Write a PDB back out in the fixed-column PDB format."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import Union

from crystpdb.core.logging_utils import get_logger
from crystpdb.parsers.validate import count_xform
from crystpdb.structs import PDB, Atom, Chain, Model, Residue, RowMatrix

logger = get_logger(__name__)


def _atom_name(name: str) -> str:
    # Names shorter than four characters start in column 14.
    return name if len(name) == 4 else f" {name:<3}"


def _charge(charge: int) -> str:
    if charge == 0:
        return "  "
    if abs(charge) > 9:
        raise ValueError(f"Charge {charge} does not fit the two character charge field")
    return f"{abs(charge)}{'+' if charge > 0 else '-'}"


def _atom_line(tag: str, atom: Atom, residue: Residue, chain: Chain) -> str:
    return (
        f"{tag:<6}{atom.serial_number:>5} {_atom_name(atom.name)}{atom.alternate_location or ' '}"
        f"{residue.name:>3} {chain.id}{residue.serial_number:>4}{residue.insertion_code or ' '}   "
        f"{atom.x:8.3f}{atom.y:8.3f}{atom.z:8.3f}{atom.occupancy:6.2f}{atom.b_factor:6.2f}      "
        f"{atom.segment_id:<4}{atom.element:>2}{_charge(atom.charge)}"
    )


def _anisou_line(atom: Atom, residue: Residue, chain: Chain) -> str:
    u = [round(v * 10000) for row in atom.anisotropic_temperature_factors for v in row]
    factors = "".join(f"{v:7d}" for v in u)
    return (
        f"ANISOU{atom.serial_number:>5} {_atom_name(atom.name)}{atom.alternate_location or ' '}"
        f"{residue.name:>3} {chain.id}{residue.serial_number:>4}{residue.insertion_code or ' '} "
        f"{factors}  {atom.segment_id:<4}{atom.element:>2}{_charge(atom.charge)}"
    )


def _matrix_lines(tag: str, matrix: RowMatrix, serial: str = "   ", given: str = "") -> list[str]:
    lines = []
    for n in range(3):
        if not matrix.rows_set[n]:
            continue
        a, b, c, d = matrix.rows[n]
        line = f"{tag}{n + 1}{serial:>4}{a:10.6f}{b:10.6f}{c:10.6f}     {d:10.5f}"
        if given:
            line += f"    {given}"
        lines.append(line)
    return lines


def _chain_lines(chain: Chain, tag: str, ter: bool) -> tuple[list[str], int]:
    lines = []
    last = None
    for residue in chain.residues:
        for atom in residue.atoms:
            lines.append(_atom_line(tag, atom, residue, chain))
            if atom.anisotropic_temperature_factors is not None:
                lines.append(_anisou_line(atom, residue, chain))
            last = (atom, residue)
    if not ter or last is None:
        return lines, 0
    atom, residue = last
    lines.append(
        f"TER   {atom.serial_number + 1:>5}      {residue.name:>3} {chain.id}"
        f"{residue.serial_number:>4}{residue.insertion_code or ' '}"
    )
    return lines, 1


def _model_lines(model: Model, with_model_record: bool) -> tuple[list[str], int]:
    lines = [f"MODEL     {model.serial_number:>4}"] if with_model_record else []
    ters = 0
    for chain in model.chains:
        chain_lines, n = _chain_lines(chain, "ATOM", ter=True)
        lines.extend(chain_lines)
        ters += n
    for chain in model.hetero_chains:
        chain_lines, _ = _chain_lines(chain, "HETATM", ter=False)
        lines.extend(chain_lines)
    if with_model_record:
        lines.append("ENDMDL")
    return lines, ters


def dump(pdb: PDB) -> list[str]:
    """Render `pdb` as PDB lines (without newlines)."""
    lines = [f"REMARK {num:>3} {text}".rstrip() for num, text in pdb.remarks]

    if pdb.unit_cell is not None:
        cell = pdb.unit_cell
        symbol = pdb.symmetry.symbol if pdb.symmetry else ""
        lines.append(
            f"CRYST1{cell.a:9.3f}{cell.b:9.3f}{cell.c:9.3f}"
            f"{cell.alpha:7.2f}{cell.beta:7.2f}{cell.gamma:7.2f} {symbol:<11}".rstrip()
        )
    if pdb.origx is not None:
        lines.extend(_matrix_lines("ORIGX", pdb.origx))
    if pdb.scale is not None:
        lines.extend(_matrix_lines("SCALE", pdb.scale))
    for mtrix in pdb.mtrix:
        lines.extend(_matrix_lines("MTRIX", mtrix, str(mtrix.serial_number), "1" if mtrix.contained else ""))

    multi = pdb.model_count() > 1
    ters = 0
    for model in pdb.models:
        model_lines, n = _model_lines(model, multi)
        lines.extend(model_lines)
        ters += n

    counts = [pdb.remark_count(), 0, 0, 0, 0, 0, 0, count_xform(pdb), pdb.total_atom_count(), ters, 0, 0]
    lines.append("MASTER    " + "".join(f"{n:5d}" for n in counts))
    lines.append("END")
    return lines


def save(pdb: PDB, path: Union[str, Path]) -> None:
    """Write `pdb` to `path`; a `.gz` suffix writes gzip."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = "\n".join(dump(pdb)) + "\n"
    if path.suffix == ".gz":
        with gzip.open(path, "wt", encoding="ascii") as f:
            f.write(text)
    else:
        path.write_text(text, encoding="ascii")
    logger.debug("Wrote %s (%d atoms)", path, pdb.total_atom_count())
