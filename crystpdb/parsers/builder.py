"""Fold a stream of decoded records into a PDB.

The build is a strict left-to-right fold: fold(state, record) -> state.
BuildState holds the PDB under construction, the model currently being
filled and the non-fatal diagnostics met so far. A fatal condition raises
PDBErrorException and the partially built state is abandoned.

Usage::

    state = BuildState(source="1abc.pdb")
    for record in records:
        state = fold(state, record)
    pdb = finish(state)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional, Union

from crystpdb.core.errors import Context, ErrorLevel, PDBError, PDBErrorException
from crystpdb.core.logging_utils import get_logger
from crystpdb.parsers.records import (
    AnisouRecord,
    AtomRecord,
    CrystalRecord,
    MasterRecord,
    ModelRecord,
    MtriXRecord,
    OrigXRecord,
    Record,
    RemarkRecord,
    ScaleRecord,
)
from crystpdb.parsers.validate import reconcile_master, validate
from crystpdb.structs import PDB, Atom, Model, MtriX, OrigX, Scale, Symmetry, UnitCell

logger = get_logger(__name__)


@dataclass
class BuildState:
    pdb: PDB = field(default_factory=PDB)
    current_model: Model = field(default_factory=Model)
    errors: list[PDBError] = field(default_factory=list)
    source: str = ""
    anisou_lookup: Literal["scan", "index"] = "scan"
    report_unmatched_anisou: bool = False
    # atoms of the current model in insertion order, standard and hetero interleaved
    added: list[Atom] = field(default_factory=list)
    # serial number -> most recently added atom of the current model
    atom_index: dict[int, Atom] = field(default_factory=dict)


def _close_model(state: BuildState, next_serial_number: int = 0) -> None:
    if state.current_model.total_atom_count() > 0:
        state.pdb.add_model(state.current_model)
        state.current_model = Model(next_serial_number)
        state.added = []
        state.atom_index = {}
    else:
        state.current_model.serial_number = next_serial_number


def _add_atom(state: BuildState, record: AtomRecord) -> None:
    try:
        atom = Atom(
            serial_number=record.serial_number,
            name=record.name,
            x=record.x,
            y=record.y,
            z=record.z,
            occupancy=record.occupancy,
            b_factor=record.b_factor,
            element=record.element,
            charge=record.charge,
            alternate_location=record.alternate_location,
            segment_id=record.segment_id,
        )
        add = state.current_model.add_hetero_atom if record.hetero else state.current_model.add_atom
        add(atom, record.chain_id, record.residue_serial_number, record.residue_name, record.insertion_code)
    except ValueError as e:
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Invalid characters in atom creation",
            str(e),
            Context.full_line(record.linenumber, record.line),
        )) from e
    state.added.append(atom)
    state.atom_index[atom.serial_number] = atom


def _find_anisou_atom(state: BuildState, serial_number: int) -> Optional[Atom]:
    if state.anisou_lookup == "index":
        return state.atom_index.get(serial_number)
    # ANISOU normally follows its atom, so the reverse scan stops almost at once.
    for atom in reversed(state.added):
        if atom.serial_number == serial_number:
            return atom
    return None


def _set_anisou(state: BuildState, record: AnisouRecord) -> None:
    atom = _find_anisou_atom(state, record.serial_number)
    if atom is not None:
        atom.anisotropic_temperature_factors = record.factors
        return
    logger.warning(
        "Could not find atom for temperature factors, coupled to atom %d %s (line %d)",
        record.serial_number, record.name.strip(), record.linenumber,
    )
    if state.report_unmatched_anisou:
        state.errors.append(PDBError(
            ErrorLevel.LOOSE_WARNING,
            "Unmatched ANISOU record",
            f"No atom with serial number {record.serial_number} precedes this ANISOU record in the current model.",
            Context.full_line(record.linenumber, record.line),
        ))


def _set_mtrix_row(pdb: PDB, record: MtriXRecord) -> None:
    mtrix = pdb.find_mtrix(record.serial_number)
    if mtrix is None:
        mtrix = MtriX(serial_number=record.serial_number)
        pdb.add_mtrix(mtrix)
    mtrix.set_row(record.row, record.values)
    mtrix.contained = record.given


def _set_crystal(state: BuildState, record: CrystalRecord) -> None:
    state.pdb.unit_cell = UnitCell(record.a, record.b, record.c, record.alpha, record.beta, record.gamma)
    symmetry = Symmetry.from_symbol(record.space_group)
    if symmetry is None:
        state.errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "Invalid space group",
            f"The space group \"{record.space_group}\" is not a known Hermann-Mauguin symbol, the symmetry is left unset.",
            Context.line(record.linenumber, record.line, 55, 11),
        ))
    state.pdb.symmetry = symmetry


def fold(state: BuildState, record: Record) -> BuildState:
    """Apply one decoded record to the build state."""
    pdb = state.pdb
    if isinstance(record, AtomRecord):
        _add_atom(state, record)
    elif isinstance(record, RemarkRecord):
        pdb.add_remark(record.number, record.text)
    elif isinstance(record, AnisouRecord):
        _set_anisou(state, record)
    elif isinstance(record, ModelRecord):
        _close_model(state, record.serial_number)
    elif isinstance(record, ScaleRecord):
        if pdb.scale is None:
            pdb.scale = Scale()
        pdb.scale.set_row(record.row, record.values)
    elif isinstance(record, OrigXRecord):
        if pdb.origx is None:
            pdb.origx = OrigX()
        pdb.origx.set_row(record.row, record.values)
    elif isinstance(record, MtriXRecord):
        _set_mtrix_row(pdb, record)
    elif isinstance(record, CrystalRecord):
        _set_crystal(state, record)
    elif isinstance(record, MasterRecord):
        # MASTER is one of the last records: push the current model so the counts are complete.
        _close_model(state)
        state.errors.extend(reconcile_master(pdb, record, state.source))
    return state


def finish(state: BuildState) -> PDB:
    """Close the last model. Calling it again has no further effect."""
    _close_model(state)
    return state.pdb


def build(
    items: Iterable[Union[Record, PDBError]],
    source: str = "",
    anisou_lookup: Literal["scan", "index"] = "scan",
    report_unmatched_anisou: bool = False,
) -> tuple[PDB, list[PDBError]]:
    """Build a PDB from decoded lines, then validate it.

    `items` is what decode_line() yields per line. Non-fatal diagnostics are
    collected in encounter order; the first fatal one raises PDBErrorException.
    """
    state = BuildState(
        source=source,
        anisou_lookup=anisou_lookup,
        report_unmatched_anisou=report_unmatched_anisou,
    )
    for item in items:
        if isinstance(item, PDBError):
            if item.is_fatal:
                raise PDBErrorException(item)
            state.errors.append(item)
            continue
        state = fold(state, item)
    pdb = finish(state)
    state.errors.extend(validate(pdb, source))
    return pdb, state.errors
