"""Checks run over a built PDB.

reconcile_master() compares the counts declared in a MASTER record with the
structure built so far. validate() runs once after the whole file was read.
Neither raises; both return the diagnostics they found.
"""

from __future__ import annotations

from crystpdb.core.errors import Context, ErrorLevel, PDBError
from crystpdb.parsers.records import MasterRecord
from crystpdb.structs.pdb import PDB

ROWS_PER_MATRIX = 3


def count_xform(pdb: PDB) -> int:
    """Number of coordinate transformation records the complete matrices account for."""
    xform = 0
    if pdb.origx is not None and pdb.origx.valid():
        xform += ROWS_PER_MATRIX
    if pdb.scale is not None and pdb.scale.valid():
        xform += ROWS_PER_MATRIX
    for mtrix in pdb.mtrix:
        if mtrix.valid():
            xform += ROWS_PER_MATRIX
    return xform


def _checksum_failed(level: ErrorLevel, message: str, source: str) -> PDBError:
    return PDBError(level, "MASTER checksum failed", message, Context.show(source))


def reconcile_master(pdb: PDB, master: MasterRecord, source: str = "") -> list[PDBError]:
    """Compare MASTER counts against `pdb`.

    Only remarks, the always-empty field, coordinate transformations and
    coordinates are checked. numHet, numHelix, numSheet, numTurn, numSite,
    numTer, numConect and numSeq describe records this package does not
    model and stay unverified.
    """
    errors: list[PDBError] = []
    remarks = pdb.remark_count()
    if master.num_remark != remarks:
        errors.append(_checksum_failed(
            ErrorLevel.STRICT_WARNING,
            f"The number of REMARKS ({remarks}) is different then posed in the MASTER Record ({master.num_remark})",
            source,
        ))
    if master.num_empty != 0:
        errors.append(_checksum_failed(
            ErrorLevel.LOOSE_WARNING,
            f"The empty checksum number is not empty (value: {master.num_empty}) while it is defined to be empty.",
            source,
        ))
    xform = count_xform(pdb)
    if master.num_xform != xform:
        errors.append(_checksum_failed(
            ErrorLevel.STRICT_WARNING,
            f"The number of coordinate transformation records ({xform}) is different then posed in the MASTER Record ({master.num_xform})",
            source,
        ))
    atoms = pdb.total_atom_count()
    if master.num_coord != atoms:
        errors.append(_checksum_failed(
            ErrorLevel.STRICT_WARNING,
            f"The number of Atoms (Normal + Hetero) ({atoms}) is different then posed in the MASTER Record ({master.num_coord})",
            source,
        ))
    return errors


def validate(pdb: PDB, source: str = "") -> list[PDBError]:
    """Structural checks on a finished PDB."""
    errors: list[PDBError] = []
    context = Context.show(source) if source else Context.none()

    for name, matrix in (("SCALE", pdb.scale), ("ORIGX", pdb.origx)):
        if matrix is not None and not matrix.valid():
            missing = [str(i + 1) for i, done in enumerate(matrix.rows_set) if not done]
            errors.append(PDBError(
                ErrorLevel.LOOSE_WARNING,
                f"Incomplete {name} matrix",
                f"The {name} matrix is missing row(s) {', '.join(missing)}, it is not used.",
                context,
            ))
    for mtrix in pdb.mtrix:
        if not mtrix.valid():
            errors.append(PDBError(
                ErrorLevel.LOOSE_WARNING,
                "Incomplete MTRIX matrix",
                f"The MTRIX matrix with serial number {mtrix.serial_number} does not have all three rows.",
                context,
            ))

    if pdb.model_count() > 1:
        first = pdb.models[0]
        first_names = [a.name for a in first.all_atoms()]
        for model in pdb.models[1:]:
            if model.total_atom_count() != first.total_atom_count():
                errors.append(PDBError(
                    ErrorLevel.LOOSE_WARNING,
                    "Invalid Model",
                    f"Model {model.serial_number} does not have the same amount of atoms "
                    f"({model.total_atom_count()}) as the first model ({first.total_atom_count()}).",
                    context,
                ))
            elif [a.name for a in model.all_atoms()] != first_names:
                errors.append(PDBError(
                    ErrorLevel.LOOSE_WARNING,
                    "Atoms in Models not corresponding",
                    f"Model {model.serial_number} does not name its atoms in the same order as the first model.",
                    context,
                ))
    return errors
