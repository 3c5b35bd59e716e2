"""Decode single fixed-column PDB lines into typed records.

Every decoder is a pure function of (linenumber, line). Column ranges are
0-based and half-open, so the 1-based inclusive columns 31-38 of the format
description are written here as 30:38.

decode_line() never raises: it returns either a Record or the PDBError
describing why the line could not be decoded.
"""

from __future__ import annotations

import re
from typing import Callable, Union

from crystpdb.core.errors import Context, ErrorLevel, PDBError, PDBErrorException
from crystpdb.parsers.records import (
    AnisouRecord,
    AtomRecord,
    CrystalRecord,
    EmptyRecord,
    EndModelRecord,
    EndRecord,
    MasterRecord,
    ModelRecord,
    MtriXRecord,
    OrigXRecord,
    Record,
    RemarkRecord,
    ScaleRecord,
    TerRecord,
)
from crystpdb.reference_tables import valid_remark_type_number

ANISOU_SCALE = 10000.0
MAX_REMARK_LENGTH = 70

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


# ======================================================================
# Field helpers
# ======================================================================

def parse_number(linenumber: int, line: str, start: int, end: int, kind: type = float):
    """Parse the number in line[start:end], ignoring any whitespace inside the range.

    Raises PDBErrorException (BREAKING_ERROR, "Not a number") scoped to the
    column range when the text is empty or not a number of `kind`.
    """
    text = "".join(line[start:end].split())
    pattern = _INT_RE if kind is int else _FLOAT_RE
    if not pattern.match(text):
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Not a number",
            "The text presented is not a number of the right kind.",
            Context.line(linenumber, line, start, end - start),
        ))
    return kind(text)


def _optional_number(linenumber: int, line: str, start: int, end: int, default: float) -> float:
    # Absent (line ends before the field) or blank fields take the default.
    if len(line) < end or not line[start:end].strip():
        return default
    return parse_number(linenumber, line, start, end, float)


def _require_length(linenumber: int, line: str, minimum: int, kind: str, last_field: str) -> None:
    if len(line) < minimum:
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            f"{kind} line too short",
            f"This line is too short to contain all necessary elements (up to `{last_field}` at least).",
            Context.full_line(linenumber, line),
        ))


def _row(linenumber: int, line: str) -> tuple[float, float, float, float]:
    return (
        parse_number(linenumber, line, 10, 20),
        parse_number(linenumber, line, 20, 30),
        parse_number(linenumber, line, 30, 40),
        parse_number(linenumber, line, 45, 55),
    )


def parse_charge(linenumber: int, line: str) -> int:
    """Decode the two character charge field (columns 79-80): a digit then '+' or '-'.

    Both characters blank (or absent) means no charge.
    """
    digit = line[78:79]
    sign = line[79:80]
    if not digit.strip() and not sign.strip():
        return 0
    if len(digit) != 1 or digit not in "0123456789":
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Atom charge is not correct",
            "The charge is not numeric, it is defined to be [0-9][+-], so two characters in total.",
            Context.line(linenumber, line, 78, 1),
        ))
    if sign and sign not in "+-":
        raise PDBErrorException(PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Atom charge is not correct",
            "The charge is not properly signed, it is defined to be [0-9][+-], so two characters in total.",
            Context.line(linenumber, line, 79, 1),
        ))
    charge = int(digit)
    return -charge if sign == "-" else charge


# ======================================================================
# Per record decoders
# ======================================================================

def lex_remark(linenumber: int, line: str) -> RemarkRecord:
    _require_length(linenumber, line, 10, "Remark", "remark-type-number")
    number = parse_number(linenumber, line, 7, 10, int)
    if not valid_remark_type_number(number):
        raise PDBErrorException(PDBError(
            ErrorLevel.STRICT_WARNING,
            "Remark type number invalid",
            "The remark-type-number is not valid, see wwPDB v3.30 for all valid numbers.",
            Context.line(linenumber, line, 7, 3),
        ))
    text = ""
    if len(line) > 11:
        if len(line) - 11 > MAX_REMARK_LENGTH:
            raise PDBErrorException(PDBError(
                ErrorLevel.LOOSE_WARNING,
                "Remark too long",
                f"The REMARK is too long, the max is {MAX_REMARK_LENGTH} characters.",
                Context.line(linenumber, line, 11, len(line) - 11),
            ))
        text = line[11:]
    return RemarkRecord(number, text, linenumber=linenumber, line=line)


def lex_atom(linenumber: int, line: str, hetero: bool) -> AtomRecord:
    _require_length(linenumber, line, 54, "Atom", "z")
    return AtomRecord(
        hetero=hetero,
        serial_number=parse_number(linenumber, line, 6, 11, int),
        name=line[12:16],
        alternate_location=line[16],
        residue_name=line[17:20],
        chain_id=line[21],
        residue_serial_number=parse_number(linenumber, line, 22, 26, int),
        insertion_code=line[26],
        x=parse_number(linenumber, line, 30, 38),
        y=parse_number(linenumber, line, 38, 46),
        z=parse_number(linenumber, line, 46, 54),
        occupancy=_optional_number(linenumber, line, 54, 60, 1.0),
        b_factor=_optional_number(linenumber, line, 60, 66, 0.0),
        segment_id=line[72:76],
        element=line[76:78],
        charge=parse_charge(linenumber, line),
        linenumber=linenumber,
        line=line,
    )


def lex_anisou(linenumber: int, line: str) -> AnisouRecord:
    _require_length(linenumber, line, 70, "Anisou", "U(2,3)")
    u = [parse_number(linenumber, line, start, start + 7, int) / ANISOU_SCALE for start in range(28, 70, 7)]
    return AnisouRecord(
        serial_number=parse_number(linenumber, line, 6, 11, int),
        name=line[12:16],
        alternate_location=line[16],
        residue_name=line[17:20],
        chain_id=line[21],
        residue_serial_number=parse_number(linenumber, line, 22, 26, int),
        insertion_code=line[26],
        factors=((u[0], u[1], u[2]), (u[3], u[4], u[5])),
        segment_id=line[72:76],
        element=line[76:78],
        charge=line[78:80],
        linenumber=linenumber,
        line=line,
    )


def lex_cryst(linenumber: int, line: str) -> CrystalRecord:
    _require_length(linenumber, line, 54, "Crystal", "gamma")
    z = 1
    if line[66:70].strip():
        z = parse_number(linenumber, line, 66, 70, int)
    return CrystalRecord(
        a=parse_number(linenumber, line, 6, 15),
        b=parse_number(linenumber, line, 15, 24),
        c=parse_number(linenumber, line, 24, 33),
        alpha=parse_number(linenumber, line, 33, 40),
        beta=parse_number(linenumber, line, 40, 47),
        gamma=parse_number(linenumber, line, 47, 54),
        space_group=line[55:66].strip(),
        z=z,
        linenumber=linenumber,
        line=line,
    )


def lex_scale(linenumber: int, line: str, row: int) -> ScaleRecord:
    _require_length(linenumber, line, 55, "Scale", "u")
    return ScaleRecord(row, _row(linenumber, line), linenumber=linenumber, line=line)


def lex_origx(linenumber: int, line: str, row: int) -> OrigXRecord:
    _require_length(linenumber, line, 55, "OrigX", "t")
    return OrigXRecord(row, _row(linenumber, line), linenumber=linenumber, line=line)


def lex_mtrix(linenumber: int, line: str, row: int) -> MtriXRecord:
    _require_length(linenumber, line, 55, "MtriX", "v")
    serial_number = parse_number(linenumber, line, 7, 10, int)
    values = _row(linenumber, line)
    given = len(line) >= 60 and line[59] == "1"
    return MtriXRecord(row, serial_number, values, given, linenumber=linenumber, line=line)


def lex_model(linenumber: int, line: str) -> ModelRecord:
    serial_number = 0
    if line[6:].strip():
        serial_number = parse_number(linenumber, line, 6, len(line), int)
    return ModelRecord(serial_number, linenumber=linenumber, line=line)


def lex_master(linenumber: int, line: str) -> MasterRecord:
    _require_length(linenumber, line, 70, "Master", "numSeq")
    counts = [parse_number(linenumber, line, start, start + 5, int) for start in range(10, 70, 5)]
    return MasterRecord(*counts, linenumber=linenumber, line=line)


# ======================================================================
# Dispatch
# ======================================================================

def _simple(record_cls: type[Record]) -> Callable[[int, str], Record]:
    return lambda n, line: record_cls(linenumber=n, line=line)


_TAGS: dict[str, Callable[[int, str], Record]] = {
    "REMARK": lex_remark,
    "ATOM  ": lambda n, line: lex_atom(n, line, False),
    "HETATM": lambda n, line: lex_atom(n, line, True),
    "ANISOU": lex_anisou,
    "CRYST1": lex_cryst,
    "SCALE1": lambda n, line: lex_scale(n, line, 0),
    "SCALE2": lambda n, line: lex_scale(n, line, 1),
    "SCALE3": lambda n, line: lex_scale(n, line, 2),
    "ORIGX1": lambda n, line: lex_origx(n, line, 0),
    "ORIGX2": lambda n, line: lex_origx(n, line, 1),
    "ORIGX3": lambda n, line: lex_origx(n, line, 2),
    "MTRIX1": lambda n, line: lex_mtrix(n, line, 0),
    "MTRIX2": lambda n, line: lex_mtrix(n, line, 1),
    "MTRIX3": lambda n, line: lex_mtrix(n, line, 2),
    "MODEL ": lex_model,
    "MASTER": lex_master,
    "ENDMDL": _simple(EndModelRecord),
    "TER   ": _simple(TerRecord),
    "END   ": _simple(EndRecord),
}


def _unrecognised(linenumber: int, line: str) -> PDBError:
    return PDBError(
        ErrorLevel.GENERAL_WARNING,
        "Could not recognise tag.",
        "Could not parse the tag above, it is possible that it is valid PDB but just not supported right now.",
        Context.full_line(linenumber, line),
    )


def decode_line(linenumber: int, line: str) -> Union[Record, PDBError]:
    """Decode one line (without its newline) into a Record, or the PDBError explaining why not."""
    if not line.strip():
        return EmptyRecord(linenumber=linenumber, line=line)
    # Trailing blanks are often stripped, so "END" and "MODEL" still match "END   " and "MODEL ".
    decoder = _TAGS.get(line[:6].ljust(6))
    if decoder is None:
        return _unrecognised(linenumber, line)
    try:
        return decoder(linenumber, line)
    except PDBErrorException as e:
        return e.error
