"""Tests for decoding single PDB lines."""

import pytest

from conftest import make_anisou_line, make_atom_line, make_master_line, make_matrix_line
from crystpdb.core.errors import ErrorLevel, PDBError, PDBErrorException
from crystpdb.parsers.lexer import decode_line, parse_charge, parse_number
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
    RemarkRecord,
    ScaleRecord,
    TerRecord,
)


# -- numbers -----------------------------------------------------------------


class TestParseNumber:
    def test_float_with_padding(self):
        assert parse_number(1, "   12.500", 0, 9) == 12.5

    def test_int_ignores_inner_whitespace(self):
        assert parse_number(1, " 1 2 ", 0, 5, int) == 12

    def test_empty_field_is_not_a_number(self):
        with pytest.raises(PDBErrorException) as exc:
            parse_number(3, "ATOM         ", 6, 11, int)
        error = exc.value.error
        assert error.level == ErrorLevel.BREAKING_ERROR
        assert error.short_description == "Not a number"
        assert error.context.linenumber == 3
        assert error.context.columns == (6, 11)

    def test_float_for_int_field_fails(self):
        with pytest.raises(PDBErrorException):
            parse_number(1, "1.5", 0, 3, int)

    def test_nan_is_rejected(self):
        with pytest.raises(PDBErrorException):
            parse_number(1, "nan", 0, 3)


# -- charge ------------------------------------------------------------------


class TestCharge:
    def test_blank_charge_is_zero(self):
        assert parse_charge(1, make_atom_line(charge="  ")) == 0

    def test_missing_charge_columns_is_zero(self):
        assert parse_charge(1, make_atom_line()[:78]) == 0

    def test_positive(self):
        assert parse_charge(1, make_atom_line(charge="2+")) == 2

    def test_negative(self):
        assert parse_charge(1, make_atom_line(charge="1-")) == -1

    def test_non_numeric_digit_is_scoped_to_digit_column(self):
        line = make_atom_line(charge="+-")
        with pytest.raises(PDBErrorException) as exc:
            parse_charge(5, line)
        assert exc.value.error.level == ErrorLevel.BREAKING_ERROR
        assert exc.value.error.context.columns == (78, 79)

    def test_bad_sign_is_scoped_to_sign_column(self):
        with pytest.raises(PDBErrorException) as exc:
            parse_charge(5, make_atom_line(charge="2x"))
        assert exc.value.error.context.columns == (79, 80)


# -- record kinds ------------------------------------------------------------


class TestAtom:
    def test_full_atom(self):
        line = make_atom_line(
            serial=42, name=" CB", resname="SER", chain="B", resseq=17,
            x=-1.5, y=2.25, z=100.125, occupancy=0.5, b_factor=12.3,
            element="C", charge="1+", alt="A", icode="B", segment="SEG1",
        )
        rec = decode_line(7, line)
        assert isinstance(rec, AtomRecord)
        assert rec.hetero is False
        assert rec.serial_number == 42
        assert rec.name.strip() == "CB"
        assert rec.alternate_location == "A"
        assert rec.residue_name == "SER"
        assert rec.chain_id == "B"
        assert rec.residue_serial_number == 17
        assert rec.insertion_code == "B"
        assert (rec.x, rec.y, rec.z) == (-1.5, 2.25, 100.125)
        assert rec.occupancy == 0.5
        assert rec.b_factor == 12.3
        assert rec.segment_id == "SEG1"
        assert rec.element.strip() == "C"
        assert rec.charge == 1
        assert rec.linenumber == 7

    def test_hetatm(self):
        rec = decode_line(1, make_atom_line(hetero=True, resname="HOH", element="O"))
        assert isinstance(rec, AtomRecord)
        assert rec.hetero is True

    def test_defaults_when_optional_fields_absent(self):
        rec = decode_line(1, make_atom_line()[:54])
        assert isinstance(rec, AtomRecord)
        assert rec.occupancy == 1.0
        assert rec.b_factor == 0.0
        assert rec.segment_id == ""
        assert rec.element == ""
        assert rec.charge == 0

    def test_short_line_is_fatal(self):
        line = ("ATOM  " + make_atom_line()[6:])[:40]
        assert len(line) == 40
        err = decode_line(1, line)
        assert isinstance(err, PDBError)
        assert err.level == ErrorLevel.BREAKING_ERROR
        assert err.short_description == "Atom line too short"

    def test_bad_coordinate_is_fatal_and_scoped(self):
        line = make_atom_line()
        line = line[:38] + "   abc.d" + line[46:]
        err = decode_line(2, line)
        assert isinstance(err, PDBError)
        assert err.is_fatal
        assert err.context.columns == (38, 46)

    def test_malformed_charge_points_at_digit(self):
        err = decode_line(1, make_atom_line(charge="+-"))
        assert isinstance(err, PDBError)
        assert err.is_fatal
        assert err.context.columns == (78, 79)


class TestAnisou:
    def test_factors_are_scaled(self):
        rec = decode_line(1, make_anisou_line(serial=9, factors=(2406, 1892, -117, 4, -231, -190)))
        assert isinstance(rec, AnisouRecord)
        assert rec.serial_number == 9
        assert rec.factors[0] == pytest.approx((0.2406, 0.1892, -0.0117))
        assert rec.factors[1] == pytest.approx((0.0004, -0.0231, -0.0190))

    def test_short_anisou_is_fatal(self):
        err = decode_line(1, make_anisou_line()[:60])
        assert isinstance(err, PDBError)
        assert err.is_fatal


class TestRemark:
    def test_remark(self):
        rec = decode_line(1, "REMARK   2 RESOLUTION.    1.74 ANGSTROMS.")
        assert isinstance(rec, RemarkRecord)
        assert rec.number == 2
        assert rec.text == "RESOLUTION.    1.74 ANGSTROMS."

    def test_remark_without_text(self):
        rec = decode_line(1, "REMARK   2")
        assert isinstance(rec, RemarkRecord)
        assert rec.text == ""

    def test_invalid_remark_number(self):
        err = decode_line(1, "REMARK   6 NOT A REMARK TYPE")
        assert isinstance(err, PDBError)
        assert err.level == ErrorLevel.STRICT_WARNING
        assert err.context.columns == (7, 10)

    def test_remark_too_long(self):
        err = decode_line(1, "REMARK   3 " + "X" * 71)
        assert isinstance(err, PDBError)
        assert err.level == ErrorLevel.LOOSE_WARNING
        assert err.short_description == "Remark too long"


class TestCrystallographic:
    def test_cryst1(self):
        rec = decode_line(1, "CRYST1   63.150   83.590   53.800  90.00  99.34  90.00 P 1 21 1      8")
        assert isinstance(rec, CrystalRecord)
        assert (rec.a, rec.b, rec.c) == (63.15, 83.59, 53.8)
        assert (rec.alpha, rec.beta, rec.gamma) == (90.0, 99.34, 90.0)
        assert rec.space_group == "P 1 21 1"
        assert rec.z == 8

    def test_cryst1_without_z(self):
        rec = decode_line(1, "CRYST1   10.000   10.000   10.000  90.00  90.00  90.00 P 1")
        assert isinstance(rec, CrystalRecord)
        assert rec.z == 1

    def test_scale_rows(self):
        for row in (1, 2, 3):
            rec = decode_line(1, make_matrix_line("SCALE", row, (0.5, 0.25, 0.125, 1.5)))
            assert isinstance(rec, ScaleRecord)
            assert rec.row == row - 1
            assert rec.values == (0.5, 0.25, 0.125, 1.5)

    def test_origx(self):
        rec = decode_line(1, make_matrix_line("ORIGX", 2))
        assert isinstance(rec, OrigXRecord)
        assert rec.row == 1

    def test_mtrix_given_flag(self):
        rec = decode_line(1, make_matrix_line("MTRIX", 3, serial=4, given=True))
        assert isinstance(rec, MtriXRecord)
        assert rec.row == 2
        assert rec.serial_number == 4
        assert rec.given is True

    def test_mtrix_not_given(self):
        rec = decode_line(1, make_matrix_line("MTRIX", 1, serial=2))
        assert isinstance(rec, MtriXRecord)
        assert rec.given is False


class TestDispatch:
    def test_model(self):
        rec = decode_line(1, "MODEL        5")
        assert isinstance(rec, ModelRecord)
        assert rec.serial_number == 5

    @pytest.mark.parametrize("line", ["MODEL ", "MODEL      ", "MODEL"])
    def test_model_without_number_is_zero(self, line):
        rec = decode_line(1, line)
        assert isinstance(rec, ModelRecord)
        assert rec.serial_number == 0

    def test_model_with_bad_number_is_fatal(self):
        err = decode_line(1, "MODEL     x1")
        assert isinstance(err, PDBError)
        assert err.is_fatal
        assert err.context.columns == (6, 12)

    def test_master(self):
        rec = decode_line(1, make_master_line(remark=3, xform=6, coord=120, ter=2))
        assert isinstance(rec, MasterRecord)
        assert rec.num_remark == 3
        assert rec.num_xform == 6
        assert rec.num_coord == 120
        assert rec.num_ter == 2

    @pytest.mark.parametrize("line, kind", [
        ("ENDMDL", EndModelRecord),
        ("TER", TerRecord),
        ("TER      10      ALA A   1", TerRecord),
        ("END", EndRecord),
        ("END   ", EndRecord),
        ("", EmptyRecord),
        ("   ", EmptyRecord),
    ])
    def test_simple_records(self, line, kind):
        assert isinstance(decode_line(1, line), kind)

    @pytest.mark.parametrize("line", ["HEADER    SOMETHING", "XY", "FOO", "SEQRES   1 A   10  ALA"])
    def test_unrecognised_tag_is_general_warning(self, line):
        err = decode_line(4, line)
        assert isinstance(err, PDBError)
        assert err.level == ErrorLevel.GENERAL_WARNING
        assert err.context.kind == "full_line"
        assert err.context.linenumber == 4
