"""Tests for the structure hierarchy: Atom, Residue, Chain, Model, PDB and crystallographic parts."""

import pytest

from crystpdb.structs import (
    PDB,
    Atom,
    Chain,
    Model,
    MtriX,
    Residue,
    Scale,
    Symmetry,
    TransformationMatrix,
    UnitCell,
)


def _atom(serial=1, name="CA", x=0.0, y=0.0, z=0.0, element="C"):
    return Atom(serial, name, x, y, z, element=element)


# -- Atom / Residue / Chain ---------------------------------------------------


class TestAtom:
    def test_text_fields_are_stripped(self):
        a = Atom(1, " CA ", 1.0, 2.0, 3.0, element=" C", segment_id="A1  ")
        assert a.name == "CA"
        assert a.element == "C"
        assert a.segment_id == "A1"
        assert a.pos == (1.0, 2.0, 3.0)

    def test_name_too_long(self):
        with pytest.raises(ValueError):
            Atom(1, "CALPH", 0.0, 0.0, 0.0)

    def test_invalid_character(self):
        with pytest.raises(ValueError):
            Atom(1, "Cé", 0.0, 0.0, 0.0)

    def test_apply_transformation(self):
        a = _atom(x=1.0, y=2.0, z=3.0)
        a.apply_transformation(TransformationMatrix.translation(1, -2, 0.5))
        assert a.pos == pytest.approx((2.0, 0.0, 3.5))


class TestChain:
    def test_chain_id_must_be_one_character(self):
        with pytest.raises(ValueError):
            Chain("AB")
        with pytest.raises(ValueError):
            Chain("")

    def test_upsert_appends_to_existing_residue(self):
        c = Chain("A")
        first = c.add_atom(_atom(1, "N"), 10, "GLY")
        second = c.add_atom(_atom(2, "CA"), 10, "GLY")
        assert first is second
        assert c.residue_count() == 1
        assert [a.name for a in c.atoms()] == ["N", "CA"]

    def test_insertion_code_distinguishes_residues(self):
        c = Chain("A")
        c.add_atom(_atom(1), 52, "ALA")
        c.add_atom(_atom(2), 52, "ALA", "A")
        assert c.residue_count() == 2
        assert [r.id for r in c] == [(52, ""), (52, "A")]

    def test_residue_name_is_not_part_of_the_key(self):
        c = Chain("A")
        c.add_atom(_atom(1), 5, "ALA")
        c.add_atom(_atom(2), 5, "GLY")
        assert c.residue_count() == 1
        assert c.residues[0].name == "ALA"

    def test_insertion_order_is_kept(self):
        c = Chain("A")
        for serial, resseq in enumerate([3, 1, 2, 1, 3], start=1):
            c.add_atom(_atom(serial), resseq, "ALA")
        assert [r.serial_number for r in c] == [3, 1, 2]
        assert [a.serial_number for a in c.residues[0]] == [1, 5]

    def test_remove_residues_by(self):
        c = Chain("A")
        c.add_atom(_atom(1), 1, "ALA")
        c.add_atom(_atom(2), 2, "HOH")
        c.remove_residues_by(lambda r: r.name == "HOH")
        assert [r.name for r in c] == ["ALA"]

    def test_residue_repr(self):
        r = Residue(7, "SER", "B")
        assert "7B" in repr(r)
        assert "SER" in repr(r)


# -- Model ---------------------------------------------------------------------


class TestModel:
    @pytest.fixture
    def model(self) -> Model:
        m = Model(1)
        m.add_atom(_atom(1, "N"), "A", 1, "VAL")
        m.add_atom(_atom(2, "CA"), "A", 1, "VAL")
        m.add_atom(_atom(3, "N"), "B", 1, "SER")
        m.add_hetero_atom(_atom(4, "FE", element="FE"), "A", 150, "HEM")
        m.add_hetero_atom(_atom(5, "O", element="O"), "A", 201, "HOH")
        return m

    def test_partitions(self, model):
        assert [c.id for c in model.chains] == ["A", "B"]
        assert [c.id for c in model.hetero_chains] == ["A"]
        assert model.chain_count() == 2
        assert model.total_chain_count() == 3

    def test_counts(self, model):
        assert model.atom_count() == 3
        assert model.hetero_atom_count() == 2
        assert model.total_atom_count() == 5
        assert model.residue_count() == 2
        assert model.total_residue_count() == 4

    def test_all_atoms_is_standard_then_hetero(self, model):
        assert [a.serial_number for a in model.all_atoms()] == [1, 2, 3, 4, 5]
        assert [a.serial_number for a in model.hetero_atoms()] == [4, 5]

    def test_index_access(self, model):
        assert model.chain(2).id == "A"
        assert model.chain(2) is model.hetero_chains[0]
        assert model.residue(3).name == "HOH"
        assert model.atom(4).serial_number == 5
        assert model.atom(5) is None
        assert model.atom(-1) is None

    def test_remove_chain_id_only_standard(self, model):
        assert model.remove_chain_id("A") is True
        assert [c.id for c in model.chains] == ["B"]
        assert [c.id for c in model.hetero_chains] == ["A"]
        assert model.remove_chain_id("Z") is False

    def test_remove_atoms_by(self, model):
        model.remove_atoms_by(lambda a: a.name == "N")
        assert [a.serial_number for a in model.all_atoms()] == [2, 4, 5]

    def test_join(self, model):
        other = Model(2)
        other.add_atom(_atom(9), "C", 1, "GLY")
        model.join(other)
        assert model.serial_number == 1
        assert [c.id for c in model.chains] == ["A", "B", "C"]
        assert other.total_atom_count() == 0


# -- PDB -----------------------------------------------------------------------


class TestPDB:
    @pytest.fixture
    def pdb(self) -> PDB:
        p = PDB()
        for serial in (1, 2):
            m = Model(serial)
            m.add_atom(_atom(1, "N"), "A", 1, "GLY")
            m.add_atom(_atom(2, "CA"), "A", 1, "GLY")
            m.add_hetero_atom(_atom(3, "O", element="O"), "W", 1, "HOH")
            p.add_model(m)
        p.add_remark(2, "RESOLUTION. 1.50 ANGSTROMS.")
        p.add_remark(3, "REFINEMENT.")
        p.add_remark(2, "")
        return p

    def test_counts(self, pdb):
        assert pdb.model_count() == 2
        assert pdb.atom_count() == 4
        assert pdb.total_atom_count() == 6
        assert pdb.total_chain_count() == 4
        assert pdb.total_residue_count() == 4

    def test_remarks(self, pdb):
        assert pdb.remark_count() == 3
        assert pdb.remarks_of_type(2) == ["RESOLUTION. 1.50 ANGSTROMS.", ""]
        assert pdb.remarks_of_type(4) == []

    def test_models(self, pdb):
        assert pdb.model(1).serial_number == 2
        assert pdb.model(2) is None
        assert pdb.find_model(2) is pdb.models[1]
        assert pdb.remove_model_serial_number(1) is True
        assert pdb.model_count() == 1
        assert pdb.remove_model_serial_number(1) is False

    def test_remove_residues_by(self, pdb):
        pdb.remove_residues_by(lambda r: r.name == "HOH")
        assert pdb.total_atom_count() == 4

    def test_mtrix_serials_are_unique(self, pdb):
        pdb.add_mtrix(MtriX(serial_number=1))
        with pytest.raises(ValueError):
            pdb.add_mtrix(MtriX(serial_number=1))
        assert pdb.find_mtrix(1) is not None
        assert pdb.find_mtrix(2) is None

    def test_renumber(self, pdb):
        pdb.models[0].add_atom(_atom(40, "C"), "A", 9, "ALA")
        pdb.renumber()
        m = pdb.models[0]
        assert [a.serial_number for a in m.all_atoms()] == [1, 2, 3, 4]
        assert [r.serial_number for r in m.chains[0]] == [1, 2]

    def test_apply_transformation(self, pdb):
        pdb.apply_transformation(TransformationMatrix.translation(1, 1, 1))
        assert all(a.pos == pytest.approx((1.0, 1.0, 1.0)) for a in pdb.all_atoms())

    def test_to_dict(self, pdb):
        pdb.unit_cell = UnitCell(10.0, 20.0, 30.0, 90.0, 90.0, 120.0)
        pdb.symmetry = Symmetry.from_symbol("P 1 21 1")
        d = pdb.to_dict()
        assert d["model_count"] == 2
        assert d["total_atom_count"] == 6
        assert d["space_group"] == "P 1 21 1"
        assert d["cell"] == [10.0, 20.0, 30.0, 90.0, 90.0, 120.0]
        assert d["has_scale"] is False
        assert d["mtrix_count"] == 0


# -- Crystallography -----------------------------------------------------------


class TestCrystal:
    def test_scale_valid_only_after_third_row(self):
        s = Scale()
        assert not s.valid()
        s.set_row(0, [0.1, 0.0, 0.0, 0.0])
        s.set_row(1, [0.0, 0.1, 0.0, 0.0])
        assert not s.valid()
        s.set_row(2, [0.0, 0.0, 0.1, 0.0])
        assert s.valid()

    def test_row_needs_four_values(self):
        with pytest.raises(ValueError):
            Scale().set_row(0, [1.0, 2.0, 3.0])

    def test_scale_transformation(self):
        s = Scale()
        for i in range(3):
            s.set_row(i, [0.5 if j == i else 0.0 for j in range(3)] + [0.0])
        assert s.transformation().apply((2.0, 4.0, 6.0)) == pytest.approx((1.0, 2.0, 3.0))

    def test_symmetry_round_trip(self):
        sym = Symmetry.from_symbol("P 21 21 21")
        assert sym.index == 19
        assert sym.symbol == "P 21 21 21"

    def test_unknown_symbol(self):
        assert Symmetry.from_symbol("X 9 9") is None


class TestTransformationMatrix:
    def test_identity(self):
        assert TransformationMatrix.identity().apply((1.0, 2.0, 3.0)) == (1.0, 2.0, 3.0)

    def test_rotation_z(self):
        assert TransformationMatrix.rotation_z(90).apply((1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 0.0))

    def test_combine_applies_self_first(self):
        t = TransformationMatrix.translation(1, 0, 0).combine(TransformationMatrix.scale(2, 2, 2))
        assert t.apply((0.0, 0.0, 0.0)) == pytest.approx((2.0, 0.0, 0.0))

    def test_shape_checked(self):
        with pytest.raises(ValueError):
            TransformationMatrix([[1, 0, 0], [0, 1, 0], [0, 0, 1]])

    def test_equality(self):
        assert TransformationMatrix.rotation_x(360) == TransformationMatrix.identity()
