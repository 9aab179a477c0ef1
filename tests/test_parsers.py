"""
Tests for reading distance matrices and coordinate tables.
"""

import pytest

from tsp_trials.parsers import read_coordinates, read_matrix

DAT = """\
# three city instance
set NODES := 1 2 3 ;

param dist :
     1   2   3 :=
   1   0   5   7
   2   6   0   4
   3   8   2   0
;
"""

ATSP = """\
NAME: tiny
TYPE: ATSP
DIMENSION: 3
EDGE_WEIGHT_TYPE: EXPLICIT
EDGE_WEIGHT_FORMAT: FULL_MATRIX
EDGE_WEIGHT_SECTION
9999 1 2
3 9999 4
5 6 9999
EOF
"""


class TestReadMatrix:
    def test_csv(self, tmp_path):
        p = tmp_path / "m.csv"
        p.write_text(",A,B,C\nA,0,1,2\nB,3,0,4\nC,5,6,0\n")
        m = read_matrix(str(p))
        assert list(m.index) == ["A", "B", "C"]
        assert m.loc["B", "C"] == 4.0
        assert m.loc["C", "B"] == 6.0

    def test_csv_numeric_labels_are_strings(self, tmp_path):
        p = tmp_path / "m.csv"
        p.write_text(",1,2,3\n1,0,1,2\n2,1,0,3\n3,2,3,0\n")
        m = read_matrix(str(p))
        assert list(m.index) == ["1", "2", "3"]
        assert m.loc["1", "3"] == 2.0

    def test_csv_label_mismatch(self, tmp_path):
        p = tmp_path / "m.csv"
        p.write_text(",A,B\nA,0,1\nX,1,0\n")
        with pytest.raises(ValueError):
            read_matrix(str(p))

    def test_dat(self, tmp_path):
        p = tmp_path / "inst.dat"
        p.write_text(DAT)
        m = read_matrix(str(p))
        assert list(m.index) == ["1", "2", "3"]
        assert m.loc["1", "3"] == 7.0
        assert m.loc["3", "2"] == 2.0

    def test_dat_trailing_semicolon_row(self, tmp_path):
        p = tmp_path / "inst.dat"
        p.write_text(DAT.replace("   3   8   2   0\n;\n", "   3   8   2   0 ;\n"))
        m = read_matrix(str(p))
        assert m.shape == (3, 3)

    def test_dat_without_matrix(self, tmp_path):
        p = tmp_path / "empty.dat"
        p.write_text("set NODES := 1 2 ;\n")
        with pytest.raises(ValueError, match="param dist"):
            read_matrix(str(p))

    def test_atsp(self, tmp_path):
        p = tmp_path / "tiny.atsp"
        p.write_text(ATSP)
        m = read_matrix(str(p))
        assert list(m.index) == ["1", "2", "3"]
        assert m.loc["2", "1"] == 3.0
        assert m.loc["1", "2"] == 1.0

    def test_atsp_wrong_format(self, tmp_path):
        p = tmp_path / "tiny.atsp"
        p.write_text(ATSP.replace("FULL_MATRIX", "UPPER_ROW"))
        with pytest.raises(ValueError, match="EDGE_WEIGHT_FORMAT"):
            read_matrix(str(p))

    def test_atsp_short_section(self, tmp_path):
        p = tmp_path / "tiny.atsp"
        p.write_text(ATSP.replace("5 6 9999\n", ""))
        with pytest.raises(ValueError, match="Expected 9 weights"):
            read_matrix(str(p))

    def test_unsupported_extension(self, tmp_path):
        p = tmp_path / "m.json"
        p.write_text("{}")
        with pytest.raises(ValueError, match="Unsupported"):
            read_matrix(str(p))


class TestReadCoordinates:
    def test_indexed_by_label(self, tmp_path):
        p = tmp_path / "coords.csv"
        p.write_text("label,x,y,country\n1,0.5,1.5,PT\n2,2.0,3.0,ES\n")
        coords = read_coordinates(str(p))
        assert list(coords.columns) == ["x", "y"]
        assert coords.loc["2", "y"] == 3.0

    def test_missing_columns(self, tmp_path):
        p = tmp_path / "coords.csv"
        p.write_text("label,lon\nA,1\n")
        with pytest.raises(ValueError, match="lacks columns"):
            read_coordinates(str(p))
