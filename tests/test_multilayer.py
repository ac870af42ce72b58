"""
Tests for multilayer module.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clustermap.errors import FileFormatError
from clustermap.multilayer import build_remap_table, lookup_state_id, read_remap_table


class TestLookup:
    """Tests for remap table lookup."""

    def test_hit(self):
        assert lookup_state_id({1: {2: 3}}, 1, 2) == 3

    def test_unknown_layer(self):
        assert lookup_state_id({1: {2: 3}}, 9, 2) is None

    def test_unknown_node(self):
        assert lookup_state_id({1: {2: 3}}, 1, 9) is None

    def test_state_id_zero_is_a_hit(self):
        """Test state id 0 is not mistaken for a miss."""
        assert lookup_state_id({1: {2: 0}}, 1, 2) == 0


class TestBuildRemapTable:
    """Tests for building remap tables from state nodes."""

    def test_build(self):
        """Test triples are grouped by layer."""
        table = build_remap_table([(0, 1, 1), (1, 2, 1), (2, 1, 2)])

        assert table == {1: {1: 0, 2: 1}, 2: {1: 2}}

    def test_repeated_identical_triple(self):
        """Test an exact repeat is accepted."""
        table = build_remap_table([(0, 1, 1), (0, 1, 1)])

        assert table == {1: {1: 0}}

    def test_conflicting_triples(self):
        """Test a node mapped to two states in one layer is rejected."""
        with pytest.raises(ValueError, match="maps to both"):
            build_remap_table([(0, 1, 1), (5, 1, 1)])


class TestReadRemapTable:
    """Tests for reading remap tables from files."""

    def test_read(self, tmp_path):
        """Test a states file with comments and a trailing section."""
        path = tmp_path / "states.txt"
        path.write_text(
            "# state_id node_id layer_id\n"
            "0 1 1\n"
            "\n"
            "1 1 2 extra\n"
            "*Links\n"
            "0 1\n"
        )
        table = read_remap_table(str(path))

        assert table == {1: {1: 0}, 2: {1: 1}}

    def test_malformed_line(self, tmp_path):
        """Test a short line names the file and line number."""
        path = tmp_path / "states.txt"
        path.write_text("0 1 1\n1 2\n")

        with pytest.raises(FileFormatError) as exc:
            read_remap_table(str(path))

        assert exc.value.line_number == 2

    def test_missing_file(self, tmp_path):
        """Test a missing file raises an OS error."""
        with pytest.raises(FileNotFoundError):
            read_remap_table(str(tmp_path / "absent.txt"))
