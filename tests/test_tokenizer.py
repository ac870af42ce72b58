"""
Tests for tokenizer module.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clustermap.tokenizer import LineScanner, decode_path, parse_float, parse_uint


class TestDecodePath:
    """Tests for tree path decoding."""

    def test_colon_delimited(self):
        """Test the standard colon-delimited path."""
        assert decode_path("1:1:2") == (1, 1, 2)

    def test_single_component(self):
        """Test a top-level node path."""
        assert decode_path("7") == (7,)

    def test_multi_digit_components(self):
        """Test components with more than one digit."""
        assert decode_path("12:305:1") == (12, 305, 1)

    def test_any_non_digit_delimits(self):
        """Test that every non-digit character acts as a delimiter."""
        assert decode_path("1.2/3-4") == (1, 2, 3, 4)

    def test_repeated_delimiters(self):
        """Test that consecutive delimiters do not create components."""
        assert decode_path("1::2") == (1, 2)

    def test_leading_and_trailing_delimiters(self):
        """Test delimiters at both ends."""
        assert decode_path(":1:2:") == (1, 2)

    def test_no_digits(self):
        """Test a token without digits decodes to an empty path."""
        assert decode_path("abc") == ()

    @pytest.mark.parametrize("token", ["0", "0:1", "1:0", "1:0:3", "1:00"])
    def test_zero_component_rejected(self, token):
        """Test that a 0 anywhere in the path is rejected."""
        with pytest.raises(ValueError, match="lowest allowed integer is 1"):
            decode_path(token)

    def test_leading_zeros_allowed(self):
        """Test that zero-padded components are read by value."""
        assert decode_path("01:002") == (1, 2)


class TestParseNumbers:
    """Tests for scalar token parsing."""

    def test_parse_uint(self):
        assert parse_uint("42") == 42
        assert parse_uint("-1") is None
        assert parse_uint("1.5") is None
        assert parse_uint("x") is None

    def test_parse_float(self):
        assert parse_float("0.0384615") == pytest.approx(0.0384615)
        assert parse_float("1e-3") == pytest.approx(0.001)
        assert parse_float("abc") is None

    @pytest.mark.parametrize("token", ["nan", "inf", "infinity", "1_0", "0x1p3"])
    def test_parse_float_decimal_only(self, token):
        """Test that only decimal and scientific notation is accepted."""
        assert parse_float(token) is None


class TestLineScanner:
    """Tests for positional line scanning."""

    def test_reads_fields_in_order(self):
        """Test reading a full tree line."""
        scanner = LineScanner('1:1:1 0.0384615 "1" 1')
        assert scanner.read_token() == "1:1:1"
        assert scanner.read_float() == pytest.approx(0.0384615)
        assert scanner.read_quoted() == "1"
        assert scanner.read_uint() == 1
        assert scanner.read_uint() is None

    def test_quoted_name_with_spaces(self):
        """Test that names may contain whitespace."""
        scanner = LineScanner('1:1 0.5 "New York City" 3 9')
        scanner.read_token()
        scanner.read_float()
        assert scanner.read_quoted() == "New York City"
        assert scanner.read_uint() == 3
        assert scanner.read_uint() == 9

    def test_empty_quoted_name(self):
        """Test an empty name."""
        scanner = LineScanner('1 0.5 "" 3')
        scanner.read_token()
        scanner.read_float()
        assert scanner.read_quoted() == ""
        assert scanner.read_uint() == 3

    def test_missing_closing_quote(self):
        """Test that an unterminated name fails."""
        scanner = LineScanner('1 0.5 "abc 3')
        scanner.read_token()
        scanner.read_float()
        assert scanner.read_quoted() is None

    def test_failure_is_sticky(self):
        """Test that reads after a failed conversion return None."""
        scanner = LineScanner("1 x 3")
        assert scanner.read_uint() == 1
        assert scanner.read_uint() is None
        assert scanner.failed
        assert scanner.read_uint() is None

    def test_failed_read_does_not_consume(self):
        """Test that a failed conversion leaves the token unread."""
        scanner = LineScanner("1 x")
        scanner.read_uint()
        scanner.read_uint()
        assert scanner.rest() == "x"

    def test_tabs_separate_tokens(self):
        """Test that tabs separate fields like spaces."""
        scanner = LineScanner("3\t2\t0.5")
        assert scanner.read_uint() == 3
        assert scanner.read_uint() == 2
        assert scanner.read_float() == pytest.approx(0.5)

    def test_float_read_stops_at_number_end(self):
        """Test that a flow glued to the name leaves the name readable."""
        scanner = LineScanner('1:1 0.5"a b" 1')
        assert scanner.read_token() == "1:1"
        assert scanner.read_float() == pytest.approx(0.5)
        assert scanner.read_quoted() == "a b"
        assert scanner.read_uint() == 1

    def test_float_read_rejects_nan(self):
        scanner = LineScanner('1:1 nan "a" 1')
        scanner.read_token()
        assert scanner.read_float() is None
        assert scanner.failed

    def test_unicode_separators_do_not_split_tokens(self):
        """Test that only ASCII whitespace separates fields."""
        scanner = LineScanner("1:1\u20282 0.5")
        assert scanner.read_token() == "1:1\u20282"
        assert scanner.read_float() == pytest.approx(0.5)
