"""Tests for checker module."""

import pytest
from ascii_coloriser.codes import COLORS_BY_CODE, STYLES_BY_CODE
from ascii_coloriser.checker import (
    DiagnosticKind,
    Policy,
    align,
    check,
    check_all,
    map_mask,
    split_lines,
    split_rows,
)
from ascii_coloriser.errors import EXIT_INCOMPATIBLE, StructuralMismatch

# --- Fixtures ---


@pytest.fixture
def canvas():
    return " /\\\n/__\\\n|  |\n"


def diagnostic_of(canvas, map_text, policy=Policy.EXACT):
    with pytest.raises(StructuralMismatch) as exc:
        check(canvas, map_text, "map.txt", policy)
    return exc.value.diagnostic


# --- Tests ---


class TestSplitRows:
    def test_trailing_newline_adds_no_row(self):
        assert split_lines("AB\nCD\n") == ["AB", "CD"]
        assert split_lines("AB\nCD") == ["AB", "CD"]

    def test_empty_lines_are_kept(self):
        assert split_lines("\n\n") == ["", ""]
        assert split_lines("") == []

    def test_crlf_is_terminator(self):
        assert split_rows("AB\r\nC") == [("AB", "\r\n"), ("C", "")]


class TestExactPolicy:
    def test_identical_shape_passes(self, canvas):
        codes = check(canvas, " 11\n2222\n3  3\n", "fg")
        assert len(codes) == len(canvas)
        assert codes[:3] == [" ", "1", "1"]
        assert codes[3] is None

    def test_content_is_not_compared(self, canvas):
        check(canvas, "xxx\nxxxx\nxxxx\n", "fg")

    def test_fewer_lines(self):
        d = diagnostic_of("A\nB\n", "1\n")
        assert d.kind is DiagnosticKind.LINE_COUNT_MISMATCH
        assert d.line == 1
        assert d.column is None
        assert "unexpected EOF" in d.message
        assert "at line 1" in d.message

    def test_more_lines(self):
        d = diagnostic_of("A\n", "1\n2\n3\n")
        assert d.kind is DiagnosticKind.LINE_COUNT_MISMATCH
        assert d.line == 1
        assert "expected EOF" in d.message
        assert "unexpected" not in d.message

    def test_line_count_reported_before_line_length(self):
        d = diagnostic_of("AB\nCD\n", "1\n")
        assert d.kind is DiagnosticKind.LINE_COUNT_MISMATCH

    def test_longer_map_line(self):
        d = diagnostic_of("AB\nCD\n", "11\n222\n")
        assert d.kind is DiagnosticKind.LINE_LENGTH_MISMATCH
        assert (d.line, d.column) == (1, 2)
        assert "expected end-of-line" in d.message

    def test_shorter_map_line(self):
        d = diagnostic_of("ABCD\n", "11\n")
        assert d.kind is DiagnosticKind.LINE_LENGTH_MISMATCH
        assert (d.line, d.column) == (0, 2)
        assert "unexpected end-of-line" in d.message
        assert "map.txt" in d.message

    def test_error_carries_exit_code(self):
        with pytest.raises(StructuralMismatch) as exc:
            check("A\nB\n", "1\n", "map.txt")
        assert exc.value.exit_code == EXIT_INCOMPATIBLE
        assert str(exc.value) == exc.value.diagnostic.message

    def test_unicode_counts_characters(self):
        check("é█\n", "12\n", "fg")


class TestAlignment:
    def test_missing_trailing_newline_in_map(self):
        codes = check("AB\n", "12", "fg")
        assert codes == ["1", "2", None]

    def test_crlf_map_on_lf_canvas(self):
        codes = check("AB\nCD\n", "12\r\n34\r\n", "fg")
        assert codes == ["1", "2", None, "3", "4", None]

    def test_crlf_canvas(self):
        assert align("AB\r\n", ["12"]) == ["1", "2", None, None]


class TestMaskPolicy:
    def test_matching_pattern_passes(self):
        check("A B\n", "1 2\n", "fg", Policy.MASK)

    def test_dash_counts_as_blank(self):
        assert map_mask("1-\t2") == "#  #"

    def test_expected_blank(self):
        d = diagnostic_of("A B\n", "112\n", Policy.MASK)
        assert d.kind is DiagnosticKind.EXPECTED_BLANK
        assert (d.line, d.column) == (0, 1)

    def test_unexpected_blank(self):
        d = diagnostic_of("AB\n", "1-\n", Policy.MASK)
        assert d.kind is DiagnosticKind.UNEXPECTED_BLANK
        assert (d.line, d.column) == (0, 1)

    def test_unrecognized_marker(self):
        d = diagnostic_of("AB\n", "1z\n", Policy.MASK)
        assert d.kind is DiagnosticKind.UNRECOGNIZED_MARKER
        assert "`z`" in d.message

    def test_length_still_checked(self):
        d = diagnostic_of("AB\n", "12 \n", Policy.MASK)
        assert d.kind is DiagnosticKind.LINE_LENGTH_MISMATCH
        assert d.column == 2

    def test_style_map_rejects_color_only_codes(self):
        with pytest.raises(StructuralMismatch) as exc:
            check("AB\n", "1a\n", "style", Policy.MASK, frozenset(STYLES_BY_CODE))
        d = exc.value.diagnostic
        assert d.kind is DiagnosticKind.UNRECOGNIZED_MARKER
        assert (d.line, d.column) == (0, 1)

    def test_color_map_accepts_palette_codes(self):
        check("AB\n", "0f\n", "fg", Policy.MASK, frozenset(COLORS_BY_CODE))

    def test_exact_policy_ignores_pattern(self):
        check("AB\n", "1-\n", "fg", Policy.EXACT)


class TestCheckAll:
    def test_all_pass(self, canvas):
        results = check_all(canvas, {"fg": canvas, "bg": canvas})
        assert len(results) == 2

    def test_stops_at_first_failure(self, canvas):
        with pytest.raises(StructuralMismatch) as exc:
            check_all(canvas, {"fg": canvas, "bad": "x\n", "worse": ""})
        assert exc.value.diagnostic.file == "bad"
