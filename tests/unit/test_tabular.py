"""Unit tests for the delimited text serializer and parser.

Tests cover:
- Field escaping rules
- Header handling and empty input
- Round trips of awkward free text (delimiters, quotes, line breaks)
- CRLF tolerance and blank record skipping
- Malformed input errors with line numbers
"""

from __future__ import annotations

from pathlib import Path

from faker import Faker
import pytest

from shopgen.errors import TabularParseError
from shopgen.tabular import (
    escape_value,
    parse,
    parse_line,
    read_rows,
    serialize,
    split_records,
    write_rows,
)

pytestmark = pytest.mark.unit


class TestEscapeValue:
    """Tests for escape_value."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("two\nlines", '"two\nlines"'),
            ("cr\rhere", '"cr\rhere"'),
            (None, ""),
            (12, "12"),
            ("", ""),
        ],
    )
    def test_escape(self, value: object, expected: str) -> None:
        """Values are quoted only when they contain a special character."""
        assert escape_value(value) == expected


class TestSerialize:
    """Tests for serialize."""

    def test_header_and_rows(self) -> None:
        """Header first, one line per row, no trailing newline."""
        text = serialize([{"a": "1", "b": "x"}, {"a": "2", "b": "y"}])

        assert text == "a,b\n1,x\n2,y"

    def test_empty_rows_without_fieldnames(self) -> None:
        """Nothing to describe yields empty text."""
        assert serialize([]) == ""

    def test_empty_rows_with_fieldnames(self) -> None:
        """Explicit field names still produce the header."""
        assert serialize([], fieldnames=["a", "b"]) == "a,b"

    def test_fieldnames_fix_column_order(self) -> None:
        """Column order follows fieldnames, not dict order."""
        text = serialize([{"b": "2", "a": "1"}], fieldnames=["a", "b"])

        assert text == "a,b\n1,2"

    def test_missing_field_raises(self) -> None:
        """Rows must carry every header field."""
        with pytest.raises(ValueError, match="row 2 is missing fields: b"):
            serialize([{"a": "1", "b": "2"}, {"a": "3"}])

    def test_none_is_empty_field(self) -> None:
        """None serializes as an empty field."""
        assert serialize([{"a": None, "b": "x"}]) == "a,b\n,x"


class TestParse:
    """Tests for parse and its helpers."""

    def test_parse_line_doubled_quotes(self) -> None:
        """A doubled quote inside quotes is a literal quote."""
        assert parse_line('1,"a ""b"", c",d') == ["1", 'a "b", c', "d"]

    def test_parse_line_trailing_empty_field(self) -> None:
        """A trailing delimiter yields a final empty field."""
        assert parse_line("a,b,") == ["a", "b", ""]

    def test_empty_text(self) -> None:
        """Empty input has no rows."""
        assert parse("") == []

    def test_header_only(self) -> None:
        """A header with no records has no rows."""
        assert parse("a,b") == []

    def test_empty_fields_stay_empty_strings(self) -> None:
        """The parser never turns empty fields into None."""
        assert parse("a,b\n,x") == [{"a": "", "b": "x"}]

    def test_crlf_tolerated(self) -> None:
        """Windows line endings parse the same as LF."""
        assert parse("a,b\r\n1,2\r\n3,4\r\n") == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_blank_records_skipped(self) -> None:
        """Blank and whitespace-only lines are ignored."""
        assert parse("a,b\n\n1,2\n   \n3,4\n") == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_embedded_newline_kept(self) -> None:
        """A quoted line break is part of the value."""
        assert parse('a,b\n1,"line one\nline two"\n2,x') == [
            {"a": "1", "b": "line one\nline two"},
            {"a": "2", "b": "x"},
        ]

    def test_split_records_reports_start_lines(self) -> None:
        """Records report the physical line they start on."""
        records = split_records('h\n"x\ny"\nz')

        assert records == [(1, "h"), (2, '"x\ny"'), (4, "z")]

    def test_row_length_mismatch(self) -> None:
        """A record with the wrong field count names its line."""
        with pytest.raises(TabularParseError) as exc_info:
            parse("a,b\n1,2\n3\n", source="orders.csv")

        err = exc_info.value
        assert err.line_number == 3
        assert err.source == "orders.csv"
        assert "expected 2 fields, got 1" in str(err)
        assert "orders.csv at line 3" in str(err)

    def test_line_number_counts_embedded_newlines(self) -> None:
        """Line numbers are physical, so quoted breaks push them forward."""
        with pytest.raises(TabularParseError) as exc_info:
            parse('a,b\n1,"x\ny"\n1,2,3')

        assert exc_info.value.line_number == 4

    def test_unterminated_quote(self) -> None:
        """An open quote at end of input is an error."""
        with pytest.raises(TabularParseError, match="Unterminated"):
            parse('a,b\n1,"never closed\n')


class TestRoundTrip:
    """Serialize then parse returns the original text values."""

    def test_awkward_free_text(self) -> None:
        """Faker text with delimiters, quotes and line breaks survives."""
        fake = Faker()
        Faker.seed(1234)
        rows = [
            {
                "id": str(i),
                "address": fake.address(),
                "quote": f'{fake.name()} said "{fake.sentence()}", then left',
                "note": fake.text(max_nb_chars=80).replace("\n", "\r\n"),
            }
            for i in range(50)
        ]

        assert parse(serialize(rows)) == rows

    def test_single_column_blank_values(self) -> None:
        """Blank values in a one-column table are quoted and survive parsing."""
        rows = [{"note": ""}, {"note": "  "}, {"note": "x"}]
        text = serialize(rows)

        assert text == 'note\n""\n"  "\nx'
        assert parse(text) == rows

    def test_file_round_trip_keeps_carriage_returns(self, tmp_path: Path) -> None:
        """Files are written and read without newline translation."""
        rows = [{"id": "1", "note": "a\r\nb"}, {"id": "2", "note": "plain"}]
        path = write_rows(tmp_path / "notes.csv", rows)

        assert path.read_bytes() == b'id,note\n1,"a\r\nb"\n2,plain'
        assert read_rows(path) == rows

    def test_read_rows_error_names_file(self, tmp_path: Path) -> None:
        """Parse errors from files carry the file path."""
        path = tmp_path / "bad.csv"
        path.write_bytes(b"a,b\n1,2,3\n")

        with pytest.raises(TabularParseError) as exc_info:
            read_rows(path)

        assert exc_info.value.source == str(path)
        assert exc_info.value.line_number == 2
