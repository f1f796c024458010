"""Comma-delimited text serializer and parser.

The interchange format between the generate and load steps:

- first record is the header, one data record per row after it
- a value containing the delimiter, a quote, CR or LF is wrapped in quotes
  with inner quotes doubled
- ``None`` is written as an empty field; the parser returns empty fields as
  ``""`` and the load transforms decide what empty means per column
- records are separated by ``\\n``; ``\\r\\n`` is accepted on read
- a line break inside a quoted span is part of the value

Example:
    >>> text = serialize([{"id": "1", "note": 'says "hi", twice'}])
    >>> text
    'id,note\\n1,"says ""hi"", twice"'
    >>> parse(text)
    [{'id': '1', 'note': 'says "hi", twice'}]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path

import structlog

from shopgen.errors import TabularParseError

logger = structlog.get_logger(__name__)

DELIMITER = ","
QUOTE = '"'
RECORD_SEPARATOR = "\n"
_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")


def escape_value(value: object) -> str:
    """Render one field value.

    Args:
        value: Field value; ``None`` renders as an empty field

    Returns:
        The value, quoted when it contains a delimiter, quote or line break
    """
    if value is None:
        return ""
    text = str(value)
    if any(marker in text for marker in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def serialize(
    rows: Iterable[Mapping[str, object]],
    fieldnames: Sequence[str] | None = None,
) -> str:
    """Serialize uniform rows to delimited text.

    Args:
        rows: Records sharing the same field set
        fieldnames: Column order; defaults to the keys of the first row

    Returns:
        Header line plus one line per row, without a trailing newline.
        Empty input without explicit field names yields ``""``.

    Raises:
        ValueError: If a row lacks one of the header fields
    """
    iterator = iter(rows)
    first = next(iterator, None)
    if fieldnames is None:
        if first is None:
            return ""
        fieldnames = list(first.keys())

    lines = [_join_record(fieldnames)]
    if first is not None:
        for index, row in enumerate(_chain(first, iterator), start=1):
            missing = [name for name in fieldnames if name not in row]
            if missing:
                raise ValueError(f"row {index} is missing fields: {', '.join(missing)}")
            lines.append(_join_record([row[name] for name in fieldnames]))
    return RECORD_SEPARATOR.join(lines)


def _join_record(values: Sequence[object]) -> str:
    record = DELIMITER.join(escape_value(value) for value in values)
    # A blank record is skipped on parse, so a lone blank field keeps its quotes
    if len(values) == 1 and not record.strip():
        return QUOTE + record + QUOTE
    return record


def _chain(
    first: Mapping[str, object], rest: Iterator[Mapping[str, object]]
) -> Iterator[Mapping[str, object]]:
    yield first
    yield from rest


def write_rows(
    path: Path,
    rows: Iterable[Mapping[str, object]],
    fieldnames: Sequence[str] | None = None,
) -> Path:
    """Serialize rows and write them to ``path`` as UTF-8.

    Returns:
        The written path
    """
    text = serialize(rows, fieldnames)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)
    logger.debug("file_written", path=str(path), bytes=len(text.encode("utf-8")))
    return path


def parse_line(line: str) -> list[str]:
    """Split one record into fields with a single quote-aware pass.

    Inside quotes a doubled quote is a literal quote and any other quote ends
    the quoted span; outside quotes the delimiter ends the current field.
    Characters (line breaks included) are otherwise copied verbatim.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if in_quotes:
            if char == QUOTE:
                if i + 1 < length and line[i + 1] == QUOTE:
                    current.append(QUOTE)
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == QUOTE:
            in_quotes = True
        elif char == DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current))
    return fields


def split_records(text: str, source: str | Path = "<string>") -> list[tuple[int, str]]:
    """Split text into logical records.

    A record ends at an unquoted line break. Trailing ``\\r`` before the break
    is dropped, and records that are blank (whitespace only) are skipped.

    Args:
        text: Full file contents
        source: Label used in error messages

    Returns:
        (line_number, record_text) pairs, where line_number is the 1-based
        physical line the record starts on

    Raises:
        TabularParseError: If a quoted span is still open at end of input
    """
    records: list[tuple[int, str]] = []
    current: list[str] = []
    in_quotes = False
    line_number = 1
    start_line = 1
    for char in text:
        if char == QUOTE:
            # A doubled quote toggles twice, leaving the state unchanged.
            in_quotes = not in_quotes
        if char == "\n" and not in_quotes:
            _append_record(records, start_line, current)
            current = []
            line_number += 1
            start_line = line_number
            continue
        if char == "\n":
            line_number += 1
        current.append(char)
    if in_quotes:
        raise TabularParseError("Unterminated quoted field", source=source, line_number=start_line)
    _append_record(records, start_line, current)
    return records


def _append_record(records: list[tuple[int, str]], line_number: int, chars: list[str]) -> None:
    record = "".join(chars)
    if record.endswith("\r"):
        record = record[:-1]
    if record.strip():
        records.append((line_number, record))


def parse(text: str, source: str | Path = "<string>") -> list[dict[str, str]]:
    """Parse delimited text into header-keyed rows.

    Args:
        text: Full file contents
        source: Label used in error messages (usually the file path)

    Returns:
        One dict per data record, keyed by header name. Empty text yields
        an empty list.

    Raises:
        TabularParseError: If a record's field count differs from the header's
    """
    records = split_records(text, source)
    if not records:
        return []

    _, header_text = records[0]
    headers = parse_line(header_text)
    rows: list[dict[str, str]] = []
    for line_number, record in records[1:]:
        values = parse_line(record)
        if len(values) != len(headers):
            raise TabularParseError(
                f"Row length mismatch (expected {len(headers)} fields, got {len(values)})",
                source=source,
                line_number=line_number,
            )
        rows.append(dict(zip(headers, values, strict=True)))
    return rows


def read_rows(path: Path) -> list[dict[str, str]]:
    """Read and parse a UTF-8 delimited text file."""
    # newline="" keeps carriage returns inside quoted values intact
    with path.open(encoding="utf-8", newline="") as handle:
        rows = parse(handle.read(), source=path)
    logger.debug("file_parsed", path=str(path), rows=len(rows))
    return rows
