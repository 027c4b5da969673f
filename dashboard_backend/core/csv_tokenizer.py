"""Quote-aware CSV tokenizer for uploaded workflow sheets.

Rows are split first, so that quoted fields may span several physical lines,
and every row is then split into fields. Both passes share the same quoting
rules: ``"`` toggles the quoted state and ``""`` inside quotes is a literal
quote character.
"""
from __future__ import annotations

import logging
from itertools import chain
from typing import Iterator

from dashboard_backend.core.records import keyed_records
from dashboard_backend.core.validation import CSVParseError
from dashboard_backend.domain import IDENTITY_KEY, Record

logger = logging.getLogger(__name__)

QUOTE = '"'
SEPARATOR = ","
WRAPPING_QUOTES = ('"', "'")


def iter_rows(text: str) -> Iterator[str]:
    """Yield raw row strings, quotes left in place, skipping blank rows."""

    current: list[str] = []
    in_quotes = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == QUOTE:
            current.append(char)
            if in_quotes and index + 1 < length and text[index + 1] == QUOTE:
                current.append(QUOTE)
                index += 1
            else:
                in_quotes = not in_quotes
        elif char in "\r\n" and not in_quotes:
            row = "".join(current)
            if row.strip():
                yield row
            current = []
            if char == "\r" and index + 1 < length and text[index + 1] == "\n":
                index += 1
        else:
            current.append(char)
        index += 1

    row = "".join(current)
    if row.strip():
        yield row


def _finish_field(chars: list[tuple[str, bool]]) -> str:
    # whitespace inside quotes is content, only unquoted padding is trimmed
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    value = "".join(char for char, _ in chars[start:end])
    if len(value) >= 2 and value[0] == value[-1] and value[0] in WRAPPING_QUOTES:
        value = value[1:-1]
    return value


def split_fields(row: str) -> list[str]:
    """Split one raw row into field values."""

    fields: list[str] = []
    current: list[tuple[str, bool]] = []
    in_quotes = False
    index = 0
    length = len(row)
    while index < length:
        char = row[index]
        if char == QUOTE:
            if in_quotes and index + 1 < length and row[index + 1] == QUOTE:
                current.append((QUOTE, True))
                index += 1
            else:
                in_quotes = not in_quotes
        elif char == SEPARATOR and not in_quotes:
            fields.append(_finish_field(current))
            current = []
        else:
            current.append((char, in_quotes))
        index += 1
    fields.append(_finish_field(current))
    return fields


def parse_rows(text: str) -> list[list[str]]:
    return [split_fields(row) for row in iter_rows(text)]


def parse_csv_records(text: str, identity_key: str = IDENTITY_KEY) -> list[Record]:
    """Parse CSV text into header-keyed records that carry an identity key.

    The first row supplies the field names. Short rows are padded with empty
    strings and surplus values are ignored. Raises :class:`CSVParseError` when
    the text has no header row or no data rows.
    """

    rows = iter_rows(text)
    header_row = next(rows, None)
    first_row = next(rows, None)
    if header_row is None or first_row is None:
        raise CSVParseError("CSV file is empty or invalid")

    headers = split_fields(header_row)
    records: list[Record] = []
    for row in chain([first_row], rows):
        values = split_fields(row)
        records.append(
            {header: values[index] if index < len(values) else "" for index, header in enumerate(headers)}
        )

    keyed = keyed_records(records, identity_key)
    logger.info(
        "Parsed %d CSV data rows with %d columns, %d carry %r",
        len(records),
        len(headers),
        len(keyed),
        identity_key,
    )
    return keyed
