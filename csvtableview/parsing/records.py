#!/usr/bin/env python3
"""
Record Parser - split delimited text into a header row and data rows

Parsing is best-effort: malformed quoting and ragged rows are annotated in
``ParsedTable.parse_errors`` and never abort the parse.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .delimiter import Delimiter
from .tokenizer import iter_records


class ParseErrorKind(Enum):
    """Category of a parse anomaly"""
    QUOTES = "quotes"
    FIELDS = "fields"


@dataclass
class ParseError:
    """A non-fatal anomaly found while parsing.

    ``row`` is the 0-based index of the record in parse order, so the header
    record is row 0 and the first data row is row 1.
    """
    kind: ParseErrorKind
    code: str
    message: str
    row: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'type': self.kind.value,
            'code': self.code,
            'message': self.message,
            'row': self.row,
        }


@dataclass
class ParsedTable:
    """Header, data rows and anomalies produced by one parse"""
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    parse_errors: List[ParseError] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)


def _field_count_error(expected: int, parsed: int, row: int) -> ParseError:
    if parsed < expected:
        code, label = "TooFewFields", "Too few fields"
    else:
        code, label = "TooManyFields", "Too many fields"
    return ParseError(
        kind=ParseErrorKind.FIELDS,
        code=code,
        message=f"{label}: expected {expected} fields but parsed {parsed}",
        row=row,
    )


def parse_table(text: str, delimiter: Union[str, Delimiter],
                max_rows: Optional[int] = None) -> ParsedTable:
    """Parse text into a ParsedTable.

    Args:
        text: Full file contents
        delimiter: Field separator
        max_rows: Row cap. ``None`` parses everything, ``0`` stops after the
            header, ``n`` stops after the header plus n data rows.
    """
    if max_rows is not None and max_rows < 0:
        raise ValueError(f"max_rows must be zero or positive, got {max_rows}")

    delimiter_char = delimiter.char if isinstance(delimiter, Delimiter) else delimiter
    table = ParsedTable()
    record_limit = None if max_rows is None else max_rows + 1
    produced = 0

    for record in iter_records(text, delimiter_char):
        if record.is_blank():
            continue

        for anomaly in record.anomalies:
            table.parse_errors.append(ParseError(
                kind=ParseErrorKind.QUOTES,
                code=anomaly.code,
                message=anomaly.message,
                row=produced,
            ))

        if produced == 0:
            table.headers = record.fields
        else:
            if len(record.fields) != len(table.headers):
                table.parse_errors.append(
                    _field_count_error(len(table.headers), len(record.fields), produced)
                )
            table.rows.append(record.fields)

        produced += 1
        if record_limit is not None and produced >= record_limit:
            break

    return table
