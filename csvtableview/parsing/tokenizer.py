#!/usr/bin/env python3
"""
Quote-aware tokenizer - the single "split respecting quotes" scanner

Both delimiter detection and record parsing go through this module, so the
two can never disagree about what is inside a quoted span.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Pattern

QUOTE_CHAR = '"'
LINE_BREAK_CHARS = "\r\n"


@dataclass
class QuoteAnomaly:
    """A malformed quote found while splitting a record"""
    code: str
    message: str


@dataclass
class Record:
    """One record as split by the tokenizer, blank or not"""
    fields: List[str] = field(default_factory=list)
    anomalies: List[QuoteAnomaly] = field(default_factory=list)

    def is_blank(self) -> bool:
        """True when the record has no visible content once joined"""
        return "".join(self.fields).strip() == ""


def _boundary_pattern(delimiter: str) -> Pattern:
    return re.compile("[" + re.escape(delimiter) + LINE_BREAK_CHARS + "]")


def _read_quoted(text: str, pos: int, anomalies: List[QuoteAnomaly]) -> tuple:
    """Read a quoted field body starting just after the opening quote.

    Returns (value, position after the closing quote, closed).
    """
    length = len(text)
    chunks: List[str] = []
    while pos < length:
        quote = text.find(QUOTE_CHAR, pos)
        if quote == -1:
            break
        chunks.append(text[pos:quote])
        if quote + 1 < length and text[quote + 1] == QUOTE_CHAR:
            chunks.append(QUOTE_CHAR)
            pos = quote + 2
            continue
        return "".join(chunks), quote + 1, True

    chunks.append(text[pos:])
    anomalies.append(QuoteAnomaly("MissingQuotes", "Quoted field unterminated"))
    return "".join(chunks), length, False


def iter_records(text: str, delimiter: str) -> Iterator[Record]:
    """Lazily split text into records.

    A field is quoted only when it starts with a quote. Inside a quoted field
    the delimiter and line breaks are literal and a doubled quote is one
    literal quote. Records end at \\r\\n, \\n or \\r outside quoted fields.
    """
    boundary = _boundary_pattern(delimiter)
    length = len(text)
    pos = 0

    while pos < length:
        record = Record()
        while True:
            if pos < length and text[pos] == QUOTE_CHAR:
                value, pos, closed = _read_quoted(text, pos + 1, record.anomalies)
                if closed and pos < length and text[pos] != delimiter and text[pos] not in LINE_BREAK_CHARS:
                    record.anomalies.append(QuoteAnomaly(
                        "InvalidQuotes", "Trailing quote on quoted field is malformed"
                    ))
                    match = boundary.search(text, pos)
                    end = match.start() if match else length
                    value += text[pos:end]
                    pos = end
            else:
                match = boundary.search(text, pos)
                end = match.start() if match else length
                value = text[pos:end]
                pos = end
            record.fields.append(value)

            if pos < length and text[pos] == delimiter:
                pos += 1
                continue
            break

        # Swallow the record terminator
        if pos < length:
            if text.startswith("\r\n", pos):
                pos += 2
            else:
                pos += 1
        yield record


def count_delimiters(line: str, delimiter: str) -> int:
    """Count field separators in one line, ignoring those inside quoted spans"""
    record = next(iter_records(line, delimiter), None)
    if record is None:
        return 0
    return len(record.fields) - 1
