#!/usr/bin/env python3
"""
Load pipeline - initial load and incremental "load more" over resident text

Both operations are pure functions of their arguments. Nothing is cached
between calls: every load-more detects the delimiter again and re-parses from
the start of the text up to the new row cap.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .delimiter import AUTO, Delimiter, detect_delimiter, get_sample
from .estimate import estimate_row_count
from .records import ParseError, parse_table
from .validation import ValidationOutcome, validate_table

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 10000
DEFAULT_BATCH_SIZE = 5000

DelimiterSetting = Union[str, Delimiter]


class TableLoadError(Exception):
    """Base exception for load failures that produce no table."""

    pass


class EmptyInputError(TableLoadError):
    """Raised when the text is empty or whitespace only."""

    def __init__(self, message: str = "File is empty"):
        super().__init__(message)


class ValidationFailedError(TableLoadError):
    """Raised when the structural validator rejects the parsed table."""

    def __init__(self, outcome: ValidationOutcome):
        super().__init__(outcome.message or "Invalid CSV format")
        self.outcome = outcome


@dataclass
class InitialLoadResult:
    """Everything the viewer needs to show the first page of a file"""
    headers: List[str]
    rows: List[List[str]]
    delimiter: Delimiter
    estimated_total: int
    has_more: bool
    validation: ValidationOutcome
    parse_errors: List[ParseError] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_response(self) -> Dict[str, Any]:
        return {
            'headers': self.headers,
            'rows': self.rows,
            'totalRows': self.row_count,
            'estimatedTotal': self.estimated_total,
            'delimiterDisplayName': self.delimiter.display_name,
            'hasMore': self.has_more,
        }


@dataclass
class LoadMoreResult:
    """Rows exposed by raising the row cap"""
    new_rows: List[List[str]]
    has_more: bool

    def to_response(self) -> Dict[str, Any]:
        return {
            'newRows': self.new_rows,
            'hasMore': self.has_more,
        }


def _ensure_text(text: str) -> None:
    if not text or not text.strip():
        raise EmptyInputError()


def resolve_delimiter(text: str, configured_delimiter: DelimiterSetting = AUTO) -> Delimiter:
    """Detect the delimiter from the first lines of text, or use the configured one"""
    return detect_delimiter(get_sample(text), configured_delimiter)


def initial_load(text: str, configured_delimiter: DelimiterSetting = AUTO,
                 max_rows: int = DEFAULT_MAX_ROWS) -> InitialLoadResult:
    """Parse the first page of text.

    Raises:
        EmptyInputError: text is empty or whitespace only
        ValidationFailedError: the parsed table is structurally unusable
    """
    if max_rows < 1:
        raise ValueError(f"max_rows must be positive, got {max_rows}")
    _ensure_text(text)

    delimiter = resolve_delimiter(text, configured_delimiter)
    table = parse_table(text, delimiter, max_rows)

    validation = validate_table(table)
    if not validation.valid:
        logger.info("Rejected table: %s", validation.message)
        raise ValidationFailedError(validation)

    if table.parse_errors:
        logger.debug("Parsed with %d anomalies", len(table.parse_errors))

    return InitialLoadResult(
        headers=table.headers,
        rows=table.rows,
        delimiter=delimiter,
        estimated_total=estimate_row_count(text),
        has_more=table.row_count >= max_rows,
        validation=validation,
        parse_errors=table.parse_errors,
    )


def load_more(text: str, configured_delimiter: DelimiterSetting = AUTO,
              current_row_count: int = 0,
              batch_size: int = DEFAULT_BATCH_SIZE) -> LoadMoreResult:
    """Return the rows after current_row_count, at most batch_size of them.

    Raises:
        EmptyInputError: text is empty or whitespace only
    """
    if current_row_count < 0:
        raise ValueError(f"current_row_count must not be negative, got {current_row_count}")
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    _ensure_text(text)

    delimiter = resolve_delimiter(text, configured_delimiter)
    cap = current_row_count + batch_size
    table = parse_table(text, delimiter, cap)

    new_rows = table.rows[current_row_count:]
    logger.debug("Loaded %d more rows (cap %d)", len(new_rows), cap)
    return LoadMoreResult(new_rows=new_rows, has_more=table.row_count >= cap)
