"""
Parsing - delimited-text parsing and incremental-load pipeline

Delimiter detection, quote-aware record splitting, row-count estimation,
structural validation and the initial-load / load-more operations.
"""

from .delimiter import (
    AUTO,
    CANDIDATES,
    Delimiter,
    DelimiterKind,
    detect_delimiter,
    get_sample,
)
from .tokenizer import Record, count_delimiters, iter_records
from .records import ParseError, ParseErrorKind, ParsedTable, parse_table
from .estimate import estimate_row_count
from .validation import ValidationOutcome, ValidationReason, validate_table
from .pipeline import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ROWS,
    EmptyInputError,
    InitialLoadResult,
    LoadMoreResult,
    TableLoadError,
    ValidationFailedError,
    initial_load,
    load_more,
)
from .protocol import handle_initial_load, handle_load_more, is_error_response

__all__ = [
    "AUTO",
    "CANDIDATES",
    "Delimiter",
    "DelimiterKind",
    "detect_delimiter",
    "get_sample",
    "Record",
    "count_delimiters",
    "iter_records",
    "ParseError",
    "ParseErrorKind",
    "ParsedTable",
    "parse_table",
    "estimate_row_count",
    "ValidationOutcome",
    "ValidationReason",
    "validate_table",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_ROWS",
    "EmptyInputError",
    "InitialLoadResult",
    "LoadMoreResult",
    "TableLoadError",
    "ValidationFailedError",
    "initial_load",
    "load_more",
    "handle_initial_load",
    "handle_load_more",
    "is_error_response",
]
