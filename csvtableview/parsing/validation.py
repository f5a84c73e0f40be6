#!/usr/bin/env python3
"""
Structural Validator - decide whether a parsed table is worth showing

Checks header presence, data presence and column-count consistency. The
table is only read, never modified.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .records import ParsedTable

# Share of rows allowed to have a field count different from the header
INCONSISTENT_ROW_TOLERANCE = 0.1


class ValidationReason(Enum):
    """Why a table was rejected"""
    NO_HEADERS = "no headers"
    NO_DATA_ROWS = "no data rows"
    INCONSISTENT_COLUMNS = "inconsistent columns"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a ParsedTable"""
    valid: bool
    reason: Optional[ValidationReason] = None
    message: Optional[str] = None


def validate_table(table: ParsedTable) -> ValidationOutcome:
    """Validate the structure of a parsed table"""
    if not table.headers:
        return ValidationOutcome(
            valid=False,
            reason=ValidationReason.NO_HEADERS,
            message="CSV file appears to be empty or has no headers",
        )

    if not table.rows:
        return ValidationOutcome(
            valid=False,
            reason=ValidationReason.NO_DATA_ROWS,
            message="CSV file has headers but no data rows",
        )

    expected_columns = table.column_count
    inconsistent = sum(1 for row in table.rows if len(row) != expected_columns)
    if inconsistent > len(table.rows) * INCONSISTENT_ROW_TOLERANCE:
        return ValidationOutcome(
            valid=False,
            reason=ValidationReason.INCONSISTENT_COLUMNS,
            message=(
                "Many rows have inconsistent column counts. "
                f"Expected {expected_columns} columns."
            ),
        )

    return ValidationOutcome(valid=True)
