#!/usr/bin/env python3
"""
Load State - the viewer's bookkeeping across initial load and load-more calls

The parsing pipeline is stateless; this is where the rows delivered so far
live, and where the next load-more request gets its row count from.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ...parsing.pipeline import InitialLoadResult, LoadMoreResult
from ...parsing.records import ParseError
from ...utils.file_loader import format_file_size


@dataclass
class LoadState:
    """Rows and metadata delivered to one preview panel"""
    file_size: int = 0
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    estimated_total: int = 0
    delimiter_name: str = ""
    has_more: bool = False

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def reset(self):
        self.headers = []
        self.rows = []
        self.estimated_total = 0
        self.delimiter_name = ""
        self.has_more = False

    def apply_initial(self, result: InitialLoadResult, file_size: int = 0):
        """Replace everything with the first page of a (re)load"""
        self.file_size = file_size
        self.headers = list(result.headers)
        self.rows = list(result.rows)
        self.estimated_total = result.estimated_total
        self.delimiter_name = result.delimiter.display_name
        self.has_more = result.has_more

    def apply_more(self, result: LoadMoreResult):
        """Append the rows exposed by a load-more call"""
        self.rows.extend(result.new_rows)
        self.has_more = result.has_more

    def stats_text(self, shown_rows: int, filtered: bool) -> str:
        """Status line, e.g. '12 rows (filtered from 100) • 3 columns • Delimiter: Comma'"""
        search_info = f" (filtered from {self.row_count})" if filtered else ""
        more_info = f" • {self.estimated_total}+ total" if self.has_more else ""
        size_info = f" • {format_file_size(self.file_size)}" if self.file_size else ""
        return (
            f"{shown_rows} rows{search_info}{more_info} • {self.column_count} columns"
            f"{size_info} • Delimiter: {self.delimiter_name}"
        )


def parse_warning_text(parse_errors: Sequence[ParseError]) -> str:
    """e.g. '3 parse warnings on 2 rows'; the header record counts as a row"""
    if not parse_errors:
        return ""
    warnings = len(parse_errors)
    rows = len({error.row for error in parse_errors})
    return (
        f"{warnings} parse warning{'s' if warnings != 1 else ''} "
        f"on {rows} row{'s' if rows != 1 else ''}"
    )
