#!/usr/bin/env python3
"""
Row Filter - search and column filtering over loaded rows

Pure logic behind the filter widget. Rows are lists of cell text; filtering
only ever looks at rows that have already been loaded.
"""

from typing import Dict, List, Sequence

FILTER_TYPES = ("contains", "equals", "starts_with", "ends_with")


class ColumnFilter:
    """Represents a filter for a specific column"""

    def __init__(self, column_index: int, column_name: str, filter_type: str = "contains"):
        self.column_index = column_index
        self.column_name = column_name
        self.filter_type = filter_type
        self.value = ""
        self.case_sensitive = False
        self.enabled = True

    def is_active(self) -> bool:
        return self.enabled and bool(self.value)

    def matches(self, row: Sequence[str]) -> bool:
        """Check if a row matches this filter"""
        if not self.is_active():
            return True

        cell_value = row[self.column_index] if self.column_index < len(row) else ""
        filter_value = self.value

        if not self.case_sensitive:
            cell_value = cell_value.lower()
            filter_value = filter_value.lower()

        if self.filter_type == "contains":
            return filter_value in cell_value
        elif self.filter_type == "equals":
            return cell_value == filter_value
        elif self.filter_type == "starts_with":
            return cell_value.startswith(filter_value)
        elif self.filter_type == "ends_with":
            return cell_value.endswith(filter_value)

        return True


def cell_matches_search(cell: str, term: str, case_sensitive: bool = False) -> bool:
    """True if one cell contains a non-empty search term"""
    if not term or not cell:
        return False
    if not case_sensitive:
        return term.lower() in cell.lower()
    return term in cell


def row_matches_search(row: Sequence[str], term: str, case_sensitive: bool = False) -> bool:
    """True if any cell of row contains term"""
    if not term:
        return True
    return any(cell_matches_search(cell, term, case_sensitive) for cell in row)


class RowFilter:
    """Global search plus per-column filters"""

    def __init__(self):
        self.search_text = ""
        self.case_sensitive = False
        self.column_filters: Dict[int, ColumnFilter] = {}

    def set_search_text(self, text: str):
        self.search_text = text.strip()

    def set_columns(self, headers: Sequence[str]):
        """Reset column filters for a new set of headers"""
        self.column_filters = {
            index: ColumnFilter(index, name or f"Column {index + 1}")
            for index, name in enumerate(headers)
        }

    def clear(self):
        self.search_text = ""
        self.case_sensitive = False
        for col_filter in self.column_filters.values():
            col_filter.value = ""
            col_filter.filter_type = "contains"
            col_filter.enabled = True

    def has_active_filters(self) -> bool:
        if self.search_text:
            return True
        return any(f.is_active() for f in self.column_filters.values())

    def active_filter_names(self) -> List[str]:
        names = ["Global search"] if self.search_text else []
        names.extend(f.column_name for f in self.column_filters.values() if f.is_active())
        return names

    def matches(self, row: Sequence[str]) -> bool:
        if not row_matches_search(row, self.search_text, self.case_sensitive):
            return False
        return all(f.matches(row) for f in self.column_filters.values())

    def matching_indices(self, rows: Sequence[Sequence[str]]) -> List[int]:
        """Indices of rows that pass every active filter"""
        if not self.has_active_filters():
            return list(range(len(rows)))
        return [i for i, row in enumerate(rows) if self.matches(row)]
