#!/usr/bin/env python3
"""
Tests for the viewer's non-Qt bookkeeping: row filtering, the preview
registry and the load state behind the stats line

Usage:
    python -m unittest test_viewer_state
"""

import sys
import unittest
from pathlib import Path
from unittest.mock import Mock

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent))

from csvtableview.parsing.pipeline import initial_load, load_more
from csvtableview.parsing.records import ParseError, ParseErrorKind
from csvtableview.widgets.csv_viewer.load_state import LoadState, parse_warning_text
from csvtableview.widgets.csv_viewer.preview_registry import PreviewRegistry
from csvtableview.widgets.csv_viewer.row_filter import (
    ColumnFilter,
    RowFilter,
    cell_matches_search,
    row_matches_search,
)

ROWS = [
    ["Plasma Rifle", "5", "Armory"],
    ["Energy Cell", "150", "Storage"],
    ["Med Kit", "30", "Medical Bay"],
    ["Scanner", "8"],
]


class TestRowFilter(unittest.TestCase):
    """Search and column filters over loaded rows."""

    def setUp(self):
        self.row_filter = RowFilter()
        self.row_filter.set_columns(["item", "quantity", ""])

    def test_no_filters_matches_all(self):
        self.assertFalse(self.row_filter.has_active_filters())
        self.assertEqual(self.row_filter.matching_indices(ROWS), [0, 1, 2, 3])

    def test_blank_header_gets_placeholder_name(self):
        self.assertEqual(self.row_filter.column_filters[2].column_name, "Column 3")

    def test_global_search_case_insensitive(self):
        self.row_filter.set_search_text("  med ")
        self.assertEqual(self.row_filter.search_text, "med")
        self.assertEqual(self.row_filter.matching_indices(ROWS), [2])

    def test_global_search_case_sensitive(self):
        self.row_filter.set_search_text("med")
        self.row_filter.case_sensitive = True
        self.assertEqual(self.row_filter.matching_indices(ROWS), [])

    def test_column_filter_types(self):
        col_filter = self.row_filter.column_filters[0]
        col_filter.value = "s"
        col_filter.filter_type = "starts_with"
        self.assertEqual(self.row_filter.matching_indices(ROWS), [3])
        col_filter.filter_type = "ends_with"
        self.assertEqual(self.row_filter.matching_indices(ROWS), [])
        col_filter.filter_type = "equals"
        col_filter.value = "med kit"
        self.assertEqual(self.row_filter.matching_indices(ROWS), [2])

    def test_short_row_treated_as_empty_cell(self):
        col_filter = self.row_filter.column_filters[2]
        col_filter.value = "a"
        self.assertEqual(self.row_filter.matching_indices(ROWS), [0, 1, 2])

    def test_disabled_filter_is_ignored(self):
        col_filter = self.row_filter.column_filters[1]
        col_filter.value = "150"
        self.assertEqual(self.row_filter.active_filter_names(), ["quantity"])
        col_filter.enabled = False
        self.assertFalse(self.row_filter.has_active_filters())

    def test_clear(self):
        self.row_filter.set_search_text("x")
        self.row_filter.column_filters[0].value = "y"
        self.row_filter.clear()
        self.assertFalse(self.row_filter.has_active_filters())
        self.assertEqual(self.row_filter.matching_indices(ROWS), [0, 1, 2, 3])

    def test_cell_matches_search(self):
        self.assertTrue(cell_matches_search("Medical Bay", "bay"))
        self.assertFalse(cell_matches_search("Medical Bay", "bay", case_sensitive=True))
        self.assertFalse(cell_matches_search("Medical Bay", ""))
        self.assertFalse(cell_matches_search("", "bay"))

    def test_helpers(self):
        self.assertTrue(row_matches_search(["abc"], ""))
        self.assertTrue(ColumnFilter(0, "a").matches(["anything"]))


class TestPreviewRegistry(unittest.TestCase):
    """Create-or-attach bookkeeping."""

    def test_create_then_attach(self):
        registry = PreviewRegistry()
        factory = Mock(side_effect=lambda: object())
        first, created = registry.create_or_show("doc", factory)
        self.assertTrue(created)
        second, created = registry.create_or_show("doc", factory)
        self.assertFalse(created)
        self.assertIs(first, second)
        self.assertEqual(factory.call_count, 1)
        self.assertIn("doc", registry)
        self.assertEqual(len(registry), 1)

    def test_identity_for_resolves_paths(self):
        self.assertEqual(PreviewRegistry.identity_for("a/../b.csv"),
                         PreviewRegistry.identity_for("b.csv"))

    def test_remove_and_reverse_lookup(self):
        registry = PreviewRegistry()
        handle, _ = registry.create_or_show("doc", object)
        self.assertEqual(registry.identity_of(handle), "doc")
        self.assertIs(registry.remove("doc"), handle)
        self.assertIsNone(registry.get("doc"))
        self.assertIsNone(registry.identity_of(handle))
        self.assertIsNone(registry.remove("doc"))

    def test_close_all(self):
        registry = PreviewRegistry()
        registry.create_or_show("a", object)
        registry.create_or_show("b", object)
        closer = Mock()
        self.assertEqual(registry.close_all(closer), 2)
        self.assertEqual(closer.call_count, 2)
        self.assertEqual(registry.identities(), [])
        self.assertNotIn("a", registry)


class TestLoadState(unittest.TestCase):
    """Rows accumulated across initial load and load-more."""

    TEXT = "id,value\n" + "\n".join(f"{i},v{i}" for i in range(1, 8)) + "\n"

    def test_initial_then_more(self):
        state = LoadState()
        state.apply_initial(initial_load(self.TEXT, max_rows=3), file_size=2048)
        self.assertEqual(state.row_count, 3)
        self.assertEqual(state.column_count, 2)
        self.assertTrue(state.has_more)
        self.assertEqual(state.delimiter_name, "Comma")

        state.apply_more(load_more(self.TEXT, current_row_count=state.row_count, batch_size=10))
        self.assertEqual(state.row_count, 7)
        self.assertFalse(state.has_more)
        self.assertEqual(state.rows[-1], ["7", "v7"])

    def test_stats_text(self):
        state = LoadState()
        state.apply_initial(initial_load(self.TEXT, max_rows=3), file_size=2048)
        self.assertEqual(
            state.stats_text(3, filtered=False),
            "3 rows • 8+ total • 2 columns • 2.0 KB • Delimiter: Comma"
        )
        self.assertEqual(
            state.stats_text(1, filtered=True),
            "1 rows (filtered from 3) • 8+ total • 2 columns • 2.0 KB • Delimiter: Comma"
        )

    def test_stats_without_more_or_size(self):
        state = LoadState()
        state.apply_initial(initial_load(self.TEXT, max_rows=100))
        self.assertEqual(state.stats_text(7, filtered=False),
                         "7 rows • 2 columns • Delimiter: Comma")

    def test_parse_warning_text_counts_distinct_rows(self):
        errors = [
            ParseError(ParseErrorKind.QUOTES, "InvalidQuotes", "bad quote", row=0),
            ParseError(ParseErrorKind.QUOTES, "MissingQuotes", "open quote", row=3),
            ParseError(ParseErrorKind.FIELDS, "TooFewFields", "short", row=3),
        ]
        self.assertEqual(parse_warning_text(errors), "3 parse warnings on 2 rows")
        self.assertEqual(parse_warning_text(errors[:1]), "1 parse warning on 1 row")
        self.assertEqual(parse_warning_text([]), "")

    def test_reset(self):
        state = LoadState()
        state.apply_initial(initial_load(self.TEXT, max_rows=3))
        state.reset()
        self.assertEqual(state.row_count, 0)
        self.assertFalse(state.has_more)


if __name__ == "__main__":
    unittest.main()
