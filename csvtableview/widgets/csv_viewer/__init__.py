#!/usr/bin/env python3
"""
CSV Viewer Package - Read-only preview of CSV and TSV files

Tabbed preview window, per-file preview panels with incremental loading,
and the search/filter controls that work over the rows loaded so far.
"""

from .row_filter import (
    ColumnFilter,
    RowFilter
)

from .load_state import LoadState

from .preview_registry import PreviewRegistry

from .load_worker import TableLoadWorker

from .csv_filter_widget import CsvFilterWidget

from .csv_viewer_widget import (
    CsvPreviewPanel,
    CsvTableWidget
)

from .preview_window import CsvPreviewWindow

__all__ = [
    # Core components
    'CsvPreviewWindow',
    'CsvPreviewPanel',
    'CsvTableWidget',
    'PreviewRegistry',
    'LoadState',
    'TableLoadWorker',

    # Filter components
    'CsvFilterWidget',
    'ColumnFilter',
    'RowFilter'
]
