#!/usr/bin/env python3
"""
CSV Preview Panel - read-only table view of one delimited text file

Shows the first page of rows, loads more on request, and searches/filters
over whatever has been loaded so far. All parsing runs in TableLoadWorker
threads; the panel only keeps the LoadState and draws it.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QPushButton, QMessageBox, QLabel, QHeaderView, QLineEdit, QSplitter,
    QAbstractItemView, QMenu, QApplication
)
from PyQt6.QtCore import Qt, pyqtSignal, QFileSystemWatcher, QUrl
from PyQt6.QtGui import QBrush, QColor, QDesktopServices, QKeySequence, QShortcut

from ...utils.config import PreviewSettings
from .csv_filter_widget import CsvFilterWidget
from .load_state import LoadState, parse_warning_text
from .load_worker import MODE_INITIAL, MODE_MORE, TableLoadWorker
from .row_filter import cell_matches_search

logger = logging.getLogger(__name__)

# Above this many rows, column widths are not fitted to contents
AUTO_RESIZE_ROW_LIMIT = 2000

SEARCH_HIGHLIGHT_COLOR = "#fff59d"


class CsvTableWidget(QTableWidget):
    """Read-only table with row numbers, full-text tooltips and copy-cell"""

    cell_copied = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.headers: List[str] = []
        self.setup_table()

    def setup_table(self):
        """Configure table appearance and behavior"""
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectItems)
        self.setAlternatingRowColors(True)
        self.setWordWrap(False)
        self.setSortingEnabled(False)

        self.horizontalHeader().setStretchLastSection(True)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.verticalHeader().setVisible(True)

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def set_headers(self, headers: Sequence[str]):
        self.headers = list(headers)

    def header_labels(self, column_count: int) -> List[str]:
        """Header text per column; blank or missing headers get a placeholder"""
        labels = []
        for index in range(column_count):
            name = self.headers[index] if index < len(self.headers) else ""
            labels.append(name or f"Column {index + 1}")
        return labels

    def show_rows(self, rows: Sequence[Sequence[str]], row_numbers: Sequence[int],
                  highlight: str = "", case_sensitive: bool = False):
        """Replace the table contents; row_numbers are 0-based source indices.

        Cells containing highlight get a background brush.
        """
        highlight_brush = QBrush(QColor(SEARCH_HIGHLIGHT_COLOR))
        column_count = max([len(self.headers)] + [len(row) for row in rows])

        self.setUpdatesEnabled(False)
        try:
            self.setRowCount(0)
            self.setColumnCount(column_count)
            labels = self.header_labels(column_count)
            self.setHorizontalHeaderLabels(labels)
            for col_idx, label in enumerate(labels):
                self.horizontalHeaderItem(col_idx).setToolTip(label)

            self.setRowCount(len(rows))
            self.setVerticalHeaderLabels([str(number + 1) for number in row_numbers])
            for row_idx, row in enumerate(rows):
                for col_idx, value in enumerate(row):
                    item = QTableWidgetItem(value)
                    item.setToolTip(value)  # Full value for truncated cells
                    if cell_matches_search(value, highlight, case_sensitive):
                        item.setBackground(highlight_brush)
                    self.setItem(row_idx, col_idx, item)

            if len(rows) <= AUTO_RESIZE_ROW_LIMIT:
                self.resizeColumnsToContents()
        finally:
            self.setUpdatesEnabled(True)

    def _show_context_menu(self, pos):
        item = self.itemAt(pos)
        if item is None:
            return
        menu = QMenu(self)
        copy_action = menu.addAction("Copy Cell")
        chosen = menu.exec(self.viewport().mapToGlobal(pos))
        if chosen == copy_action:
            self.copy_cell(item)

    def copy_cell(self, item: QTableWidgetItem):
        """Copy one cell's text to the clipboard"""
        text = item.text()
        QApplication.clipboard().setText(text)
        self.cell_copied.emit(text)


class CsvPreviewPanel(QWidget):
    """Preview of a single CSV/TSV file"""

    message = pyqtSignal(str)  # Short status messages for the host window

    def __init__(self, file_path: Path, settings: Optional[PreviewSettings] = None, parent=None):
        super().__init__(parent)
        self.file_path = Path(file_path)
        self.settings = settings or PreviewSettings()
        self.state = LoadState()
        self.visible_indices: List[int] = []

        self._generation = 0  # Bumped per initial load; older results are dropped
        self._loading_more = False
        self._workers: List[TableLoadWorker] = []
        self._reload_prompt_open = False

        self.file_watcher = QFileSystemWatcher(self)
        self.file_watcher.fileChanged.connect(self._on_file_changed)

        self.init_ui()
        self.watch_file()

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout(self)
        layout.setSpacing(5)

        self.create_toolbar(layout)

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #c62828; padding: 6px;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        self.loading_label = QLabel("Loading CSV...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.loading_label.setVisible(False)
        layout.addWidget(self.loading_label)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel - filters
        self.filter_widget = CsvFilterWidget()
        self.filter_widget.filters_changed.connect(self.apply_filters)
        self.filter_widget.search_input.textChanged.connect(self._sync_toolbar_search)
        self.filter_widget.setMaximumWidth(300)
        splitter.addWidget(self.filter_widget)

        # Right panel - table and load-more
        self.table_container = QWidget()
        table_layout = QVBoxLayout(self.table_container)
        table_layout.setContentsMargins(0, 0, 0, 0)

        self.table = CsvTableWidget()
        self.table.cell_copied.connect(lambda _text: self.message.emit("Copied to clipboard"))
        table_layout.addWidget(self.table)

        self.load_more_btn = QPushButton("Load More Rows")
        self.load_more_btn.clicked.connect(self.load_more_rows)
        self.load_more_btn.setVisible(False)
        table_layout.addWidget(self.load_more_btn)

        splitter.addWidget(self.table_container)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 3)
        splitter.setCollapsible(1, False)
        self.table_container.setVisible(False)

        layout.addWidget(splitter)

        self.refresh_shortcut = QShortcut(QKeySequence("F5"), self)
        self.refresh_shortcut.activated.connect(self.load)

    def create_toolbar(self, layout):
        """Create toolbar with refresh, open-as-text, search and stats"""
        toolbar_layout = QHBoxLayout()

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.setToolTip("Reload the file (F5)")
        self.refresh_btn.clicked.connect(self.load)
        toolbar_layout.addWidget(self.refresh_btn)

        self.open_as_text_btn = QPushButton("Open as Text")
        self.open_as_text_btn.setToolTip("Open the file in the default text editor")
        self.open_as_text_btn.clicked.connect(self.open_as_text)
        toolbar_layout.addWidget(self.open_as_text_btn)

        self.toolbar_search = QLineEdit()
        self.toolbar_search.setPlaceholderText("Search...")
        self.toolbar_search.setMaximumWidth(240)
        self.toolbar_search.textChanged.connect(self._on_toolbar_search_changed)
        toolbar_layout.addWidget(self.toolbar_search)

        toolbar_layout.addStretch()

        self.stats_label = QLabel("")
        self.stats_label.setStyleSheet("color: #666; font-style: italic;")
        toolbar_layout.addWidget(self.stats_label)

        layout.addLayout(toolbar_layout)

    def _on_toolbar_search_changed(self, text: str):
        if self.filter_widget.search_input.text() != text:
            self.filter_widget.search_input.setText(text)

    def _sync_toolbar_search(self, text: str):
        if self.toolbar_search.text() != text:
            self.toolbar_search.setText(text)

    # Loading

    def load(self):
        """(Re)load the first page of the file"""
        self._generation += 1
        self._loading_more = False
        self.show_loading()

        worker = TableLoadWorker(
            self.file_path, self._generation, MODE_INITIAL,
            delimiter=self.settings.delimiter,
            max_rows=self.settings.max_rows,
        )
        worker.load_complete.connect(self.on_initial_load_complete)
        worker.load_failed.connect(self.on_load_failed)
        worker.progress_update.connect(self.loading_label.setText)
        self._start_worker(worker)

    def load_more_rows(self):
        """Request the next batch of rows"""
        if self._loading_more or not self.state.has_more:
            return
        self._loading_more = True
        self.load_more_btn.setEnabled(False)
        self.load_more_btn.setText("Loading...")

        worker = TableLoadWorker(
            self.file_path, self._generation, MODE_MORE,
            delimiter=self.settings.delimiter,
            current_row_count=self.state.row_count,
            batch_size=self.settings.batch_size,
        )
        worker.load_complete.connect(self.on_more_rows_complete)
        worker.load_failed.connect(self.on_load_more_failed)
        self._start_worker(worker)

    def _start_worker(self, worker: TableLoadWorker):
        self._workers.append(worker)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
        worker.start()

    def _on_worker_finished(self, worker: TableLoadWorker):
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def on_initial_load_complete(self, generation: int, result, file_size: int = 0):
        """Show the first page of a finished initial load"""
        if generation != self._generation:
            return

        self.state.apply_initial(result, file_size)
        self.table.set_headers(result.headers)
        self.filter_widget.set_headers(result.headers)
        self.apply_filters()

        self.loading_label.setVisible(False)
        self.error_label.setVisible(False)
        self.table_container.setVisible(True)
        self.update_load_more_button()

        if result.parse_errors:
            logger.info("%s: %d parse warnings", self.file_path.name, len(result.parse_errors))
            self.message.emit(parse_warning_text(result.parse_errors))

    def on_more_rows_complete(self, generation: int, result, file_size: int = 0):
        """Append rows from a finished load-more"""
        if generation != self._generation:
            return
        self._loading_more = False
        self.state.apply_more(result)
        self.apply_filters()
        self.update_load_more_button()

    def on_load_failed(self, generation: int, message: str):
        if generation != self._generation:
            return
        self.state.reset()
        self.show_error(message)

    def on_load_more_failed(self, generation: int, message: str):
        if generation != self._generation:
            return
        self._loading_more = False
        self.update_load_more_button()
        self.error_label.setText(message)
        self.error_label.setVisible(True)

    # Display

    def apply_filters(self):
        """Apply current filters to the loaded rows and redraw"""
        self.visible_indices = self.filter_widget.matching_indices(self.state.rows)
        rows = [self.state.rows[i] for i in self.visible_indices]
        row_filter = self.filter_widget.row_filter
        self.table.show_rows(rows, self.visible_indices,
                             highlight=row_filter.search_text,
                             case_sensitive=row_filter.case_sensitive)
        self.update_stats()

    def update_stats(self):
        self.stats_label.setText(self.state.stats_text(
            len(self.visible_indices), self.filter_widget.has_active_filters()
        ))

    def update_load_more_button(self):
        self.load_more_btn.setText("Load More Rows")
        self.load_more_btn.setEnabled(True)
        self.load_more_btn.setVisible(self.state.has_more)

    def show_loading(self):
        self.error_label.setVisible(False)
        self.loading_label.setText("Loading CSV...")
        self.loading_label.setVisible(True)

    def show_error(self, message: str):
        self.loading_label.setVisible(False)
        self.table_container.setVisible(False)
        self.error_label.setText(message)
        self.error_label.setVisible(True)
        self.stats_label.setText("")

    # File integration

    def open_as_text(self):
        """Open the file with the desktop's default text handler"""
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(self.file_path)))

    def watch_file(self):
        if self.file_path.exists():
            self.file_watcher.addPath(str(self.file_path))

    def _on_file_changed(self, path: str):
        # Editors that replace the file on save drop it from the watch list
        if path not in self.file_watcher.files() and Path(path).exists():
            self.file_watcher.addPath(path)
        if self._reload_prompt_open:
            return

        self._reload_prompt_open = True
        try:
            choice = QMessageBox.question(
                self, "File Changed", "CSV file has changed. Reload?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
        finally:
            self._reload_prompt_open = False

        if choice == QMessageBox.StandardButton.Yes:
            self.load()

    def shutdown(self):
        """Drop pending results and wait for running workers"""
        self._generation += 1
        for worker in list(self._workers):
            worker.wait()
        watched = self.file_watcher.files()
        if watched:
            self.file_watcher.removePaths(watched)

    def closeEvent(self, event):
        """Handle panel close event"""
        self.shutdown()
        super().closeEvent(event)
