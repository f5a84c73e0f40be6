#!/usr/bin/env python3
"""
CSV Filter Widget - Search and filtering controls for loaded rows

Global text search, per-column filters and filter management. The matching
itself lives in RowFilter; this widget only edits it and announces changes.
"""

from typing import Dict, List, Sequence

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QComboBox,
    QPushButton, QLabel, QGroupBox, QCheckBox, QScrollArea, QFrame
)
from PyQt6.QtCore import pyqtSignal, QTimer
from PyQt6.QtGui import QFont

from .row_filter import ColumnFilter, RowFilter

SEARCH_DEBOUNCE_MS = 300

# Display text -> ColumnFilter.filter_type
FILTER_TYPE_LABELS = {
    "contains": "contains",
    "equals": "equals",
    "starts with": "starts_with",
    "ends with": "ends_with",
}


class CsvFilterWidget(QWidget):
    """Widget for filtering and searching loaded rows"""

    # Signals
    filters_changed = pyqtSignal()  # Emitted when filters change

    def __init__(self, parent=None):
        super().__init__(parent)
        self.row_filter = RowFilter()
        self.filter_widgets: Dict[int, Dict[str, QWidget]] = {}

        # Debounce timer for live search
        self.search_timer = QTimer(self)
        self.search_timer.setSingleShot(True)
        self.search_timer.timeout.connect(self.filters_changed.emit)

        self.init_ui()

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout(self)
        layout.setSpacing(5)

        self.create_search_section(layout)
        self.create_column_filters_section(layout)
        self.create_filter_controls(layout)

    def create_search_section(self, layout):
        """Create a simple, compact search section"""
        search_layout = QHBoxLayout()

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search...")
        self.search_input.textChanged.connect(self._on_search_text_changed)
        search_layout.addWidget(self.search_input)

        self.case_sensitive_cb = QCheckBox("Case")
        self.case_sensitive_cb.setToolTip("Case sensitive search")
        self.case_sensitive_cb.toggled.connect(self._on_case_sensitive_changed)
        search_layout.addWidget(self.case_sensitive_cb)

        layout.addLayout(search_layout)

    def create_column_filters_section(self, layout):
        """Create column-specific filters section"""
        filters_group = QGroupBox("Column Filters")
        filters_layout = QVBoxLayout(filters_group)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)

        self.column_filters_area = QWidget()
        self.column_filters_layout = QVBoxLayout(self.column_filters_area)
        self.column_filters_layout.addStretch()

        scroll.setWidget(self.column_filters_area)
        filters_layout.addWidget(scroll)

        layout.addWidget(filters_group)

    def create_filter_controls(self, layout):
        """Create filter control buttons"""
        controls_layout = QHBoxLayout()

        clear_btn = QPushButton("Clear All Filters")
        clear_btn.clicked.connect(self.clear_all_filters)
        controls_layout.addWidget(clear_btn)

        controls_layout.addStretch()

        self.status_label = QLabel("No filters active")
        self.status_label.setStyleSheet("color: #666; font-style: italic;")
        controls_layout.addWidget(self.status_label)

        layout.addLayout(controls_layout)

    def set_headers(self, headers: Sequence[str]):
        """Rebuild column filters for a newly loaded table"""
        self.clear_column_filter_widgets()
        self.row_filter.set_columns(headers)
        for col_filter in self.row_filter.column_filters.values():
            self.create_column_filter_widget(col_filter)
        self.update_status()

    def clear_column_filter_widgets(self):
        """Remove all column filter widgets"""
        for widget_dict in self.filter_widgets.values():
            widget = widget_dict['widget']
            widget.setParent(None)
            widget.deleteLater()
        self.filter_widgets.clear()

    def create_column_filter_widget(self, col_filter: ColumnFilter):
        """Create filter widget for a specific column"""
        index = col_filter.column_index

        filter_widget = QFrame()
        filter_widget.setFrameStyle(QFrame.Shape.Box)
        filter_layout = QHBoxLayout(filter_widget)
        filter_layout.setContentsMargins(5, 5, 5, 5)

        name_label = QLabel(col_filter.column_name)
        name_label.setMinimumWidth(100)
        font = QFont()
        font.setBold(True)
        name_label.setFont(font)
        filter_layout.addWidget(name_label)

        type_combo = QComboBox()
        type_combo.addItems(list(FILTER_TYPE_LABELS))
        type_combo.currentTextChanged.connect(
            lambda text, col=index: self._on_filter_type_changed(col, text)
        )
        filter_layout.addWidget(type_combo)

        value_input = QLineEdit()
        value_input.setPlaceholderText(f"Filter {col_filter.column_name}...")
        value_input.textChanged.connect(
            lambda text, col=index: self._on_filter_value_changed(col, text)
        )
        filter_layout.addWidget(value_input)

        enable_cb = QCheckBox("Active")
        enable_cb.setChecked(True)
        enable_cb.toggled.connect(
            lambda checked, col=index: self._on_filter_enabled_changed(col, checked)
        )
        filter_layout.addWidget(enable_cb)

        self.filter_widgets[index] = {
            'widget': filter_widget,
            'type_combo': type_combo,
            'value_input': value_input,
            'enable_cb': enable_cb
        }

        # Insert before the stretch
        self.column_filters_layout.insertWidget(
            self.column_filters_layout.count() - 1, filter_widget
        )

    def _on_search_text_changed(self, text: str):
        """Handle global search text change"""
        self.row_filter.set_search_text(text)
        self.search_timer.start(SEARCH_DEBOUNCE_MS)
        self.update_status()

    def _on_case_sensitive_changed(self, checked: bool):
        self.row_filter.case_sensitive = checked
        self.filters_changed.emit()
        self.update_status()

    def _on_filter_type_changed(self, column_index: int, label: str):
        col_filter = self.row_filter.column_filters.get(column_index)
        if col_filter:
            col_filter.filter_type = FILTER_TYPE_LABELS.get(label, "contains")
            self.filters_changed.emit()
            self.update_status()

    def _on_filter_value_changed(self, column_index: int, value: str):
        col_filter = self.row_filter.column_filters.get(column_index)
        if col_filter:
            col_filter.value = value
            self.search_timer.start(SEARCH_DEBOUNCE_MS)
            self.update_status()

    def _on_filter_enabled_changed(self, column_index: int, enabled: bool):
        col_filter = self.row_filter.column_filters.get(column_index)
        if col_filter:
            col_filter.enabled = enabled
            self.filters_changed.emit()
            self.update_status()

    def clear_all_filters(self):
        """Clear all filters"""
        # Block signals so clearing does not fire one change per input
        for widget in [self.search_input, self.case_sensitive_cb]:
            widget.blockSignals(True)
        self.search_input.clear()
        self.case_sensitive_cb.setChecked(False)
        for widget in [self.search_input, self.case_sensitive_cb]:
            widget.blockSignals(False)

        for widgets in self.filter_widgets.values():
            for key in ('value_input', 'enable_cb', 'type_combo'):
                widgets[key].blockSignals(True)
            widgets['value_input'].clear()
            widgets['enable_cb'].setChecked(True)
            widgets['type_combo'].setCurrentIndex(0)
            for key in ('value_input', 'enable_cb', 'type_combo'):
                widgets[key].blockSignals(False)

        self.row_filter.clear()
        self.search_timer.stop()
        self.filters_changed.emit()
        self.update_status()

    def update_status(self):
        """Update filter status display"""
        active_filters = self.row_filter.active_filter_names()
        if active_filters:
            status = f"Active filters: {', '.join(active_filters)}"
        else:
            status = "No filters active"
        self.status_label.setText(status)

    def has_active_filters(self) -> bool:
        return self.row_filter.has_active_filters()

    def matching_indices(self, rows: Sequence[Sequence[str]]) -> List[int]:
        """Indices of rows that match the current filters"""
        return self.row_filter.matching_indices(rows)
