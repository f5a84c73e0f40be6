#!/usr/bin/env python3
"""
CSV Preview Window - tabbed host for preview panels

One tab per file. Opening a file that already has a tab focuses it and
reloads it instead of creating a second panel.
"""

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QMainWindow, QTabWidget, QFileDialog, QMessageBox
from PyQt6.QtGui import QAction, QKeySequence

from ...utils.config import PreviewSettings
from ...utils.file_loader import FileAdmissionError, check_admission
from ...utils.project_constants import PROJECT_NAME
from .csv_viewer_widget import CsvPreviewPanel
from .preview_registry import PreviewRegistry

logger = logging.getLogger(__name__)

STATUS_TIMEOUT_MS = 3000


class CsvPreviewWindow(QMainWindow):
    """Main window holding one CsvPreviewPanel per open file"""

    def __init__(self, settings: Optional[PreviewSettings] = None, parent=None):
        super().__init__(parent)
        self.settings = settings or PreviewSettings()
        self.registry = PreviewRegistry()

        self.setWindowTitle(PROJECT_NAME)
        self.resize(1200, 800)

        self.tabs = QTabWidget()
        self.tabs.setTabsClosable(True)
        self.tabs.setDocumentMode(True)
        self.tabs.tabCloseRequested.connect(self.close_tab)
        self.setCentralWidget(self.tabs)

        self.create_menu()
        self.statusBar().showMessage("Open a CSV or TSV file to preview it")

    def create_menu(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        close_action = QAction("&Close Tab", self)
        close_action.setShortcut(QKeySequence.StandardKey.Close)
        close_action.triggered.connect(lambda: self.close_tab(self.tabs.currentIndex()))
        file_menu.addAction(close_action)

        reload_all_action = QAction("&Reload All", self)
        reload_all_action.setShortcut(QKeySequence("Ctrl+Shift+R"))
        reload_all_action.triggered.connect(self.reload_all)
        file_menu.addAction(reload_all_action)

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def open_file_dialog(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open CSV File", "", "CSV files (*.csv *.tsv);;All files (*)"
        )
        if file_path:
            self.open_preview(file_path)

    def open_preview(self, file_path) -> Optional[CsvPreviewPanel]:
        """Open (or focus and reload) the preview for file_path"""
        path = Path(file_path)
        try:
            check_admission(path)
        except (FileAdmissionError, OSError) as e:
            logger.info("Refused %s: %s", path, e)
            QMessageBox.warning(self, "Cannot Preview File", str(e))
            return None

        identity = PreviewRegistry.identity_for(path)
        panel, created = self.registry.create_or_show(
            identity, lambda: CsvPreviewPanel(path, self.settings)
        )

        if created:
            panel.message.connect(
                lambda text: self.statusBar().showMessage(text, STATUS_TIMEOUT_MS)
            )
            index = self.tabs.addTab(panel, f"Preview: {path.name}")
            self.tabs.setTabToolTip(index, str(path))

        self.tabs.setCurrentWidget(panel)
        panel.load()
        return panel

    def reload_all(self) -> int:
        """Reload every open preview; returns how many were reloaded"""
        identities = self.registry.identities()
        for identity in identities:
            self.registry.get(identity).load()
        return len(identities)

    def close_tab(self, index: int):
        panel = self.tabs.widget(index)
        if panel is None:
            return
        self.tabs.removeTab(index)
        identity = self.registry.identity_of(panel)
        if identity is not None:
            self.registry.remove(identity)
        panel.shutdown()
        panel.deleteLater()

    def closeEvent(self, event):
        """Shut down every panel before the window goes away"""
        closed = self.registry.close_all(lambda panel: panel.shutdown())
        logger.debug("Closed %d previews", closed)
        super().closeEvent(event)
