#!/usr/bin/env python3
"""
Table Load Worker - run the load pipeline off the UI thread

Each worker reads the file, runs one pipeline operation and reports back with
the generation number it was started with, so the panel can drop results that
a newer load has made stale.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QThread, pyqtSignal

from ...parsing.pipeline import TableLoadError, initial_load, load_more
from ...utils.file_loader import FileAdmissionError, check_admission, read_table_text

logger = logging.getLogger(__name__)

MODE_INITIAL = "initial"
MODE_MORE = "more"


class TableLoadWorker(QThread):
    """Worker thread for one initial-load or load-more request"""

    load_complete = pyqtSignal(int, object, int)  # generation, result, file size
    load_failed = pyqtSignal(int, str)             # generation, message
    progress_update = pyqtSignal(str)

    def __init__(self, file_path: Path, generation: int, mode: str = MODE_INITIAL,
                 delimiter: str = "auto", max_rows: int = 10000,
                 current_row_count: int = 0, batch_size: int = 5000, parent=None):
        super().__init__(parent)
        self.file_path = file_path
        self.generation = generation
        self.mode = mode
        self.delimiter = delimiter
        self.max_rows = max_rows
        self.current_row_count = current_row_count
        self.batch_size = batch_size

    def run(self):
        """Read the file and run the pipeline in the background thread"""
        try:
            self.progress_update.emit("Reading file...")
            file_size = check_admission(self.file_path)
            text = read_table_text(self.file_path)

            self.progress_update.emit("Parsing rows...")
            if self.mode == MODE_MORE:
                result = load_more(text, self.delimiter, self.current_row_count, self.batch_size)
            else:
                result = initial_load(text, self.delimiter, self.max_rows)

            self.load_complete.emit(self.generation, result, file_size)

        except (FileAdmissionError, TableLoadError) as e:
            self.load_failed.emit(self.generation, self._describe(str(e)))
        except (OSError, ValueError) as e:
            logger.exception("Loading %s failed", self.file_path)
            message = str(e) if self.mode == MODE_MORE else f"Failed to load CSV: {e}"
            self.load_failed.emit(self.generation, self._describe(message))

    def _describe(self, message: str) -> str:
        if self.mode == MODE_MORE:
            return f"Failed to load more rows: {message}"
        return message
