"""Project-specific constants and configurations."""
from pathlib import Path

# Project-wide constants
PROJECT_NAME = 'CSV Table View'
PROJECT_SLUG = 'csv-table-view'
PROJECT_VERSION = '0.1.0'

CONFIG_DIR = Path.home() / '.config' / PROJECT_SLUG

# File admission
SUPPORTED_EXTENSIONS = ('.csv', '.tsv')
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB
