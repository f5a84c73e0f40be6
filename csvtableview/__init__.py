"""CSV Table View - read-only previewer for CSV and TSV files."""

from .utils.project_constants import PROJECT_VERSION

__version__ = PROJECT_VERSION
