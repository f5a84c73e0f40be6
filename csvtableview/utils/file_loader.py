"""File admission and decoding for the viewer.

The parsing core never touches the filesystem; this module decides which
files may be previewed and hands their decoded text to it.
"""

import logging
from pathlib import Path
from typing import Union

from .project_constants import MAX_FILE_SIZE, SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileAdmissionError(Exception):
    """Base exception for files the viewer refuses to open."""

    pass


class UnsupportedFileTypeError(FileAdmissionError):
    """Raised for files that are not .csv or .tsv."""

    pass


class FileTooLargeError(FileAdmissionError):
    """Raised for files above the size limit."""

    pass


def is_supported_file(path: PathLike) -> bool:
    """Check the extension, case-insensitively"""
    return str(path).lower().endswith(SUPPORTED_EXTENSIONS)


def format_file_size(size: int) -> str:
    """Human-readable size for status lines"""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def check_admission(path: PathLike, max_size: int = MAX_FILE_SIZE) -> int:
    """Raise FileAdmissionError unless the file may be previewed; return its size"""
    path = Path(path)
    if not is_supported_file(path):
        raise UnsupportedFileTypeError(f'File "{path.name}" is not a CSV or TSV file')

    size = path.stat().st_size
    if size > max_size:
        raise FileTooLargeError(
            f"File is too large ({size / 1024 / 1024:.2f}MB). "
            f"Maximum size is {max_size // (1024 * 1024)}MB."
        )
    return size


def read_table_text(path: PathLike, max_size: int = MAX_FILE_SIZE) -> str:
    """Admit and read a delimited text file as text.

    A UTF-8 byte order mark is dropped; undecodable bytes are replaced rather
    than failing the whole preview.
    """
    path = Path(path)
    check_admission(path, max_size)
    raw = path.read_bytes()
    logger.debug("Read %d bytes from %s", len(raw), path)
    return raw.decode('utf-8-sig', errors='replace')
