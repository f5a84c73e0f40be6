#!/usr/bin/env python3
"""Row-count estimation by extrapolating line breaks from a leading sample."""

ESTIMATE_SAMPLE_SIZE = 10000


def estimate_row_count(text: str) -> int:
    """Approximate the number of rows in text without parsing it.

    Only meant for display ("12000+ total"); never treat it as exact.
    """
    sample_size = min(len(text), ESTIMATE_SAMPLE_SIZE)
    newlines = text.count("\n", 0, sample_size)
    if newlines == 0:
        return 1

    estimated = int((len(text) / sample_size) * newlines)
    return max(1, estimated)
