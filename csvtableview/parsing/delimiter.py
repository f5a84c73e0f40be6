#!/usr/bin/env python3
"""
Delimiter detection - pick the field separator of a delimited text file

The candidate set is closed (comma, semicolon, tab, pipe); anything else a
user configures is carried as a CUSTOM delimiter holding the literal character.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union

from .tokenizer import LINE_BREAK_CHARS, QUOTE_CHAR, count_delimiters

logger = logging.getLogger(__name__)

AUTO = "auto"
TAB_ESCAPE = "\\t"
MAX_DETECTION_LINES = 5
SAMPLE_LINES = 10

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


class DelimiterKind(Enum):
    """Known delimiters plus a catch-all for user overrides"""
    COMMA = ","
    SEMICOLON = ";"
    TAB = "\t"
    PIPE = "|"
    CUSTOM = "custom"


_DISPLAY_NAMES = {
    DelimiterKind.COMMA: "Comma",
    DelimiterKind.SEMICOLON: "Semicolon",
    DelimiterKind.TAB: "Tab",
    DelimiterKind.PIPE: "Pipe",
    DelimiterKind.CUSTOM: "Custom",
}


@dataclass(frozen=True)
class Delimiter:
    """A single-character field separator"""
    char: str

    def __post_init__(self):
        if len(self.char) != 1:
            raise ValueError(f"Delimiter must be exactly one character, got {self.char!r}")
        if self.char == QUOTE_CHAR or self.char in LINE_BREAK_CHARS:
            raise ValueError(f"{self.char!r} cannot be used as a delimiter")

    @property
    def kind(self) -> DelimiterKind:
        for kind in CANDIDATE_KINDS:
            if kind.value == self.char:
                return kind
        return DelimiterKind.CUSTOM

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.kind]

    @classmethod
    def from_setting(cls, value: str) -> "Delimiter":
        """Build a delimiter from a configured value such as ';', '\\t' or 'tab'"""
        if value in (TAB_ESCAPE, "tab"):
            return cls("\t")
        return cls(value)

    def __str__(self) -> str:
        return self.char


# Iteration order decides ties
CANDIDATE_KINDS = (
    DelimiterKind.COMMA,
    DelimiterKind.SEMICOLON,
    DelimiterKind.TAB,
    DelimiterKind.PIPE,
)
CANDIDATES = tuple(Delimiter(kind.value) for kind in CANDIDATE_KINDS)
DEFAULT_DELIMITER = CANDIDATES[0]


def get_sample(text: str, lines: int = SAMPLE_LINES) -> str:
    """Return the first few lines of text for delimiter detection"""
    return "\n".join(text.split("\n")[:lines])


def _score(counts: List[int]) -> int:
    if not counts:
        return 0
    first = counts[0]
    if len(counts) == 1:
        return first
    if first > 0 and all(c == first for c in counts):
        # A consistent count across lines is the strongest signal
        return first * 100
    if first > 0:
        return first * 10
    return 0


def score_candidates(sample: str) -> Dict[Delimiter, int]:
    """Score every candidate delimiter over the first non-blank sample lines"""
    lines = [line for line in _LINE_SPLIT.split(sample) if line.strip()]
    lines = lines[:MAX_DETECTION_LINES]

    scores: Dict[Delimiter, int] = {}
    for candidate in CANDIDATES:
        counts = [count_delimiters(line, candidate.char) for line in lines]
        scores[candidate] = _score(counts)
    return scores


def detect_delimiter(sample: str, override: Union[str, Delimiter] = AUTO) -> Delimiter:
    """Detect the delimiter of sample, or honor an explicit override"""
    if isinstance(override, Delimiter):
        return override
    if override != AUTO:
        return Delimiter.from_setting(override)

    scores = score_candidates(sample)
    best = DEFAULT_DELIMITER
    best_score = 0
    for candidate in CANDIDATES:
        if scores[candidate] > best_score:
            best = candidate
            best_score = scores[candidate]

    logger.debug("Delimiter scores: %s -> %s",
                 {c.display_name: s for c, s in scores.items()}, best.display_name)
    return best
