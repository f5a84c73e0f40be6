#!/usr/bin/env python3
"""
Tests for delimiter detection and the shared quote-aware tokenizer

Usage:
    python -m unittest test_delimiter
"""

import sys
import unittest
from pathlib import Path

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent))

from csvtableview.parsing.delimiter import (
    AUTO,
    CANDIDATES,
    Delimiter,
    DelimiterKind,
    detect_delimiter,
    get_sample,
    score_candidates,
)
from csvtableview.parsing.tokenizer import count_delimiters, iter_records


class TestTokenizer(unittest.TestCase):
    """Splitting records while respecting quotes."""

    def test_quoted_delimiter_and_escaped_quote(self):
        records = list(iter_records('"a,b",c,"d""e"', ","))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].fields, ["a,b", "c", 'd"e'])
        self.assertEqual(records[0].anomalies, [])

    def test_line_endings(self):
        records = list(iter_records("a,b\r\nc,d\re,f\ng,h", ","))
        self.assertEqual([r.fields for r in records],
                         [["a", "b"], ["c", "d"], ["e", "f"], ["g", "h"]])

    def test_newline_inside_quotes_is_literal(self):
        records = list(iter_records('h1,h2\n"line one\nline two",x\n', ","))
        self.assertEqual(len(records), 2)
        self.assertEqual(records[1].fields, ["line one\nline two", "x"])

    def test_trailing_delimiter_gives_empty_field(self):
        records = list(iter_records("a,b,\n", ","))
        self.assertEqual(records[0].fields, ["a", "b", ""])

    def test_quote_mid_field_is_literal(self):
        records = list(iter_records('ab"c,d', ","))
        self.assertEqual(records[0].fields, ['ab"c', "d"])
        self.assertEqual(records[0].anomalies, [])

    def test_unterminated_quote_is_reported(self):
        records = list(iter_records('a,"never closed\nmore', ","))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].fields, ["a", "never closed\nmore"])
        self.assertEqual(records[0].anomalies[0].code, "MissingQuotes")

    def test_text_after_closing_quote_is_reported(self):
        records = list(iter_records('"ab"cd,e', ","))
        self.assertEqual(records[0].fields, ["abcd", "e"])
        self.assertEqual(records[0].anomalies[0].code, "InvalidQuotes")

    def test_blank_record(self):
        records = list(iter_records("a\n  \nb", ","))
        self.assertEqual([r.is_blank() for r in records], [False, True, False])

    def test_count_delimiters_ignores_quoted_spans(self):
        self.assertEqual(count_delimiters('"a,b",c,"d""e"', ","), 2)
        self.assertEqual(count_delimiters("", ","), 0)
        self.assertEqual(count_delimiters("abc", ","), 0)


class TestDelimiter(unittest.TestCase):
    """The closed delimiter enumeration."""

    def test_known_kinds(self):
        self.assertEqual(Delimiter(",").kind, DelimiterKind.COMMA)
        self.assertEqual(Delimiter("\t").display_name, "Tab")
        self.assertEqual(Delimiter("|").display_name, "Pipe")
        self.assertEqual(Delimiter(";").display_name, "Semicolon")

    def test_custom_kind(self):
        delimiter = Delimiter("^")
        self.assertEqual(delimiter.kind, DelimiterKind.CUSTOM)
        self.assertEqual(delimiter.display_name, "Custom")
        self.assertEqual(str(delimiter), "^")

    def test_from_setting_tab_spellings(self):
        self.assertEqual(Delimiter.from_setting("\\t"), Delimiter("\t"))
        self.assertEqual(Delimiter.from_setting("tab"), Delimiter("\t"))
        self.assertEqual(Delimiter.from_setting("\t"), Delimiter("\t"))

    def test_invalid_characters(self):
        for bad in ["", ",,", '"', "\n", "\r"]:
            with self.assertRaises(ValueError):
                Delimiter(bad)

    def test_candidate_order(self):
        self.assertEqual([c.char for c in CANDIDATES], [",", ";", "\t", "|"])


class TestDetectDelimiter(unittest.TestCase):
    """Scoring and choosing among the candidates."""

    def test_consistent_comma(self):
        self.assertEqual(detect_delimiter("a,b,c\n1,2,3"), Delimiter(","))

    def test_consistent_each_candidate(self):
        for char in [";", "\t", "|"]:
            sample = f"a{char}b\n1{char}2\n3{char}4"
            self.assertEqual(detect_delimiter(sample).char, char)

    def test_override_skips_detection(self):
        self.assertEqual(detect_delimiter("a,b,c\n1,2,3", ";"), Delimiter(";"))
        self.assertEqual(detect_delimiter("a,b,c\n1,2,3", Delimiter("|")), Delimiter("|"))
        self.assertEqual(detect_delimiter("a,b", "tab"), Delimiter("\t"))

    def test_quoted_delimiters_not_counted(self):
        # Semicolons inside quotes would otherwise outscore the commas
        sample = '"a;b;c;d",x\n"e;f;g;h",y'
        self.assertEqual(detect_delimiter(sample), Delimiter(","))

    def test_consistency_beats_raw_count(self):
        # Comma is consistent (1 per line), semicolon only on the first line
        sample = "a,b;c;d;e\n1,2\n3,4"
        scores = score_candidates(sample)
        self.assertEqual(scores[Delimiter(",")], 100)
        self.assertEqual(scores[Delimiter(";")], 30)
        self.assertEqual(detect_delimiter(sample), Delimiter(","))

    def test_single_line_scores_its_count(self):
        scores = score_candidates("a;b;c")
        self.assertEqual(scores[Delimiter(";")], 2)
        self.assertEqual(detect_delimiter("a;b;c"), Delimiter(";"))

    def test_tie_goes_to_earlier_candidate(self):
        self.assertEqual(detect_delimiter("a,b;c\n1,2;3"), Delimiter(","))
        self.assertEqual(detect_delimiter("a|b;c\n1|2;3"), Delimiter(";"))

    def test_quote_inside_field_does_not_hide_delimiters(self):
        # Inch marks are literal: only a quote opening a field starts a quoted span
        line = '12" x,4" y|z'
        self.assertEqual(count_delimiters(line, ","), 1)
        self.assertEqual(count_delimiters(line, "|"), 1)
        self.assertEqual(list(iter_records(line, ","))[0].fields, ['12" x', '4" y|z'])
        self.assertEqual(detect_delimiter(line), Delimiter(","))
        self.assertEqual(detect_delimiter(line + "\n" + line), Delimiter(","))

    def test_default_is_comma(self):
        self.assertEqual(detect_delimiter("no delimiters here\nat all"), Delimiter(","))
        self.assertEqual(detect_delimiter(""), Delimiter(","))

    def test_blank_lines_are_skipped(self):
        self.assertEqual(detect_delimiter("\n\na;b\n\n1;2\n"), Delimiter(";"))

    def test_only_first_five_lines_considered(self):
        lines = ["a;b"] * 5 + ["x,y,z,w"] * 5
        scores = score_candidates("\n".join(lines))
        self.assertEqual(scores[Delimiter(";")], 100)
        self.assertEqual(scores[Delimiter(",")], 0)

    def test_auto_constant(self):
        self.assertEqual(detect_delimiter("a\tb\n1\t2", AUTO), Delimiter("\t"))

    def test_get_sample(self):
        text = "\n".join(str(i) for i in range(20))
        self.assertEqual(get_sample(text), "\n".join(str(i) for i in range(10)))
        self.assertEqual(get_sample("one line"), "one line")


if __name__ == "__main__":
    unittest.main()
