"""
Unit tests for report assembly.
"""

from datetime import datetime

import pytest
from prompt_report.extraction.report import (
    NO_RESULTS_MESSAGE,
    REPORT_TITLE,
    assemble_report,
    format_timestamp,
    generate_report,
)


FIXED_TIME = datetime(2026, 10, 19, 15, 4, 5)


class TestFormatTimestamp:
    """Test en-US locale timestamp rendering"""

    @pytest.mark.parametrize("moment, expected", [
        (datetime(2026, 10, 19, 15, 4, 5), "10/19/2026, 3:04:05 PM"),
        (datetime(2026, 1, 2, 0, 0, 9), "1/2/2026, 12:00:09 AM"),
        (datetime(2026, 7, 4, 12, 30, 0), "7/4/2026, 12:30:00 PM"),
        (datetime(2026, 12, 31, 11, 59, 59), "12/31/2026, 11:59:59 AM"),
    ])
    def test_format(self, moment, expected):
        assert format_timestamp(moment) == expected


class TestAssembleReport:
    """Test the fixed report layout"""

    def test_full_layout(self):
        report = assemble_report("test", ["A.", "B."], FIXED_TIME)

        assert report == (
            "=== AI-Generated Report ===\n\n"
            "Prompt: test\n\n"
            "Extracted Information:\n"
            "A.\nB."
            "\n\nGenerated on: 10/19/2026, 3:04:05 PM"
        )

    def test_body_is_sentences_one_per_line(self):
        report = assemble_report("test", ["A.", "B."], FIXED_TIME)
        body = report.split("Extracted Information:\n", 1)[1].split("\n\nGenerated on:", 1)[0]

        assert body == "A.\nB."

    @pytest.mark.parametrize("ranked", [[], None])
    def test_no_results_fallback(self, ranked):
        report = assemble_report("xylophone", ranked, FIXED_TIME)

        assert f"Extracted Information:\n{NO_RESULTS_MESSAGE}\n\n" in report
        assert NO_RESULTS_MESSAGE == "No relevant information found in the PDF for the given prompt."

    def test_prompt_echoed_verbatim(self):
        prompt = "What's the *revenue*?"
        report = assemble_report(prompt, ["Revenue grew."], FIXED_TIME)

        assert f"Prompt: {prompt}\n" in report

    def test_starts_with_title(self):
        assert assemble_report("p", ["s."], FIXED_TIME).startswith(REPORT_TITLE + "\n\n")


class TestGenerateReport:
    """Test rank + assemble in one call"""

    def test_ranked_sentences_in_body(self):
        report = generate_report("The cat sat. The cat ran. Dogs bark.", "cat", timestamp=FIXED_TIME)

        assert "Extracted Information:\nThe cat sat.\nThe cat ran.\n\nGenerated on:" in report
        assert "Dogs bark." not in report

    def test_no_match_uses_fallback(self):
        report = generate_report("Apples are red.", "xylophone", timestamp=FIXED_TIME)

        assert NO_RESULTS_MESSAGE in report
        assert "Apples" not in report

    def test_threshold_passed_through(self):
        document = "Cat a b c d e f g h i."

        assert NO_RESULTS_MESSAGE in generate_report(document, "cat", timestamp=FIXED_TIME)
        assert document in generate_report(document, "cat", threshold=0.05, timestamp=FIXED_TIME)

    def test_timestamp_defaults_to_now(self):
        report = generate_report("The cat sat.", "cat")
        assert "\n\nGenerated on: " in report
        assert report.rstrip().endswith(("AM", "PM"))
