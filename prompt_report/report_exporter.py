"""
PDF export of generated reports

Lays the report text out on A4 pages with PyMuPDF:
- 10mm left margin, first baseline 20mm from the top
- Lines wrapped to 180mm of Helvetica text
- Continues on a new page when the bottom margin is reached

The exporter knows nothing about how the report was produced; it receives
the final report string and returns PDF bytes.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pymupdf

logger = logging.getLogger(__name__)

MM = 72 / 25.4  # points per millimetre

EMPTY_REPORT_MESSAGE = "No report available. Please generate a report first."


class EmptyReportError(ValueError):
    """Export requested before any report text exists"""

    def __init__(self):
        super().__init__(EMPTY_REPORT_MESSAGE)


def report_filename(now: Optional[datetime] = None) -> str:
    """Download name for an exported report: AI_Report_<epoch milliseconds>.pdf"""
    millis = int((now or datetime.now()).timestamp() * 1000)
    return f"AI_Report_{millis}.pdf"


class ReportExporter:
    """Render report text into a paginated PDF"""

    def __init__(
        self,
        fontsize: float = 16,
        fontname: str = "helv",
        line_height: float = 1.15,
        left_margin: float = 10 * MM,
        top_margin: float = 20 * MM,
        bottom_margin: float = 20 * MM,
        text_width: float = 180 * MM,
        paper: str = "a4",
    ):
        """
        Args:
            fontsize: Font size in points
            fontname: PyMuPDF base-14 font name ("helv" = Helvetica)
            line_height: Line spacing as a multiple of fontsize
            left_margin: x of every line, in points
            top_margin: Baseline of the first line on a page, in points
            bottom_margin: No baseline below page height minus this, in points
            text_width: Wrap width, in points
            paper: PyMuPDF paper size name
        """
        self.fontsize = fontsize
        self.fontname = fontname
        self.line_height = line_height
        self.left_margin = left_margin
        self.top_margin = top_margin
        self.bottom_margin = bottom_margin
        self.text_width = text_width
        self.page_width, self.page_height = pymupdf.paper_size(paper)

    def _width(self, text: str) -> float:
        return pymupdf.get_text_length(text, fontname=self.fontname, fontsize=self.fontsize)

    def _break_word(self, word: str) -> List[str]:
        """Split a word wider than the text width into pieces that fit"""
        pieces = []
        while word and self._width(word) > self.text_width:
            cut = 1
            while cut < len(word) and self._width(word[:cut + 1]) <= self.text_width:
                cut += 1
            pieces.append(word[:cut])
            word = word[cut:]
        if word:
            pieces.append(word)
        return pieces

    def wrap_text(self, text: str) -> List[str]:
        """
        Greedy word wrap to the text width

        Every source line starts a new output line; blank source lines stay blank.

        Args:
            text: Report text

        Returns:
            Output lines, each no wider than text_width
        """
        lines: List[str] = []

        for source_line in text.split("\n"):
            current = ""
            for word in source_line.split():
                candidate = f"{current} {word}" if current else word
                if self._width(candidate) <= self.text_width:
                    current = candidate
                    continue

                if current:
                    lines.append(current)
                pieces = self._break_word(word)
                lines.extend(pieces[:-1])
                current = pieces[-1]

            lines.append(current)

        return lines

    def export_pdf(self, report: str) -> bytes:
        """
        Render the report to PDF

        Args:
            report: Report text

        Returns:
            PDF file content

        Raises:
            EmptyReportError: If the report is empty or whitespace only
        """
        if not report or not report.strip():
            raise EmptyReportError()

        lines = self.wrap_text(report)
        step = self.fontsize * self.line_height
        last_baseline = self.page_height - self.bottom_margin

        doc = pymupdf.open()
        try:
            page = None
            y = 0.0
            for line in lines:
                if page is None or y > last_baseline:
                    page = doc.new_page(width=self.page_width, height=self.page_height)
                    y = self.top_margin
                if line:
                    page.insert_text(
                        (self.left_margin, y),
                        line,
                        fontname=self.fontname,
                        fontsize=self.fontsize,
                    )
                y += step

            pdf_bytes = doc.tobytes()
            logger.debug(f"Exported report: {len(lines)} lines on {doc.page_count} pages, {len(pdf_bytes)} bytes")
        finally:
            doc.close()

        return pdf_bytes
