"""Pytest configuration shared by unit and integration tests"""

import os
import sys
import tempfile
from pathlib import Path

import pymupdf
import pytest

# Add project root to path for prompt_report imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# main.py configures file logging on import: keep test logs out of the repo
os.environ.setdefault("LOG_FILE", str(Path(tempfile.mkdtemp(prefix="prompt-report-logs-")) / "test.log"))


def build_pdf(pages):
    """
    Build an in-memory PDF with one page per string.

    Each page string is written line by line, so multi-line page text stays readable.
    """
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page(width=595, height=842)  # A4
        if text:
            page.insert_text((50, 72), text, fontsize=11)
    content = doc.tobytes()
    doc.close()
    return content


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(["page 1 text", "page 2 text"]) -> PDF bytes"""
    return build_pdf
