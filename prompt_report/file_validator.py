"""
Upload validation for report generation

Two tiers:
1. STRICT (PDF): magic bytes must say PDF and PyMuPDF must open it with at least one page
2. LENIENT (text formats): accepted if the content decodes as UTF-8

A file that fails here never reaches decoding or ranking; the user gets an
actionable 400 instead of an empty or garbled report.
"""

from pathlib import Path
from typing import Literal

import magic
import pymupdf
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Upload rejected, with a message the user can act on"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class ValidationResult:
    """Outcome of a successful validation"""

    def __init__(
        self,
        format_type: Literal["pdf", "html", "text"],
        mime_type: str,
        page_count: int = 0,
    ):
        self.format_type = format_type
        self.mime_type = mime_type
        self.page_count = page_count

    @property
    def file_type(self) -> str:
        """Type key understood by DocumentProcessor.extract_text()"""
        return {"pdf": "pdf", "html": "html", "text": "txt"}[self.format_type]


class FileValidator:
    """
    Validate uploaded documents before decoding

    - Size limit
    - Extension whitelist
    - Magic bytes for PDFs (a renamed text file is not a PDF)
    - UTF-8 check for text formats
    """

    STRICT_FORMATS = {".pdf"}
    STRICT_MIME_MAP = {".pdf": "application/pdf"}

    HTML_FORMATS = {".html", ".htm"}
    TEXT_FORMATS = {".txt", ".md", ".markdown", ".rst", ".log"} | HTML_FORMATS

    MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB

    def __init__(self):
        self.mime_detector = magic.Magic(mime=True)

    @property
    def supported_extensions(self) -> set[str]:
        return self.STRICT_FORMATS | self.TEXT_FORMATS

    def validate(self, filename: str, content: bytes) -> ValidationResult:
        """
        Validate an uploaded file

        Args:
            filename: Original filename with extension
            content: File content as bytes

        Returns:
            ValidationResult with format type and metadata

        Raises:
            ValidationError: If validation fails
        """
        if not content:
            raise ValidationError(f"File '{filename}' is empty.")

        if len(content) > self.MAX_FILE_SIZE:
            raise ValidationError(
                f"File '{filename}' is too large ({len(content) / 1024 / 1024:.1f}MB).\n"
                f"Maximum allowed: {self.MAX_FILE_SIZE // (1024 * 1024)}MB."
            )

        ext = Path(filename).suffix.lower()
        if not ext:
            raise ValidationError(
                f"File '{filename}' has no extension.\n"
                f"Supported: {', '.join(sorted(self.supported_extensions))}"
            )

        if ext not in self.supported_extensions:
            raise ValidationError(
                f"Unsupported file extension '{ext}' in '{filename}'.\n"
                f"Supported: {', '.join(sorted(self.supported_extensions))}"
            )

        if ext in self.STRICT_FORMATS:
            return self._validate_strict(ext, content, filename)
        return self._validate_text(ext, content, filename)

    def _detect_mime_type(self, content: bytes) -> str:
        """Detect MIME type from the first 2KB"""
        return self.mime_detector.from_buffer(content[:2048])

    def _validate_strict(self, ext: str, content: bytes, filename: str) -> ValidationResult:
        """PDF: content must really be a PDF and must open"""
        expected_mime = self.STRICT_MIME_MAP[ext]
        detected_mime = self._detect_mime_type(content)

        if detected_mime != expected_mime:
            raise ValidationError(
                f"Format mismatch in '{filename}':\n"
                f"  Extension claims: {ext} ({expected_mime})\n"
                f"  Actual content: {detected_mime}\n"
                f"Please attach a real PDF file."
            )

        try:
            doc = pymupdf.open(stream=content, filetype="pdf")
            page_count = len(doc)
            doc.close()
        except Exception as e:
            raise ValidationError(
                f"Corrupted PDF: '{filename}'\n"
                f"Error: {str(e)[:200]}\n"
                f"Re-save the PDF from its original source and try again."
            )

        if page_count == 0:
            raise ValidationError(f"PDF '{filename}' is empty (0 pages).")

        return ValidationResult(format_type="pdf", mime_type=detected_mime, page_count=page_count)

    def _validate_text(self, ext: str, content: bytes, filename: str) -> ValidationResult:
        """Text formats: any UTF-8 content is accepted"""
        try:
            content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"File '{filename}' is not valid UTF-8 text.\n"
                f"Error at byte position {e.start}: {e.reason}"
            )

        if ext in self.HTML_FORMATS:
            return ValidationResult(format_type="html", mime_type="text/html")
        return ValidationResult(format_type="text", mime_type="text/plain")
