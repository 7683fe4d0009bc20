"""
Unit tests for FileValidator

Two tiers:
1. STRICT (PDF): magic bytes and PyMuPDF open check
2. LENIENT (text/HTML): UTF-8 check only
"""

import pytest

from prompt_report.file_validator import FileValidator, ValidationError


@pytest.fixture
def validator():
    """Create FileValidator instance"""
    return FileValidator()


class TestStrictValidation:
    """PDF uploads"""

    def test_valid_pdf(self, validator, make_pdf):
        result = validator.validate("report.pdf", make_pdf(["Page one.", "Page two."]))

        assert result.format_type == "pdf"
        assert result.mime_type == "application/pdf"
        assert result.page_count == 2
        assert result.file_type == "pdf"

    def test_uppercase_extension(self, validator, make_pdf):
        assert validator.validate("REPORT.PDF", make_pdf(["Hi."])).format_type == "pdf"

    def test_fake_pdf_extension(self, validator):
        """Text file renamed to .pdf is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("fake.pdf", b"This is just text, not a PDF")

        error = str(exc_info.value.detail)
        assert "Format mismatch" in error
        assert "text/plain" in error
        assert "application/pdf" in error

    def test_corrupted_pdf(self, validator):
        """PDF signature with broken body is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("broken.pdf", b"%PDF-1.4\ncorrupted content")

        assert "Corrupted PDF" in str(exc_info.value.detail)

    def test_validation_error_is_400(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("fake.pdf", b"not a pdf at all")

        assert exc_info.value.status_code == 400


class TestLenientValidation:
    """Text and HTML uploads"""

    @pytest.mark.parametrize("filename", ["notes.txt", "README.md", "guide.rst", "server.log"])
    def test_text_formats(self, validator, filename):
        result = validator.validate(filename, b"Plain text. Nothing fancy.")

        assert result.format_type == "text"
        assert result.file_type == "txt"

    def test_html(self, validator):
        result = validator.validate("page.html", b"<p>Hello.</p>")

        assert result.format_type == "html"
        assert result.file_type == "html"

    def test_invalid_utf8(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("notes.txt", b"\xff\xfe\xfa broken")

        assert "not valid UTF-8" in str(exc_info.value.detail)


class TestGeneralChecks:
    """Checks shared by every tier"""

    def test_empty_file(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("empty.txt", b"")

        assert "empty" in str(exc_info.value.detail)

    def test_no_extension(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("document", b"text")

        assert "no extension" in str(exc_info.value.detail)

    def test_unsupported_extension(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("sheet.xlsx", b"PK\x03\x04")

        error = str(exc_info.value.detail)
        assert "Unsupported file extension '.xlsx'" in error
        assert ".pdf" in error

    def test_file_too_large(self, validator, monkeypatch):
        monkeypatch.setattr(FileValidator, "MAX_FILE_SIZE", 1024)

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("big.txt", b"x" * 2048)

        assert "too large" in str(exc_info.value.detail)
