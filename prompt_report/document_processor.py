"""
Document decoding for prompt reports

Turns an uploaded file into the single flat text string the extraction core
consumes:
1. PDF: per-page text via PyMuPDF, pages decoded in parallel and re-joined
   in page order with one space between pages
2. Plain text formats (txt, md, rst, log): UTF-8 decode with latin-1 fallback
3. HTML: html2text, then Markdown block syntax stripped, one sentence per block

Every path returns one line of text: runs of whitespace, line breaks
included, collapse to a single space.

PDF pages are independent, so decoding is a scatter/gather: the page range is
cut into contiguous batches, each batch runs in a worker thread with its own
document handle (PyMuPDF documents must not be shared between threads), and
asyncio.gather is the join barrier. Results land in page order no matter which
worker finishes first.
"""

import asyncio
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import html2text
import pymupdf

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = " "

TEXT_TYPES = {
    'txt', 'text/plain',
    'md', 'markdown', 'text/markdown',
    'rst', 'text/x-rst',
    'log', 'text/x-log',
}
HTML_TYPES = {'html', 'htm', 'text/html'}
PDF_TYPES = {'pdf', 'application/pdf'}

# Leading Markdown block syntax html2text emits: "# ", "> ", "  * ", "  1. "
BLOCK_MARKER = re.compile(r'^\s*(?:#{1,6}\s+|>\s*|[*+-]\s+|\d+\.\s+)+')
MARKDOWN_ESCAPE = re.compile(r'\\([\\`*_{}\[\]()#+\-.!])')
# Horizontal rules ("* * *") and table header separators ("---|---")
RULE_LINE = re.compile(r'^[\s*|:-]+$')


class DocumentDecodeError(ValueError):
    """Source document could not be decoded into text"""


def _page_batches(page_count: int, max_workers: int) -> List[Tuple[int, int]]:
    """Cut [0, page_count) into at most max_workers contiguous (start, stop) ranges"""
    if page_count == 0:
        return []
    workers = max(1, min(max_workers, page_count))
    size, extra = divmod(page_count, workers)
    batches = []
    start = 0
    for i in range(workers):
        stop = start + size + (1 if i < extra else 0)
        batches.append((start, stop))
        start = stop
    return batches


def collapse_whitespace(text: str) -> str:
    """Line breaks and runs of spaces become single spaces: the text reads as one line"""
    return " ".join(text.split())


def _extract_page_range(pdf_bytes: bytes, start: int, stop: int) -> List[str]:
    """Decode pages [start, stop) with a private document handle"""
    doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    try:
        return [collapse_whitespace(doc[i].get_text()) for i in range(start, stop)]
    finally:
        doc.close()


def _markdown_blocks_to_sentences(markdown: str) -> str:
    """
    Turn html2text output into plain sentences

    Each non-blank line is one block (heading, paragraph, list item, table row).
    Heading/list/quote markers and backslash escapes are removed, and a block
    that does not already end in '.', '?' or '!' gets a '.' so it is never
    glued onto the next block's sentence.
    """
    blocks = []
    for line in markdown.splitlines():
        if RULE_LINE.match(line):
            continue
        line = BLOCK_MARKER.sub('', line)
        line = MARKDOWN_ESCAPE.sub(r'\1', line)
        line = collapse_whitespace(line)
        if not line:
            continue
        if line[-1] not in '.?!':
            line += '.'
        blocks.append(line)
    return " ".join(blocks)


class DocumentProcessor:
    """Decode uploads into plain text"""

    def __init__(self, max_workers: int = 4):
        """
        Args:
            max_workers: Upper bound on threads used to decode PDF pages
        """
        self.max_workers = max(1, max_workers)

    async def extract_pages_from_pdf(self, pdf_bytes: bytes) -> List[str]:
        """
        Extract the text of every page, in page order.

        Args:
            pdf_bytes: PDF file content

        Returns:
            One string per page (empty string for pages without text)

        Raises:
            DocumentDecodeError: If PyMuPDF cannot open the document or it has no pages
        """
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise DocumentDecodeError(f"Could not open PDF: {str(e)[:200]}") from e
        page_count = len(doc)
        doc.close()

        if page_count == 0:
            raise DocumentDecodeError("PDF has no pages")

        batches = _page_batches(page_count, self.max_workers)
        logger.debug(f"PDF has {page_count} pages, decoding in {len(batches)} batches")

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=len(batches)) as executor:
            futures = [
                loop.run_in_executor(executor, _extract_page_range, pdf_bytes, start, stop)
                for start, stop in batches
            ]
            try:
                results = await asyncio.gather(*futures)
            except Exception as e:
                raise DocumentDecodeError(f"Could not read PDF pages: {str(e)[:200]}") from e

        pages: List[str] = []
        for batch in results:
            pages.extend(batch)

        logger.debug(f"Decoded {len(pages)} pages ({sum(len(p) for p in pages)} chars)")
        return pages

    async def extract_text_from_pdf(self, pdf_bytes: bytes) -> str:
        """Full PDF text: page texts joined by a single space"""
        pages = await self.extract_pages_from_pdf(pdf_bytes)
        return PAGE_SEPARATOR.join(pages)

    def extract_text_from_txt(self, txt_bytes: bytes) -> str:
        """
        Decode a plain text upload

        Args:
            txt_bytes: Raw file content

        Returns:
            Text content on one line (hard-wrapped sentences are re-joined)
        """
        try:
            text = txt_bytes.decode('utf-8')
        except UnicodeDecodeError:
            # latin-1 maps every byte, never fails
            logger.warning("UTF-8 decode failed, using latin-1")
            text = txt_bytes.decode('latin-1', errors='replace')
        return collapse_whitespace(text)

    def extract_text_from_html(self, html_bytes: bytes) -> str:
        """
        Convert an HTML upload to plain sentences

        html2text renders the readable text; links, emphasis and images are
        dropped. Its Markdown block syntax is then stripped and every block
        (heading, paragraph, list item) ends its own sentence.
        """
        html_string = html_bytes.decode('utf-8', errors='replace')

        converter = html2text.HTML2Text()
        converter.ignore_links = True
        converter.ignore_images = True
        converter.ignore_emphasis = True
        converter.body_width = 0  # No hard wrapping inside sentences

        return _markdown_blocks_to_sentences(converter.handle(html_string))

    async def extract_text(self, file_content: bytes, file_type: str) -> str:
        """
        Extract text from an upload based on its type

        Args:
            file_content: File content as bytes
            file_type: File extension (.pdf, .txt, ...) or MIME type

        Returns:
            Extracted text

        Raises:
            DocumentDecodeError: If a PDF cannot be decoded
            ValueError: If the type is not supported
        """
        file_ext = file_type.lower()
        if file_ext.startswith('.'):
            file_ext = file_ext[1:]

        if file_ext in PDF_TYPES:
            return await self.extract_text_from_pdf(file_content)

        elif file_ext in HTML_TYPES:
            return self.extract_text_from_html(file_content)

        elif file_ext in TEXT_TYPES:
            return self.extract_text_from_txt(file_content)

        else:
            raise ValueError(
                f"Unsupported file type: {file_type}. "
                f"Supported: PDF, HTML or plain text (txt, md, rst, log)"
            )
