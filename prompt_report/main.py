"""
Prompt Report - FastAPI application for prompt-driven document reports

Upload a document (PDF or plain text) together with a prompt and get back a
report made of the document's sentences that share the most words with the
prompt:
- PyMuPDF for PDF decoding (pages decoded in parallel)
- Jaccard similarity over lowercase word tokens for ranking (no LLM)
- PyMuPDF again for exporting the report as a downloadable PDF

Endpoints:
- POST /v1/reports         multipart upload + prompt -> report
- POST /v1/extract         already-extracted text + prompt -> report
- POST /v1/reports/export  report text -> PDF download
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from prompt_report.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/prompt-report.log"),
    console_level=console_level,
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)


from fastapi import FastAPI, File, Form, HTTPException, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .document_processor import DocumentDecodeError, DocumentProcessor
from .extraction import (
    assemble_report,
    rank_sentences,
    split_sentences,
)
from .file_validator import FileValidator
from .report_exporter import EmptyReportError, ReportExporter, report_filename

# Configuration from environment variables
PORT = int(os.getenv("PORT", "8080"))
RELEVANCE_THRESHOLD = float(os.getenv("RELEVANCE_THRESHOLD", "0.1"))
SCORING_WORKERS = int(os.getenv("SCORING_WORKERS", "1"))
PDF_PAGE_WORKERS = int(os.getenv("PDF_PAGE_WORKERS", "4"))

APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)

MISSING_PROMPT_MESSAGE = "Please enter a prompt."
MISSING_FILE_MESSAGE = "Please attach a PDF file."
DECODE_FAILED_MESSAGE = "There was an error processing the PDF. Please try again."

document_processor = DocumentProcessor(max_workers=PDF_PAGE_WORKERS)
file_validator = FileValidator()
report_exporter = ReportExporter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log effective configuration on startup"""
    logger.info(
        f"Starting Prompt Report v{APP_VERSION} "
        f"(threshold={RELEVANCE_THRESHOLD}, scoring_workers={SCORING_WORKERS}, "
        f"pdf_page_workers={PDF_PAGE_WORKERS})"
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Prompt Report API",
    description="Extract the sentences of a document most relevant to a prompt",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for the browser front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float


class ExtractRequest(BaseModel):
    text: str = Field(..., description="Plain document text (already extracted)")
    prompt: str = Field(..., description="User prompt")
    threshold: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Minimum similarity (exclusive). Defaults to RELEVANCE_THRESHOLD."
    )


class RankedSentenceItem(BaseModel):
    sentence: str
    similarity: float


class ReportResponse(BaseModel):
    prompt: str
    report: str
    sentences: List[RankedSentenceItem]
    sentences_considered: int = Field(..., description="Sentence candidates found in the document")
    page_count: Optional[int] = Field(None, description="Pages decoded (PDF uploads only)")
    generated_at: str = Field(..., description="Generation timestamp (ISO 8601)")


class ExportRequest(BaseModel):
    report: str = Field(..., description="Report text returned by /v1/reports or /v1/extract")


def _require_prompt(prompt: Optional[str]) -> str:
    """Trimmed prompt, or 400 if blank"""
    prompt = (prompt or "").strip()
    if not prompt:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_PROMPT_MESSAGE
        )
    return prompt


def _build_report(
    text: str,
    prompt: str,
    threshold: Optional[float],
    page_count: Optional[int] = None,
) -> ReportResponse:
    """Rank the text against the prompt and package the result"""
    if threshold is None:
        threshold = RELEVANCE_THRESHOLD

    ranked = rank_sentences(text, prompt, threshold=threshold, max_workers=SCORING_WORKERS)
    candidate_count = len(split_sentences(text))

    generated_at = datetime.now()
    report = assemble_report(prompt, [item.sentence for item in ranked], generated_at)

    logger.info(
        f"Report generated: {len(ranked)}/{candidate_count} sentences above {threshold} "
        f"for prompt ({len(prompt)} chars)"
    )

    return ReportResponse(
        prompt=prompt,
        report=report,
        sentences=[
            RankedSentenceItem(sentence=item.sentence, similarity=round(item.similarity, 4))
            for item in ranked
        ],
        sentences_considered=candidate_count,
        page_count=page_count,
        generated_at=generated_at.isoformat(),
    )


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Prompt Report API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=round(uptime, 2),
    )


@app.post("/v1/reports", response_model=ReportResponse)
async def create_report(
    file: Optional[UploadFile] = File(None),
    prompt: str = Form(""),
    threshold: Optional[float] = Form(None, ge=0.0, le=1.0),
):
    """
    Generate a report from an uploaded document

    - Validates the upload (PDF magic bytes, UTF-8 for text)
    - Decodes all pages into one text
    - Ranks sentences by word overlap with the prompt
    - Assembles the report text

    Example:
        POST /v1/reports
        Content-Type: multipart/form-data
        file: annual_report.pdf
        prompt: revenue growth in europe
    """
    prompt = _require_prompt(prompt)

    if file is None or not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_FILE_MESSAGE
        )

    try:
        file_content = await file.read()
        validation_result = file_validator.validate(file.filename, file_content)

        logger.info(f"Processing document: {file.filename} ({validation_result.format_type})")
        try:
            text = await document_processor.extract_text(file_content, validation_result.file_type)
        except DocumentDecodeError as e:
            logger.error(f"Decoding failed for {file.filename}: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DECODE_FAILED_MESSAGE
            )

        page_count = validation_result.page_count if validation_result.format_type == "pdf" else None
        return _build_report(text, prompt, threshold, page_count=page_count)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Report generation failed for {file.filename}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate report: {str(e)}"
        )


@app.post("/v1/extract", response_model=ReportResponse)
async def extract(request: ExtractRequest):
    """
    Generate a report from text that was already extracted elsewhere

    Empty text is valid and produces the "no relevant information" report.
    """
    prompt = _require_prompt(request.prompt)
    return _build_report(request.text, prompt, request.threshold)


@app.post("/v1/reports/export")
async def export_report(request: ExportRequest):
    """Render report text to a downloadable PDF"""
    try:
        pdf_bytes = report_exporter.export_pdf(request.report)
    except EmptyReportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    filename = report_filename()
    logger.info(f"Exported report as {filename} ({len(pdf_bytes)} bytes)")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prompt_report.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )
