"""Direct (text-layer) extraction using PyMuPDF."""

import enum
from typing import Optional, Protocol

import fitz  # PyMuPDF
import pymupdf4llm

from pdf_text_extractor.config import ExtractorConfig, TextQualityThresholds
from pdf_text_extractor.exceptions import ExtractionFailed
from pdf_text_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


class TextExtractor(Protocol):
    """Protocol for direct PDF text extractors."""

    def extract(self, data: bytes) -> str:
        """Return the text layer of the PDF, raising ExtractionFailed on tool errors."""
        ...


class TextQuality(enum.Enum):
    EMPTY = "empty"
    WEAK = "weak"
    ACCEPTED = "accepted"


def assess_text(
    text: str, thresholds: Optional[TextQualityThresholds] = None
) -> TextQuality:
    """Judge whether directly extracted text can be trusted as-is."""
    thresholds = thresholds or TextQualityThresholds()
    cleaned = text.strip()
    if not cleaned:
        return TextQuality.EMPTY

    alpha_count = sum(1 for char in cleaned if char.isalpha())
    if len(cleaned) < thresholds.min_chars or alpha_count < thresholds.min_alpha_chars:
        return TextQuality.WEAK
    return TextQuality.ACCEPTED


class PyMuPDFTextExtractor:
    """Plain-text extraction, one blank line between pages."""

    def extract(self, data: bytes) -> str:
        try:
            with Timer("pdf_native_extraction") as timer:
                with fitz.open(stream=data, filetype="pdf") as pdf_document:
                    pages = [page.get_text("text") for page in pdf_document]
        except Exception as exc:
            logger.error(
                "PDF text extraction failed",
                extra_data={"error_type": type(exc).__name__, "error": str(exc)},
                exc_info=True,
            )
            raise ExtractionFailed(f"PDF text extraction failed: {exc}") from exc

        text = "\n\n".join(page.strip() for page in pages if page.strip())
        logger.debug(
            "PDF native text extraction completed",
            extra_data={
                "characters_extracted": len(text),
                "page_count": len(pages),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text


class MarkdownTextExtractor:
    """Markdown extraction through PyMuPDF4LLM (tables, headers, lists)."""

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def extract(self, data: bytes) -> str:
        try:
            with Timer("pdf_markdown_extraction") as timer:
                with fitz.open(stream=data, filetype="pdf") as pdf_document:
                    # Does NOT include OCR - scanned PDFs come back empty
                    md_text = pymupdf4llm.to_markdown(
                        pdf_document,
                        table_strategy=self.config.table_strategy,
                        force_text=self.config.force_text,
                        write_images=False,
                        ignore_images=True,
                        fontsize_limit=self.config.fontsize_limit,
                        show_progress=False,
                    )
        except Exception as exc:
            logger.error(
                "PDF markdown extraction failed",
                extra_data={"error_type": type(exc).__name__, "error": str(exc)},
                exc_info=True,
            )
            raise ExtractionFailed(f"PDF markdown extraction failed: {exc}") from exc

        logger.debug(
            "PDF markdown extraction completed",
            extra_data={
                "characters_extracted": len(md_text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return md_text


def create_text_extractor(config: Optional[ExtractorConfig] = None) -> TextExtractor:
    """Pick the extractor matching ``config.output_format``."""
    config = config or ExtractorConfig()
    if config.output_format == "markdown":
        return MarkdownTextExtractor(config)
    if config.output_format != "text":
        raise ValueError(f"Unsupported output format: {config.output_format}")
    return PyMuPDFTextExtractor()
