"""High-level API for PDF text extraction."""

from pathlib import Path
from typing import Optional

from pdf_text_extractor.config import ExtractorConfig, OCRConfig
from pdf_text_extractor.detector import DocumentDetector
from pdf_text_extractor.handler import DocumentHandler
from pdf_text_extractor.models import ExtractionResult, SourceDocument
from pdf_text_extractor.ocr import TesseractEngine


def extract_pdf(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
) -> ExtractionResult:
    """Extract text and metadata from a PDF.

    Convenience function that accepts either a file path or raw bytes.

    Args:
        file_path: Path to the PDF (alternative to file_bytes)
        file_bytes: Raw PDF bytes (alternative to file_path)
        file_name: Original filename (required if using file_bytes)
        mime_type: Declared MIME type (optional, sniffed if not provided)
        config: Extraction configuration (optional, uses defaults if not provided)

    Returns:
        ExtractionResult with extracted text and metadata

    Raises:
        ValueError: If neither or both of file_path and file_bytes are provided,
            or if file_bytes is provided without file_name
        InvalidDocument: If the input is not a PDF
        DocumentTooLarge: If the input exceeds ``config.max_file_size_mb``
        ProcessingError: If neither direct extraction nor OCR produced a result

    Examples:
        >>> result = extract_pdf(file_path="scan.pdf")
        >>> print(result.text, result.metadata.ocr_used)

        >>> config = ExtractorConfig(ocr_config=OCRConfig(languages="eng"))
        >>> with open("report.pdf", "rb") as f:
        ...     result = extract_pdf(file_bytes=f.read(), file_name="report.pdf", config=config)
    """
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and not file_bytes:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")

        file_bytes = path.read_bytes()
        file_name = path.name

    if not file_name:
        raise ValueError("file_name is required when using file_bytes")

    document = SourceDocument(
        content=file_bytes,
        file_name=file_name,
        mime_type=mime_type or DocumentDetector.sniff_mime(file_bytes),
    )
    return DocumentHandler(config=config).extract(document)


def is_ocr_available(ocr_config: Optional[OCRConfig] = None) -> bool:
    """Whether the OCR engine is installed, for health reporting."""
    return TesseractEngine(ocr_config).is_available()
