"""Custom exceptions for the PDF text extractor."""

from typing import Iterable, Optional


class PdfExtractionError(Exception):
    """Base exception for extractor errors.

    ``code`` is a stable identifier callers can map onto transport-level
    responses.
    """

    code = "INTERNAL_ERROR"


class InvalidDocument(PdfExtractionError):
    """Raised when the buffer does not look like a PDF."""

    code = "INVALID_FILE"


class DocumentTooLarge(PdfExtractionError):
    """Raised when the buffer exceeds the configured size ceiling."""

    code = "FILE_TOO_LARGE"

    def __init__(self, size_bytes: int, limit_mb: int):
        self.size_bytes = size_bytes
        self.limit_mb = limit_mb
        super().__init__(
            f"File too large: {size_bytes / (1024 * 1024):.1f}MB exceeds limit of {limit_mb}MB"
        )


class ProcessingError(PdfExtractionError):
    """Raised when no extraction method could produce a usable result.

    ``causes`` keeps the underlying tool messages for operator diagnosis.
    """

    code = "PROCESSING_ERROR"

    def __init__(self, message: str, causes: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.causes = list(causes or [])


class ExtractionFailed(PdfExtractionError):
    """Raised when the direct text extractor itself errors out."""

    code = "EXTRACTION_FAILED"


class OcrError(PdfExtractionError):
    """Base class for OCR fallback failures."""

    code = "OCR_ERROR"


class OcrUnavailable(OcrError):
    """Raised when the OCR engine is not installed."""


class NotScanCandidate(OcrError):
    """Raised when the document does not look scanned, so OCR is skipped."""


class OcrFailed(OcrError):
    """Raised when OCR was attempted but could not run."""
