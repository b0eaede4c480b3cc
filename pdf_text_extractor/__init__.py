"""PDF text extraction with OCR fallback for scanned documents."""

from pdf_text_extractor.classifier import ScanClassifier
from pdf_text_extractor.config import (
    ExtractorConfig,
    OCRConfig,
    ScanHeuristics,
    TextQualityThresholds,
)
from pdf_text_extractor.detector import DocumentDetector
from pdf_text_extractor.exceptions import (
    DocumentTooLarge,
    ExtractionFailed,
    InvalidDocument,
    NotScanCandidate,
    OcrError,
    OcrFailed,
    OcrUnavailable,
    PdfExtractionError,
    ProcessingError,
)
from pdf_text_extractor.extractor import (
    MarkdownTextExtractor,
    PyMuPDFTextExtractor,
    TextExtractor,
)
from pdf_text_extractor.handler import DocumentHandler
from pdf_text_extractor.logger import set_extraction_id, setup_logging
from pdf_text_extractor.metadata import decode_pdf_string
from pdf_text_extractor.models import (
    ClassificationScore,
    DocumentMetadata,
    ExtractionResult,
    SourceDocument,
)
from pdf_text_extractor.ocr import OcrEngine, OcrService, TesseractEngine
from pdf_text_extractor.parser import extract_pdf, is_ocr_available

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "extract_pdf",
    "is_ocr_available",
    "setup_logging",
    "set_extraction_id",
    # Core classes
    "DocumentHandler",
    "DocumentDetector",
    "ScanClassifier",
    "OcrService",
    "decode_pdf_string",
    # Capabilities
    "TextExtractor",
    "PyMuPDFTextExtractor",
    "MarkdownTextExtractor",
    "OcrEngine",
    "TesseractEngine",
    # Data models
    "SourceDocument",
    "ExtractionResult",
    "DocumentMetadata",
    "ClassificationScore",
    # Configuration
    "ExtractorConfig",
    "OCRConfig",
    "ScanHeuristics",
    "TextQualityThresholds",
    # Exceptions
    "PdfExtractionError",
    "InvalidDocument",
    "DocumentTooLarge",
    "ProcessingError",
    "ExtractionFailed",
    "OcrError",
    "OcrUnavailable",
    "NotScanCandidate",
    "OcrFailed",
]
