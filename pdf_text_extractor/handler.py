"""Extraction orchestration: direct text first, OCR when it is missing or weak."""

from typing import Optional

from pdf_text_extractor.classifier import ScanClassifier
from pdf_text_extractor.config import ExtractorConfig
from pdf_text_extractor.detector import DocumentDetector
from pdf_text_extractor.exceptions import (
    ExtractionFailed,
    NotScanCandidate,
    OcrError,
    OcrUnavailable,
    ProcessingError,
)
from pdf_text_extractor.extractor import (
    TextExtractor,
    TextQuality,
    assess_text,
    create_text_extractor,
)
from pdf_text_extractor.logger import Timer, get_logger, set_extraction_id
from pdf_text_extractor.metadata import decode_info_field
from pdf_text_extractor.models import (
    DocumentMetadata,
    ExtractionResult,
    SourceDocument,
    StructureInfo,
)
from pdf_text_extractor.ocr import OcrService
from pdf_text_extractor.structure import inspect_structure, resolve_page_count

logger = get_logger(__name__)


class DocumentHandler:
    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        detector: Optional[DocumentDetector] = None,
        text_extractor: Optional[TextExtractor] = None,
        ocr_service: Optional[OcrService] = None,
        classifier: Optional[ScanClassifier] = None,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Extraction configuration. If None, uses defaults.
            detector: Input validator. If None, one honoring ``config.max_file_size_mb``.
            text_extractor: Direct extractor. If None, chosen by ``config.output_format``.
            ocr_service: OCR fallback. If None, Tesseract with ``config.ocr_config``.
            classifier: Scan classifier shared with the default OCR service.
        """
        self.config = config or ExtractorConfig()
        self.classifier = classifier or ScanClassifier(self.config.heuristics)
        self.detector = detector or DocumentDetector(self.config.max_file_size_mb)
        self.text_extractor = text_extractor or create_text_extractor(self.config)
        self.ocr_service = ocr_service or OcrService(
            classifier=self.classifier, config=self.config.ocr_config
        )

    def is_ocr_available(self) -> bool:
        return self.ocr_service.is_available()

    def extract(self, document: SourceDocument) -> ExtractionResult:
        """Extract text and metadata from a PDF.

        Args:
            document: The raw document and its declared name/MIME type

        Returns:
            ExtractionResult with text, page count, metadata and timing

        Raises:
            InvalidDocument: If the buffer is not a PDF
            DocumentTooLarge: If the buffer exceeds the configured ceiling
            ProcessingError: If no extraction method produced a usable result
        """
        set_extraction_id()
        with Timer("extraction") as total_timer:
            logger.info(
                "Starting PDF text extraction",
                extra_data={"file_name": document.file_name, "file_size_bytes": document.size},
            )
            self.detector.validate(document)

            structure = inspect_structure(document.content)
            text, ocr_used = self._extract_text(document)

            result = ExtractionResult(
                text=text,
                pages=resolve_page_count(structure, document.size),
                metadata=self._build_metadata(document, structure, ocr_used),
                processing_time_ms=total_timer.get_elapsed_ms(),
            )

        logger.info(
            "PDF processing completed",
            extra_data={
                "file_name": document.file_name,
                "characters_extracted": len(result.text),
                "pages": result.pages,
                "ocr_used": ocr_used,
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    def _extract_text(self, document: SourceDocument) -> tuple[str, bool]:
        """Return the final text and whether it came from OCR."""
        try:
            direct_text = self.text_extractor.extract(document.content)
        except ExtractionFailed as exc:
            return self._ocr_after_extractor_failure(document, exc)

        cleaned = direct_text.strip()
        quality = assess_text(cleaned, self.config.quality)
        logger.debug(
            "Direct extraction assessed",
            extra_data={"characters": len(cleaned), "quality": quality.value},
        )

        if quality is TextQuality.EMPTY:
            return self._ocr_empty_document(document)
        if quality is TextQuality.WEAK:
            return self._ocr_enhance(document, cleaned)
        return cleaned, False

    def _ocr_after_extractor_failure(
        self, document: SourceDocument, extraction_error: ExtractionFailed
    ) -> tuple[str, bool]:
        logger.warning(
            "PDF text extraction failed, trying OCR fallback",
            extra_data={"file_name": document.file_name, "error": str(extraction_error)},
        )
        try:
            return self.ocr_service.extract_text(document.content), True
        except OcrError as ocr_error:
            logger.error(
                "Both PDF extraction and OCR failed",
                extra_data={"file_name": document.file_name, "error": str(ocr_error)},
            )
            raise ProcessingError(
                f"PDF extraction failed: {extraction_error}; OCR failed: {ocr_error}",
                causes=[str(extraction_error), str(ocr_error)],
            ) from ocr_error

    def _ocr_empty_document(self, document: SourceDocument) -> tuple[str, bool]:
        logger.warning(
            "No text extracted from PDF, trying OCR",
            extra_data={"file_name": document.file_name},
        )
        try:
            return self.ocr_service.extract_text(document.content), True
        except NotScanCandidate:
            logger.info(
                "PDF has no extractable text and is not a scanned document",
                extra_data={"file_name": document.file_name},
            )
            return "", False
        except OcrUnavailable as exc:
            if not self.classifier.is_likely_scanned(document.content):
                logger.info(
                    "PDF has no extractable text, is not scanned, and OCR is not installed",
                    extra_data={"file_name": document.file_name},
                )
                return "", False
            logger.warning(
                "PDF requires OCR but Tesseract is not installed",
                extra_data={"file_name": document.file_name},
            )
            raise ProcessingError(
                f"This PDF appears to be scanned and requires OCR. {exc}",
                causes=[str(exc)],
            ) from exc
        except OcrError as exc:
            raise ProcessingError(
                f"No text found and OCR failed: {exc}", causes=[str(exc)]
            ) from exc

    def _ocr_enhance(self, document: SourceDocument, direct_text: str) -> tuple[str, bool]:
        logger.info(
            "Text extraction yielded minimal results, trying OCR enhancement",
            extra_data={"file_name": document.file_name, "characters": len(direct_text)},
        )
        try:
            ocr_text = self.ocr_service.extract_text(document.content)
        except OcrError as exc:
            logger.debug(
                "OCR enhancement failed, using original text",
                extra_data={"file_name": document.file_name, "error": str(exc)},
            )
            return direct_text, False

        if len(ocr_text) > len(direct_text):
            logger.info(
                "OCR provided better results, using OCR text",
                extra_data={
                    "file_name": document.file_name,
                    "direct_characters": len(direct_text),
                    "ocr_characters": len(ocr_text),
                },
            )
            return ocr_text, True
        return direct_text, False

    def _build_metadata(
        self, document: SourceDocument, structure: StructureInfo, ocr_used: bool
    ) -> DocumentMetadata:
        return DocumentMetadata(
            file_size_bytes=document.size,
            title=decode_info_field(structure.raw_title),
            author=decode_info_field(structure.raw_author),
            creation_date=structure.creation_date,
            modification_date=structure.modification_date,
            ocr_used=ocr_used,
        )
