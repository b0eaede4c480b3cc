"""Configuration classes for the PDF text extractor."""

import os
from dataclasses import dataclass, field
from typing import Optional

from pdf_text_extractor.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRConfig:
    """Configuration for the OCR fallback.

    Examples:
        >>> # Default configuration (Spanish + English, 150 DPI)
        >>> config = OCRConfig()

        >>> # English only, more workers for a bigger machine
        >>> config = OCRConfig(languages="eng", max_workers=7)
    """

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH).

    pytesseract keeps the binary path in a module-level setting, so this value
    is process-wide: the most recently created ``TesseractEngine`` wins. Use
    one value per process.
    """

    tessdata_prefix: Optional[str] = None
    """Optional path to tessdata directory. If None, uses system default.

    Passed to each Tesseract call as ``--tessdata-dir``; the process
    environment is left untouched.
    """

    languages: str = "spa+eng"
    """OCR languages in Tesseract format (e.g., "eng", "spa+eng")."""

    dpi: int = 150
    """Resolution used when pages have to be rasterized instead of having
    their embedded images pulled out by pdfimages."""

    psm_mode: int = 1
    """Page segmentation mode (0-13). Default: 1 (automatic with OSD).

    Common modes:
    - 1: Automatic page segmentation with orientation and script detection
    - 3: Fully automatic page segmentation, no OSD
    - 6: Uniform block of text
    """

    max_workers: int = 3
    """Number of page images recognized in parallel."""

    pdfimages_cmd: str = "pdfimages"
    """Name or path of the poppler ``pdfimages`` binary."""

    enable_image_preprocessing: bool = False
    """Convert page images to grayscale and boost contrast before OCR."""

    contrast_enhancement: float = 1.2
    """Contrast factor applied when preprocessing is enabled (1.0 = unchanged)."""


@dataclass
class ScanHeuristics:
    """Thresholds and tokens used to decide whether a PDF is a scan.

    The numbers are empirical; tune them per corpus rather than trusting them.
    """

    many_images: int = 10
    image_text_ratio: int = 2
    image_markers: tuple[bytes, ...] = (
        b"/Image",
        b"/DCTDecode",
        b"/CCITTFaxDecode",
        b"/JBIG2Decode",
        b"/JPXDecode",
    )
    text_markers: tuple[bytes, ...] = (b"/Font", b"/Text", b"BT", b"ET")
    scan_app_signatures: tuple[str, ...] = (
        "CamScanner",
        "Adobe Scan",
        "TinyScanner",
        "Scanner Pro",
        "Genius Scan",
    )


@dataclass
class TextQualityThresholds:
    """Below these, directly extracted text is considered weak."""

    min_chars: int = 100
    min_alpha_chars: int = 50


@dataclass
class ExtractorConfig:
    """Configuration for document extraction."""

    ocr_config: OCRConfig = field(default_factory=OCRConfig)
    heuristics: ScanHeuristics = field(default_factory=ScanHeuristics)
    quality: TextQualityThresholds = field(default_factory=TextQualityThresholds)
    output_format: str = "text"
    """Either "text" (plain PyMuPDF text) or "markdown" (pymupdf4llm)."""
    table_strategy: str = "lines_strict"
    fontsize_limit: int = 3
    force_text: bool = True
    max_file_size_mb: Optional[int] = None
    """Optional size ceiling; None leaves size checks to the caller."""

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """Build a configuration from environment variables.

        Unparsable numeric values are logged and replaced by the defaults.
        """
        ocr_defaults = OCRConfig()
        ocr_config = OCRConfig(
            tesseract_cmd=os.environ.get("TESSERACT_CMD", ocr_defaults.tesseract_cmd),
            tessdata_prefix=os.environ.get("TESSDATA_PREFIX") or None,
            languages=os.environ.get("PDF_OCR_LANGUAGES", ocr_defaults.languages),
            dpi=_env_int("PDF_OCR_DPI", ocr_defaults.dpi),
            max_workers=_env_int("PDF_OCR_MAX_WORKERS", ocr_defaults.max_workers),
        )
        max_size = _env_int("PDF_MAX_FILE_SIZE_MB", None)
        return cls(ocr_config=ocr_config, max_file_size_mb=max_size)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Invalid integer in environment, using default",
            extra_data={"variable": name, "value": raw, "default": default},
        )
        return default
