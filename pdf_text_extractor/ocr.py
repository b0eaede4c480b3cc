"""OCR fallback for PDFs without a usable text layer.

Page images are pulled out of the PDF (poppler's ``pdfimages`` when installed,
PyMuPDF rasterization otherwise) and recognized one by one with Tesseract.
"""

import re
import tempfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Protocol

import fitz  # PyMuPDF
import pytesseract
from PIL import Image, ImageEnhance, ImageOps

from pdf_text_extractor.classifier import ScanClassifier
from pdf_text_extractor.commands import CommandRunner
from pdf_text_extractor.config import OCRConfig
from pdf_text_extractor.exceptions import NotScanCandidate, OcrFailed, OcrUnavailable
from pdf_text_extractor.logger import Timer, get_logger

logger = get_logger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg"}


class OcrEngine(Protocol):
    """Protocol for optical character recognition engines."""

    def is_available(self) -> bool:
        """Whether the engine can run on this system."""
        ...

    def recognize(self, image_path: Path) -> str:
        """Return the text recognized in one page image. Raises on failure."""
        ...


class TesseractEngine:
    """Tesseract through pytesseract, configured for mixed Spanish/English pages."""

    def __init__(self, config: Optional[OCRConfig] = None):
        self.config = config or OCRConfig()
        self._available: Optional[bool] = None

        # pytesseract only reads the binary path from this module attribute
        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

    def is_available(self) -> bool:
        # Tool presence is assumed stable for the lifetime of the process
        if self._available is None:
            try:
                version = pytesseract.get_tesseract_version()
            except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError) as exc:
                logger.warning(
                    "Tesseract OCR is not available on this system",
                    extra_data={"tesseract_cmd": self.config.tesseract_cmd, "error": str(exc)},
                )
                self._available = False
            else:
                logger.info(
                    "Tesseract OCR detected",
                    extra_data={"version": version, "languages": self.config.languages},
                )
                self._available = True
        return self._available

    def recognize(self, image_path: Path) -> str:
        with Image.open(image_path) as image:
            if self.config.enable_image_preprocessing:
                image = ImageOps.grayscale(image)
                image = ImageEnhance.Contrast(image).enhance(self.config.contrast_enhancement)
            return pytesseract.image_to_string(
                image,
                lang=self.config.languages,
                config=self._tesseract_options(),
            )

    def _tesseract_options(self) -> str:
        options = f"--psm {self.config.psm_mode}"
        if self.config.tessdata_prefix:
            options += f' --tessdata-dir "{self.config.tessdata_prefix}"'
        return options


class PageImageExtractor:
    """Writes one image per page (or embedded image) into a directory."""

    def __init__(self, config: Optional[OCRConfig] = None, runner: Optional[CommandRunner] = None):
        self.config = config or OCRConfig()
        self.runner = runner or CommandRunner()

    def extract_images(self, pdf_path: Path, output_dir: Path) -> list[Path]:
        """Return the produced images in page order."""
        images: list[Path] = []

        if self.runner.which(self.config.pdfimages_cmd):
            result = self.runner.run(
                [self.config.pdfimages_cmd, "-j", "-png", str(pdf_path), str(output_dir / "page")]
            )
            if result.ok:
                images = list_page_images(output_dir)
            else:
                logger.warning(
                    "pdfimages failed, falling back to rasterization",
                    extra_data={"failure": result.describe_failure()},
                )
        else:
            logger.debug("pdfimages not available, rasterizing pages with PyMuPDF")

        if not images:
            images = self._rasterize(pdf_path, output_dir)

        logger.debug(
            "Page images extracted",
            extra_data={"image_count": len(images), "output_dir": output_dir},
        )
        return images

    def _rasterize(self, pdf_path: Path, output_dir: Path) -> list[Path]:
        images = []
        try:
            with fitz.open(str(pdf_path)) as pdf_document:
                for page_num, page in enumerate(pdf_document):
                    pix = page.get_pixmap(dpi=self.config.dpi)
                    image_path = output_dir / f"raster-{page_num:03d}.png"
                    pix.save(str(image_path))
                    images.append(image_path)
        except Exception as exc:
            logger.warning(
                "PDF rasterization failed",
                extra_data={
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "pages_rendered": len(images),
                },
            )
        return images


def list_page_images(directory: Path) -> list[Path]:
    """Image files in ``directory``, ordered as page-002 before page-010."""
    images = [
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in IMAGE_SUFFIXES
    ]
    return sorted(images, key=_natural_key)


def _natural_key(path: Path) -> list:
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", path.name)]


class OcrService:
    """OCR fallback engine.

    Only runs when an OCR engine is installed and the document looks scanned.
    """

    def __init__(
        self,
        engine: Optional[OcrEngine] = None,
        image_extractor: Optional[PageImageExtractor] = None,
        classifier: Optional[ScanClassifier] = None,
        config: Optional[OCRConfig] = None,
    ):
        self.config = config or OCRConfig()
        self.engine = engine or TesseractEngine(self.config)
        self.image_extractor = image_extractor or PageImageExtractor(self.config)
        self.classifier = classifier or ScanClassifier()

    def is_available(self) -> bool:
        return self.engine.is_available()

    def extract_text(self, data: bytes) -> str:
        """Recognize the text of a scanned PDF.

        Args:
            data: Raw PDF bytes

        Returns:
            Recognized text, possibly empty

        Raises:
            OcrUnavailable: If no OCR engine is installed
            NotScanCandidate: If the document does not look scanned
            OcrFailed: If no page images could be produced
        """
        if not self.engine.is_available():
            raise OcrUnavailable(
                "Tesseract is not installed. Please install Tesseract OCR to process scanned PDFs."
            )

        if not self.classifier.is_likely_scanned(data):
            logger.info("PDF does not appear to contain scanned images, skipping OCR")
            raise NotScanCandidate(
                "PDF does not appear to contain scanned content that requires OCR"
            )

        logger.info(
            "Starting OCR extraction from PDF",
            extra_data={"file_size_bytes": len(data)},
        )

        with Timer("pdf_ocr") as timer:
            pdf_path = self._write_temp_pdf(data)
            try:
                with tempfile.TemporaryDirectory(prefix="pdf-ocr-") as tmp_dir:
                    images = self.image_extractor.extract_images(pdf_path, Path(tmp_dir))
                    if not images:
                        raise OcrFailed("No images could be extracted from the PDF")
                    page_texts = self._recognize_pages(images)
            except OSError as exc:
                raise OcrFailed(f"Failed to prepare page images: {exc}") from exc
            finally:
                pdf_path.unlink(missing_ok=True)

        text = "\n\n".join(page_texts).strip()
        logger.info(
            "OCR extraction completed",
            extra_data={
                "images_processed": len(images),
                "pages_with_text": len(page_texts),
                "characters_extracted": len(text),
                "ocr_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    @staticmethod
    def _write_temp_pdf(data: bytes) -> Path:
        try:
            with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as tmp_file:
                tmp_file.write(data)
                return Path(tmp_file.name)
        except OSError as exc:
            raise OcrFailed(f"Failed to write PDF to temp file: {exc}") from exc

    def _recognize_pages(self, images: list[Path]) -> list[str]:
        """Recognize every image, keeping listing order and skipping failed pages."""
        page_results: dict[int, Optional[str]] = {}
        workers = max(1, min(self.config.max_workers, len(images)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(self._recognize_page, index, path): index
                for index, path in enumerate(images)
            }
            for future in as_completed(future_to_index):
                page_results[future_to_index[future]] = future.result()

        ordered = (page_results[index] for index in range(len(images)))
        return [text for text in ordered if text]

    def _recognize_page(self, index: int, image_path: Path) -> Optional[str]:
        try:
            with Timer("page_ocr") as timer:
                text = self.engine.recognize(image_path)
        except Exception as exc:
            logger.warning(
                f"OCR failed for page {index + 1}, skipping",
                extra_data={
                    "image": image_path.name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return None

        text = text.strip()
        logger.debug(
            f"OCR completed for page {index + 1}",
            extra_data={
                "image": image_path.name,
                "characters_extracted": len(text),
                "ocr_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text
