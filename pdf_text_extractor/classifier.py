"""Heuristic detection of scanned (image-only) PDFs.

This is a syntactic scan of the raw bytes, not a rendering-based analysis.
It only has to be good enough to avoid running OCR on ordinary text PDFs.
"""

from typing import Optional

from pdf_text_extractor.config import ScanHeuristics
from pdf_text_extractor.logger import get_logger
from pdf_text_extractor.models import ClassificationScore

logger = get_logger(__name__)


class ScanClassifier:
    """Counts image and text markers and decides whether a PDF is a scan."""

    def __init__(self, heuristics: Optional[ScanHeuristics] = None):
        self.heuristics = heuristics or ScanHeuristics()

    def score(self, data: bytes) -> ClassificationScore:
        h = self.heuristics
        image_count = sum(data.count(marker) for marker in h.image_markers)
        text_count = sum(data.count(marker) for marker in h.text_markers)
        signature = next(
            (app for app in h.scan_app_signatures if app.encode("utf-8") in data),
            None,
        )

        likely_scanned = (
            signature is not None
            or (image_count > 0 and text_count == 0)
            or (image_count > h.many_images and image_count >= text_count)
            or image_count > h.image_text_ratio * text_count
        )

        logger.debug(
            "PDF scanned-content analysis",
            extra_data={
                "image_markers": image_count,
                "text_markers": text_count,
                "scan_app": signature,
                "likely_scanned": likely_scanned,
            },
        )

        return ClassificationScore(
            image_markers=image_count,
            text_markers=text_count,
            scan_app_signature=signature,
            likely_scanned=likely_scanned,
        )

    def is_likely_scanned(self, data: bytes) -> bool:
        return self.score(data).likely_scanned
