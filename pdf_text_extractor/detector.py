"""Input validation for documents handed to the extractor."""

import mimetypes
from typing import Optional

from pdf_text_extractor.exceptions import DocumentTooLarge, InvalidDocument
from pdf_text_extractor.logger import get_logger
from pdf_text_extractor.models import PDF_MIME_TYPE, PDF_SIGNATURE, SourceDocument

logger = get_logger(__name__)


class DocumentDetector:
    """Checks that a buffer is a PDF within the configured size ceiling."""

    def __init__(self, max_file_size_mb: Optional[int] = None):
        self.max_file_size_mb = max_file_size_mb

    def validate(self, document: SourceDocument) -> None:
        """Raise if the document cannot be processed.

        Raises:
            InvalidDocument: If neither MIME type, extension nor signature say PDF
            DocumentTooLarge: If the buffer is over ``max_file_size_mb``
        """
        logger.debug(
            "Validating document",
            extra_data={
                "file_name": document.file_name,
                "provided_mime_type": document.mime_type,
                "guessed_mime_type": mimetypes.guess_type(document.file_name)[0],
                "file_size_bytes": document.size,
            },
        )

        if not document.is_pdf():
            logger.warning(
                "Rejected non-PDF document",
                extra_data={
                    "file_name": document.file_name,
                    "provided_mime_type": document.mime_type,
                    "head": document.content[:8],
                },
            )
            raise InvalidDocument("File is not a valid PDF")

        if self.max_file_size_mb is not None:
            limit_bytes = self.max_file_size_mb * 1024 * 1024
            if document.size > limit_bytes:
                logger.warning(
                    "Rejected oversized document",
                    extra_data={
                        "file_name": document.file_name,
                        "file_size_bytes": document.size,
                        "limit_mb": self.max_file_size_mb,
                    },
                )
                raise DocumentTooLarge(document.size, self.max_file_size_mb)

    @staticmethod
    def sniff_mime(file_bytes: bytes) -> Optional[str]:
        """Detect the PDF MIME type from the file signature."""
        if file_bytes.startswith(PDF_SIGNATURE):
            return PDF_MIME_TYPE
        return None
