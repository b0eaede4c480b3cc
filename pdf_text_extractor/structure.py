"""Structural validation of the PDF container.

Parses the cross-reference table, trailer and page tree with pypdf to get the
page count and the raw document-info strings. A failed parse is not fatal:
callers fall back to :func:`estimate_page_count`.
"""

from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Optional

from pypdf import PdfReader
from pypdf.generic import ByteStringObject, TextStringObject

from pdf_text_extractor.logger import Timer, get_logger
from pdf_text_extractor.models import StructureInfo

logger = get_logger(__name__)

KB_PER_ESTIMATED_PAGE = 50


def inspect_structure(data: bytes) -> StructureInfo:
    """Parse ``data`` and return whatever structure could be recovered.

    Never raises; on failure the returned info has ``error`` set and every
    other field left unknown.
    """
    with Timer("structure_parse") as timer:
        try:
            reader = PdfReader(BytesIO(data))
            page_count = len(reader.pages)
            if page_count < 1:
                raise ValueError("page tree is empty")
            info = _info_dictionary(reader)
        except Exception as exc:
            logger.warning(
                "PDF structure validation failed, will try text extraction anyway",
                extra_data={
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "file_size_bytes": len(data),
                },
            )
            return StructureInfo(error=str(exc) or type(exc).__name__)

    structure = StructureInfo(
        page_count=page_count,
        raw_title=_raw_string(info, "/Title"),
        raw_author=_raw_string(info, "/Author"),
        creation_date=_info_date(reader, "creation_date"),
        modification_date=_info_date(reader, "modification_date"),
    )

    logger.debug(
        "PDF structure parsed",
        extra_data={
            "page_count": page_count,
            "has_title": structure.raw_title is not None,
            "has_author": structure.raw_author is not None,
            "parse_time_ms": timer.get_elapsed_ms(),
        },
    )
    return structure


def estimate_page_count(size_bytes: int) -> int:
    """Rough page count for documents whose page tree could not be read."""
    return max(1, (size_bytes // 1024) // KB_PER_ESTIMATED_PAGE)


def resolve_page_count(structure: StructureInfo, size_bytes: int) -> int:
    if structure.page_count is not None:
        return structure.page_count
    return estimate_page_count(size_bytes)


def _info_dictionary(reader: PdfReader) -> Optional[dict]:
    info = reader.trailer.get("/Info")
    if info is None:
        return None
    info = info.get_object()
    return info if isinstance(info, dict) else None


def _raw_string(info: Optional[dict], key: str) -> Optional[bytes]:
    """Return the still-encoded bytes of a string entry in the info dictionary."""
    if not info:
        return None
    value: Any = info.get(key)
    if value is None:
        return None
    value = value.get_object()

    if isinstance(value, TextStringObject):
        return value.original_bytes
    if isinstance(value, ByteStringObject):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return None


def _info_date(reader: PdfReader, attribute: str) -> Optional[datetime]:
    try:
        metadata = reader.metadata
        value = getattr(metadata, attribute) if metadata is not None else None
    except Exception as exc:
        logger.debug(
            "Ignoring unparsable info date",
            extra_data={"field": attribute, "error": str(exc)},
        )
        return None

    if value is not None and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
