"""Data models for the PDF text extractor."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

PDF_SIGNATURE = b"%PDF"
PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class SourceDocument:
    """Raw document handed over by the caller. Never mutated."""

    content: bytes = field(repr=False)
    file_name: str
    mime_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    def is_pdf(self) -> bool:
        """A declared MIME type wins; otherwise the extension or signature decides."""
        if self.mime_type:
            return self.mime_type.lower() == PDF_MIME_TYPE
        return self.file_name.lower().endswith(".pdf") or self.content.startswith(
            PDF_SIGNATURE
        )

    @classmethod
    def from_path(cls, path, mime_type: Optional[str] = None) -> "SourceDocument":
        path = Path(path)
        return cls(content=path.read_bytes(), file_name=path.name, mime_type=mime_type)


@dataclass(frozen=True)
class DocumentMetadata:
    """Document-level metadata attached to a finished extraction."""

    file_size_bytes: int
    title: Optional[str] = None
    author: Optional[str] = None
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    ocr_used: bool = False


@dataclass(frozen=True)
class ExtractionResult:
    """Result of a single extraction call."""

    text: str
    pages: int
    metadata: DocumentMetadata
    processing_time_ms: int

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation with ISO-8601 dates."""
        data = asdict(self)
        for key in ("creation_date", "modification_date"):
            value = data["metadata"][key]
            if value is not None:
                data["metadata"][key] = value.isoformat()
        return data


@dataclass(frozen=True)
class ClassificationScore:
    """Marker counts gathered by the scanned-content classifier."""

    image_markers: int
    text_markers: int
    scan_app_signature: Optional[str] = None
    likely_scanned: bool = False


@dataclass(frozen=True)
class StructureInfo:
    """What the structural parse could recover. Fields are None when unknown."""

    page_count: Optional[int] = None
    raw_title: Optional[bytes] = None
    raw_author: Optional[bytes] = None
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.error is None
