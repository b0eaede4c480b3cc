"""Tests for the extraction orchestrator and the high-level API."""

from __future__ import annotations

import dataclasses

import pytest

from pdf_text_extractor.config import ExtractorConfig, OCRConfig
from pdf_text_extractor.exceptions import (
    DocumentTooLarge,
    InvalidDocument,
    ProcessingError,
)
from pdf_text_extractor.handler import DocumentHandler
from pdf_text_extractor.models import SourceDocument
from pdf_text_extractor.ocr import OcrService
from pdf_text_extractor.parser import extract_pdf
from tests.fakes import FakeImageExtractor, FakeOcrEngine, FakeTextExtractor
from tests.pdf_fixture_utils import (
    build_text_pdf,
    hex_string,
    scanned_like_bytes,
    text_only_bytes,
)

STRONG_TEXT = (
    "This annual report covers revenue, operating costs, staffing changes "
    "and the outlook for the coming fiscal year in every region."
)
PAGES = ["page-000.png", "page-001.png", "page-002.png"]


def _handler(
    text_extractor: FakeTextExtractor,
    engine: FakeOcrEngine | None = None,
    images: FakeImageExtractor | None = None,
    config: ExtractorConfig | None = None,
) -> DocumentHandler:
    engine = engine or FakeOcrEngine()
    images = images or FakeImageExtractor(PAGES)
    ocr = OcrService(engine=engine, image_extractor=images, config=OCRConfig(max_workers=2))
    return DocumentHandler(config=config, text_extractor=text_extractor, ocr_service=ocr)


def _document(content: bytes, name: str = "doc.pdf", mime_type: str | None = "application/pdf") -> SourceDocument:
    return SourceDocument(content=content, file_name=name, mime_type=mime_type)


def test_strong_direct_text_never_invokes_ocr() -> None:
    images = FakeImageExtractor(PAGES)
    engine = FakeOcrEngine(texts={"page-000.png": "x" * 500})

    result = _handler(FakeTextExtractor(f"  {STRONG_TEXT}\n"), engine, images).extract(
        _document(scanned_like_bytes())
    )

    assert result.text == STRONG_TEXT
    assert result.metadata.ocr_used is False
    assert images.calls == 0
    assert engine.recognized == []


def test_empty_text_layer_and_not_scanned_returns_empty_result() -> None:
    images = FakeImageExtractor(PAGES)
    data = text_only_bytes()

    result = _handler(FakeTextExtractor("  \n "), images=images).extract(_document(data))

    assert result.text == ""
    assert result.metadata.ocr_used is False
    assert result.pages == 1
    assert result.metadata.file_size_bytes == len(data)
    assert images.calls == 0


def test_empty_text_layer_of_scan_uses_ocr_pages_in_order() -> None:
    engine = FakeOcrEngine(
        texts={
            "page-000.png": "Página uno\n",
            "page-001.png": "Page two",
            "page-002.png": "\nPage three\n\f",
        }
    )

    result = _handler(FakeTextExtractor(""), engine).extract(_document(scanned_like_bytes(15)))

    assert result.text == "Página uno\n\nPage two\n\nPage three"
    assert result.metadata.ocr_used is True
    assert result.processing_time_ms >= 0


def test_scanned_document_without_ocr_engine_is_a_processing_error() -> None:
    handler = _handler(FakeTextExtractor(""), FakeOcrEngine(available=False))

    with pytest.raises(ProcessingError, match="requires OCR") as excinfo:
        handler.extract(_document(scanned_like_bytes()))

    assert "Tesseract is not installed" in str(excinfo.value)
    assert excinfo.value.causes


def test_textless_unscanned_document_without_ocr_engine_is_empty_result() -> None:
    handler = _handler(FakeTextExtractor(""), FakeOcrEngine(available=False))

    result = handler.extract(_document(text_only_bytes()))

    assert result.text == ""
    assert result.metadata.ocr_used is False


def test_ocr_failure_on_empty_scan_is_a_processing_error() -> None:
    handler = _handler(FakeTextExtractor(""), images=FakeImageExtractor([]))

    with pytest.raises(ProcessingError, match="No text found and OCR failed: No images"):
        handler.extract(_document(scanned_like_bytes()))


def test_weak_text_is_replaced_by_longer_ocr_output() -> None:
    engine = FakeOcrEngine(texts={"page-000.png": "Scanned invoice number 42 for ACME"})

    result = _handler(FakeTextExtractor("Invoice"), engine).extract(_document(scanned_like_bytes()))

    assert result.text == "Scanned invoice number 42 for ACME"
    assert result.metadata.ocr_used is True


def test_weak_text_is_kept_when_ocr_is_not_longer() -> None:
    engine = FakeOcrEngine(texts={"page-000.png": "Inv"})

    result = _handler(FakeTextExtractor(" Invoice 42 "), engine).extract(
        _document(scanned_like_bytes())
    )

    assert result.text == "Invoice 42"
    assert result.metadata.ocr_used is False


def test_weak_text_is_kept_when_ocr_does_not_apply() -> None:
    images = FakeImageExtractor(PAGES)

    result = _handler(FakeTextExtractor("Invoice 42"), images=images).extract(
        _document(text_only_bytes())
    )

    assert result.text == "Invoice 42"
    assert result.metadata.ocr_used is False
    assert images.calls == 0


def test_extractor_failure_falls_back_to_ocr() -> None:
    engine = FakeOcrEngine(texts={"page-001.png": "Recovered by OCR"})

    result = _handler(FakeTextExtractor(error="xref table broken"), engine).extract(
        _document(scanned_like_bytes())
    )

    assert result.text == "Recovered by OCR"
    assert result.metadata.ocr_used is True


def test_extractor_and_ocr_failure_combines_messages() -> None:
    handler = _handler(FakeTextExtractor(error="xref table broken"))

    with pytest.raises(ProcessingError) as excinfo:
        handler.extract(_document(text_only_bytes()))

    message = str(excinfo.value)
    assert "PDF extraction failed: xref table broken" in message
    assert "OCR failed: PDF does not appear to contain scanned content" in message
    assert len(excinfo.value.causes) == 2


def test_metadata_comes_from_structure_and_decoder() -> None:
    data = build_text_pdf(
        ["one", "two", "three"],
        info={
            "Title": hex_string(b"\xfe\xff" + "Contrato de arrendamiento".encode("utf-16-be")),
            "Author": hex_string("Lucía".encode("utf-16-be")),
            "ModDate": b"(D:20230301120000)",
        },
    )

    result = _handler(FakeTextExtractor(STRONG_TEXT)).extract(_document(data))

    assert result.pages == 3
    assert result.metadata.title == "Contrato de arrendamiento"
    assert result.metadata.author == "Lucía"
    assert result.metadata.modification_date.year == 2023
    assert result.to_dict()["metadata"]["modification_date"].startswith("2023-03-01T12:00:00")


def test_unparsable_buffer_gets_estimated_pages_and_no_metadata() -> None:
    data = b"%PDF-1.4\n" + b"\x00" * (200 * 1024)

    result = _handler(FakeTextExtractor(STRONG_TEXT)).extract(_document(data))

    assert result.pages == 4
    assert result.metadata.title is None
    assert result.metadata.author is None


INFO = {
    "Title": hex_string(b"\xfe\xff" + "Informe trimestral".encode("utf-16-be")),
    "Author": b"(Ana Torres)",
}


def test_empty_unscanned_result_carries_structure_metadata() -> None:
    images = FakeImageExtractor(PAGES)
    data = build_text_pdf(["", ""], info=INFO)

    result = _handler(FakeTextExtractor(""), images=images).extract(_document(data))

    assert result.text == ""
    assert result.metadata.ocr_used is False
    assert result.pages == 2
    assert result.metadata.title == "Informe trimestral"
    assert result.metadata.author == "Ana Torres"
    assert images.calls == 0


def test_ocr_result_on_empty_path_carries_structure_metadata() -> None:
    engine = FakeOcrEngine(texts={"page-000.png": "Texto reconocido"})
    data = build_text_pdf(["", ""], info={**INFO, "Producer": b"(CamScanner)"})

    result = _handler(FakeTextExtractor(""), engine).extract(_document(data))

    assert result.text == "Texto reconocido"
    assert result.metadata.ocr_used is True
    assert result.pages == 2
    assert result.metadata.title == "Informe trimestral"
    assert result.metadata.author == "Ana Torres"


def test_result_metadata_is_immutable() -> None:
    result = _handler(FakeTextExtractor(STRONG_TEXT)).extract(_document(build_text_pdf(["one"])))

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.metadata.ocr_used = True


@pytest.mark.parametrize(
    ("name", "mime_type", "content"),
    [
        ("notes.txt", "text/plain", b"%PDF-1.4"),
        ("notes.txt", None, b"plain text"),
    ],
)
def test_non_pdf_input_is_rejected(name: str, mime_type: str | None, content: bytes) -> None:
    extractor = FakeTextExtractor(STRONG_TEXT)

    with pytest.raises(InvalidDocument):
        _handler(extractor).extract(_document(content, name, mime_type))
    assert extractor.calls == 0


@pytest.mark.parametrize(
    ("name", "content"),
    [("scan.PDF", b"garbage"), ("upload.bin", b"%PDF-1.7 garbage")],
)
def test_pdf_is_recognized_by_extension_or_signature(name: str, content: bytes) -> None:
    result = _handler(FakeTextExtractor(STRONG_TEXT)).extract(_document(content, name, None))
    assert result.text == STRONG_TEXT


def test_size_ceiling_is_enforced_when_configured() -> None:
    handler = _handler(FakeTextExtractor(STRONG_TEXT), config=ExtractorConfig(max_file_size_mb=1))

    with pytest.raises(DocumentTooLarge, match="exceeds limit of 1MB"):
        handler.extract(_document(b"%PDF" + b"\x00" * (1024 * 1024)))


def test_extract_pdf_reads_real_text_layer(tmp_path) -> None:
    pdf_path = tmp_path / "report.pdf"
    pdf_path.write_bytes(build_text_pdf([STRONG_TEXT]))

    result = extract_pdf(file_path=str(pdf_path))

    assert "annual report covers revenue" in result.text
    assert result.pages == 1
    assert result.metadata.ocr_used is False


@pytest.mark.parametrize("name", ["upload.bin", "export.txt", "scan"])
def test_extract_pdf_recognizes_pdf_path_by_signature(tmp_path, name: str) -> None:
    pdf_path = tmp_path / name
    pdf_path.write_bytes(build_text_pdf([STRONG_TEXT]))

    result = extract_pdf(file_path=str(pdf_path))

    assert "annual report covers revenue" in result.text
    assert result.pages == 1


def test_extract_pdf_validates_arguments() -> None:
    with pytest.raises(ValueError, match="either file_path or file_bytes"):
        extract_pdf()
    with pytest.raises(ValueError, match="file_name is required"):
        extract_pdf(file_bytes=b"%PDF-1.4")
    with pytest.raises(ValueError, match="not both"):
        extract_pdf(file_path="a.pdf", file_bytes=b"%PDF")


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDF_MAX_FILE_SIZE_MB", "25")
    monkeypatch.setenv("PDF_OCR_LANGUAGES", "eng")
    monkeypatch.setenv("PDF_OCR_DPI", "not-a-number")

    config = ExtractorConfig.from_env()

    assert config.max_file_size_mb == 25
    assert config.ocr_config.languages == "eng"
    assert config.ocr_config.dpi == 150
