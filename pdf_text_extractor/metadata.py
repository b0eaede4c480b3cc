"""Decoding of PDF document-info strings (Title, Author, ...).

PDF text strings are either PDFDocEncoding/UTF-8 bytes or UTF-16, usually with
a byte-order mark. Plenty of producers write UTF-16BE without the mark, so a
high share of zero bytes is taken as a hint as well.
"""

from typing import Optional

BOM_UTF16_BE = b"\xfe\xff"
BOM_UTF16_LE = b"\xff\xfe"


def decode_pdf_string(raw: bytes) -> Optional[str]:
    """Decode a raw info-dictionary string into readable text.

    Returns None when nothing but whitespace remains.
    """
    if raw.startswith(BOM_UTF16_BE):
        text = _decode_utf16(raw[2:], "utf-16-be")
    elif raw.startswith(BOM_UTF16_LE):
        text = _decode_utf16(raw[2:], "utf-16-le")
    elif _looks_like_utf16(raw):
        text = _decode_utf16(raw, "utf-16-be")
    else:
        text = raw.decode("utf-8", errors="replace")

    text = text.strip()
    return text or None


def decode_info_field(raw: Optional[bytes]) -> Optional[str]:
    if raw is None:
        return None
    return decode_pdf_string(raw)


def _looks_like_utf16(raw: bytes) -> bool:
    if len(raw) < 2:
        return False
    return raw.count(0) > len(raw) // 3


def _decode_utf16(raw: bytes, codec: str) -> str:
    # Trailing odd byte is ignored, lone surrogates are dropped
    usable = raw[: len(raw) - len(raw) % 2]
    text = usable.decode(codec, errors="ignore")
    return text.replace("\x00", "")
