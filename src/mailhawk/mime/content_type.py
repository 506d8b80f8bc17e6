# =============================================================================
# Attachment Content-Type Detection
# =============================================================================
# Works out the Content-Type of an attachment from its bytes and file name.
#
# Strategy:
#   1. Sniff the first bytes for well-known signatures (magic numbers).
#   2. If sniffing only says "this looks like text", ask the file extension.
#      Sniffing cannot tell CSV from Markdown from source code, the
#      extension can.
#   3. ZIP containers also ask the extension (.docx/.xlsx/.pptx are ZIPs).
# =============================================================================

import mimetypes

# How much of the content is inspected
SNIFF_LENGTH = 512

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"
ZIP = "application/zip"

# (prefix, content type) - checked in order
SIGNATURES: list[tuple[bytes, str]] = [
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"PK\x03\x04", ZIP),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"\x00asm", "application/wasm"),
]

# Byte-order marks make otherwise binary-looking data text
BOMS: list[tuple[bytes, str]] = [
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_PLAIN),
]

# Leading tags that mark an HTML document (compared case-insensitively)
HTML_MARKERS = [
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
]

# Control bytes that never show up in text
BINARY_BYTES = frozenset(
    [*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)]
)


def sniff_content_type(data: bytes) -> str:
    """
    Guess a content type from the first bytes of the data.

    Always returns something: "text/plain; charset=utf-8" for anything
    that looks like text (including empty data), "application/octet-stream"
    for unrecognised binary data.
    """
    head = data[:SNIFF_LENGTH]

    for bom, content_type in BOMS:
        if head.startswith(bom):
            return content_type

    stripped = head.lstrip(b"\t\n\x0c\r ")
    upper = stripped.upper()
    for marker in HTML_MARKERS:
        if upper.startswith(marker):
            # The tag has to end here, "<Bogus" is not "<B"
            rest = stripped[len(marker):len(marker) + 1]
            if rest in (b" ", b">"):
                return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    for signature, content_type in SIGNATURES:
        if head.startswith(signature):
            return content_type
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"

    if any(b in BINARY_BYTES for b in head):
        return OCTET_STREAM
    return TEXT_PLAIN


def guess_by_extension(filename: str) -> str | None:
    """Content type registered for the file's extension, or None."""
    content_type, _ = mimetypes.guess_type(filename, strict=False)
    return content_type


def detect_content_type(filename: str, data: bytes) -> str:
    """
    The Content-Type to announce for an attachment.

    Sniffed types win, except generic text and ZIP containers where a
    known extension is more specific.

    Examples:
        >>> detect_content_type("photo.jpg", b"\\xff\\xd8\\xff\\xe0...")
        'image/jpeg'
        >>> detect_content_type("data.csv", b"a,b\\n1,2\\n")
        'text/csv'
    """
    sniffed = sniff_content_type(data)
    if sniffed.startswith("text/plain") or sniffed == ZIP:
        by_extension = guess_by_extension(filename)
        if by_extension:
            return by_extension
    return sniffed
