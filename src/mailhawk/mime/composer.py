# =============================================================================
# MIME Composer
# =============================================================================
# Turns a Message into the exact bytes transmitted after SMTP DATA.
#
# There is only one structural shape, picked by two questions:
#
#   attachments?  both bodies?   structure
#   ------------  ------------   -----------------------------------------
#   no            no             flat single part (text/plain or text/html)
#   no            yes            multipart/alternative (html, text)
#   yes           no             multipart/mixed (body, attachment...)
#   yes           yes            multipart/mixed (
#                                    multipart/alternative (html, text),
#                                    attachment...)
#
# Wire rules:
#   - Every line ends with CRLF.
#   - Subject and attachment file names are ALWAYS base64 encoded words,
#     even when they are plain ASCII.
#   - Attachments are base64, wrapped at 76 characters per line.
#   - Inside multipart/alternative the HTML part comes first and the text
#     part last (the last alternative is the preferred rendering).
# =============================================================================

import base64
import secrets
from email.utils import formatdate, make_msgid
from typing import Callable

from mailhawk import __app_name__, __version__
from mailhawk.core.address import format_address_list
from mailhawk.core.message import Message
from mailhawk.mime.content_type import detect_content_type

CRLF = "\r\n"

# RFC 2045 line length limit for encoded bodies
BASE64_LINE_LENGTH = 76

MULTIPART_MIXED = "multipart/mixed"
MULTIPART_ALTERNATIVE = "multipart/alternative"
TEXT_HTML = "text/html"
TEXT_PLAIN = "text/plain"


def make_boundary() -> str:
    """A fresh random boundary token (60 hex characters)."""
    return secrets.token_hex(30)


def encode_word(text: str) -> str:
    """Wrap text as a UTF-8 base64 encoded word: =?UTF-8?B?...?="""
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{payload}?="


def wrap_base64(data: bytes, width: int = BASE64_LINE_LENGTH) -> str:
    """
    Base64-encode data as CRLF terminated lines of at most `width` chars.

    Empty data gives an empty string (no lines at all).
    """
    encoded = base64.b64encode(data).decode("ascii")
    return "".join(
        encoded[i:i + width] + CRLF for i in range(0, len(encoded), width)
    )


class MessageComposer:
    """
    Serializes Message objects to MIME.

    Two boundaries are drawn per call, so composing the same message twice
    does not give identical bytes. Pass a boundary_factory that returns
    fixed values when reproducible output is needed.

    Usage:
        >>> composer = MessageComposer()
        >>> raw = composer.compose(message)
    """

    def __init__(self, boundary_factory: Callable[[], str] = make_boundary) -> None:
        self.boundary_factory = boundary_factory

    def compose(self, message: Message) -> bytes:
        """
        Build the complete message: header block, then body.

        Returns:
            UTF-8 bytes ready for the SMTP DATA command.
        """
        mixed_boundary = self.boundary_factory()
        alternative_boundary = self.boundary_factory()

        lines = self._header_lines(message)

        if message.has_attachments:
            lines.append(_boundary_header(MULTIPART_MIXED, mixed_boundary))
            lines.append(CRLF)

            if message.body_text or message.body_html:
                lines.append(f"--{mixed_boundary}{CRLF}")
                lines.append(self._body(message, alternative_boundary))

            for name, data in message.attachments.items():
                lines.append(f"--{mixed_boundary}{CRLF}")
                lines.append(self._attachment(name, data))

            lines.append(f"--{mixed_boundary}--{CRLF}")
        elif message.body_text or message.body_html:
            lines.append(self._body(message, alternative_boundary))
        else:
            # No body at all: end the header block, leave the body empty
            lines.append(CRLF)

        return "".join(lines).encode("utf-8")

    # -------------------------------------------------------------------------
    # Building blocks
    # -------------------------------------------------------------------------

    def _header_lines(self, message: Message) -> list[str]:
        """Top-level headers, without the structural Content-Type."""
        sender = message.sender.render() if message.sender else ""
        domain = message.sender.domain if message.sender else ""

        lines = [
            f"From: {sender}{CRLF}",
            f"To: {format_address_list(message.to)}{CRLF}",
        ]
        if message.cc:
            lines.append(f"Cc: {format_address_list(message.cc)}{CRLF}")
        # Note: BCC is never written (that's the point of BCC)
        lines.append(f"Subject: {encode_word(message.subject)}{CRLF}")
        lines.append(f"Date: {formatdate(localtime=True)}{CRLF}")
        lines.append(f"Message-ID: {make_msgid(domain=domain or None)}{CRLF}")
        lines.append(f"X-Mailer: {__app_name__}/{__version__}{CRLF}")
        lines.append(f"MIME-Version: 1.0{CRLF}")
        return lines

    def _body(self, message: Message, alternative_boundary: str) -> str:
        """
        The body: a single text part, or HTML + text as alternatives.

        Starts with the part's own Content-Type header, so it can sit either
        at the top level or right after a mixed boundary delimiter.
        """
        if not message.has_both_bodies:
            if message.body_html:
                return _text_part(TEXT_HTML, message.body_html)
            return _text_part(TEXT_PLAIN, message.body_text)

        return "".join([
            _boundary_header(MULTIPART_ALTERNATIVE, alternative_boundary),
            CRLF,
            f"--{alternative_boundary}{CRLF}",
            _text_part(TEXT_HTML, message.body_html),
            f"--{alternative_boundary}{CRLF}",
            _text_part(TEXT_PLAIN, message.body_text),
            f"--{alternative_boundary}--{CRLF}",
        ])

    def _attachment(self, name: str, data: bytes) -> str:
        """One base64 attachment part (headers, blank line, wrapped data)."""
        return "".join([
            f"Content-Type: {detect_content_type(name, data)}{CRLF}",
            f"Content-Transfer-Encoding: base64{CRLF}",
            f'Content-Disposition: attachment; filename="{encode_word(name)}"{CRLF}',
            CRLF,
            wrap_base64(data),
        ])


def _boundary_header(content_type: str, boundary: str) -> str:
    return f"Content-Type: {content_type}; boundary={boundary}{CRLF}"


def _text_part(content_type: str, content: str) -> str:
    return f"Content-Type: {content_type}; charset=utf-8{CRLF}{CRLF}{content}{CRLF}"


def compose(
    message: Message,
    boundary_factory: Callable[[], str] = make_boundary,
) -> bytes:
    """Serialize a message with a one-off MessageComposer."""
    return MessageComposer(boundary_factory).compose(message)
