# =============================================================================
# Message Model
# =============================================================================
# Represents an outgoing email message before it is serialized:
#   - Envelope/header addresses (From, To, CC, BCC)
#   - Subject
#   - Body as plain text, HTML, or both
#   - File attachments (name -> raw bytes)
#
# The model is plain data. Serialization lives in mailhawk.mime, sending in
# mailhawk.smtp. Once a Message is handed to a sender it is only read.
# =============================================================================

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from mailhawk.core.address import Address


@dataclass
class Message:
    """
    An email message being put together for sending.

    Attributes:
        subject: Subject line (any Unicode text; always encoded on the wire).
        body_text: Plain text body. Empty means "no text part".
        body_html: HTML body. Empty means "no HTML part".
        sender: The From address. None until set_from() is called.
        to: "To" recipients, in order.
        cc: "CC" recipients, in order.
        bcc: "BCC" recipients. Used for the SMTP envelope only, never
             written into the headers.
        attachments: File name -> raw content. Insertion ordered. Adding a
                     second attachment with the same name replaces the
                     content but keeps the original position.

    Example:
        >>> message = Message(subject="Hi", body_text="hello")
        >>> message.set_from("Alice <alice@example.com>")
        >>> message.set_to(["bob@example.com"])
        >>> message.attach_file("~/report.pdf")
        >>> raw = message.to_bytes()
    """
    subject: str = ""
    body_text: str = ""
    body_html: str = ""

    sender: Address | None = None
    to: list[Address] = field(default_factory=list)
    cc: list[Address] = field(default_factory=list)
    bcc: list[Address] = field(default_factory=list)

    # Content types are derived at serialization time, never stored here
    attachments: dict[str, bytes] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Address setters
    # -------------------------------------------------------------------------

    def set_from(self, text: str) -> None:
        """Set the sender from a string like "Name <addr>" or "addr"."""
        self.sender = Address.parse(text)

    def set_to(self, texts: Iterable[str]) -> None:
        """Replace the To list."""
        self.to = _parse_all(texts)

    def set_cc(self, texts: Iterable[str]) -> None:
        """Replace the CC list."""
        self.cc = _parse_all(texts)

    def set_bcc(self, texts: Iterable[str]) -> None:
        """Replace the BCC list."""
        self.bcc = _parse_all(texts)

    # -------------------------------------------------------------------------
    # Attachments
    # -------------------------------------------------------------------------

    def attach(self, name: str, data: bytes) -> None:
        """Attach in-memory content under the given file name."""
        self.attachments[name] = bytes(data)

    def attach_file(self, path: str | Path) -> None:
        """
        Read a file and attach it under its base name.

        The directory part of the path is dropped. The file is read fully
        before anything is stored, so a failed read leaves the message
        untouched.

        Raises:
            AttachmentReadError: If the file cannot be opened or read.
        """
        file_path = Path(path).expanduser()
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise AttachmentReadError(f"Cannot read attachment {path}: {e}") from e

        self.attach(file_path.name, data)

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def all_recipients(self) -> list[Address]:
        """To, CC and BCC combined, in that order (the SMTP envelope)."""
        return [*self.to, *self.cc, *self.bcc]

    @property
    def has_attachments(self) -> bool:
        """Returns True if at least one file is attached."""
        return len(self.attachments) > 0

    @property
    def has_both_bodies(self) -> bool:
        """Returns True if both a text and an HTML body are present."""
        return bool(self.body_text) and bool(self.body_html)

    def to_bytes(self) -> bytes:
        """Serialize to the bytes sent after the SMTP DATA command."""
        from mailhawk.mime.composer import compose

        return compose(self)

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return (
            f"Message(subject={self.subject!r}, from={self.sender!r}, "
            f"to={len(self.to)}, cc={len(self.cc)}, bcc={len(self.bcc)}, "
            f"attachments={list(self.attachments)})"
        )


def _parse_all(texts: Iterable[str]) -> list[Address]:
    return [Address.parse(t) for t in texts]


# =============================================================================
# Exceptions
# =============================================================================

class AttachmentReadError(OSError):
    """Raised when an attachment file cannot be opened or fully read."""
    pass
