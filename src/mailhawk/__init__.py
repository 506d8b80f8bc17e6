# =============================================================================
# mailhawk: MIME Message Composer and SMTP Sender
# =============================================================================
#
# mailhawk builds an email (headers, plain text and/or HTML body, file
# attachments) into a wire-correct MIME byte stream and delivers it to an
# SMTP server, anonymously or over TLS with AUTH PLAIN.
#
# Features:
#   - Fixed, predictable MIME structure (flat / alternative / mixed)
#   - Encoded-word Subject and attachment names (Unicode safe)
#   - Attachment type detection by content, refined by file extension
#   - Per-recipient delivery results
#   - Structured send events, logged by default
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "mailhawk"

from mailhawk.core import Address, AttachmentReadError, Message
from mailhawk.mime import MessageComposer, compose
from mailhawk.smtp import SMTPSender, SendResult, SMTPError

__all__ = [
    "__version__",
    "__app_name__",
    "Address",
    "AttachmentReadError",
    "Message",
    "MessageComposer",
    "compose",
    "SMTPSender",
    "SendResult",
    "SMTPError",
]
