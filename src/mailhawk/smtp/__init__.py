# =============================================================================
# SMTP Module
# =============================================================================
# Handles sending emails via SMTP (Simple Mail Transfer Protocol).
#
# Features:
#   - Anonymous relaying over plain TCP
#   - Implicit TLS with AUTH PLAIN (certificate checks on by default)
#   - Per-recipient results instead of silently dropped recipients
#   - Structured send events (logged by default)
# =============================================================================

from mailhawk.smtp.client import (
    SMTPSender,
    SendResult,
    SMTPError,
    SMTPConnectionError,
    SMTPAuthenticationError,
    SendError,
    EnvelopeError,
    RecipientError,
    TransmissionError,
    split_host_port,
)
from mailhawk.smtp.events import EventSink, SendEvent, SendEventKind, log_event

__all__ = [
    "SMTPSender",
    "SendResult",
    "SMTPError",
    "SMTPConnectionError",
    "SMTPAuthenticationError",
    "SendError",
    "EnvelopeError",
    "RecipientError",
    "TransmissionError",
    "split_host_port",
    "EventSink",
    "SendEvent",
    "SendEventKind",
    "log_event",
]
