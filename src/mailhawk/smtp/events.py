# =============================================================================
# Send Events
# =============================================================================
# The SMTP sender does not log directly. It reports what happens during a
# send to an event sink (a plain callable) supplied by the caller. The
# default sink, log_event, turns events into log records, so a caller that
# passes nothing gets ordinary logging and a caller that passes its own sink
# gets structured events and no log output from the sender.
# =============================================================================

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class SendEventKind(Enum):
    """The steps (and failures) reported while sending a message."""
    CONNECTING = "connecting"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"
    SENDER_ACCEPTED = "sender_accepted"
    RECIPIENT_ACCEPTED = "recipient_accepted"
    RECIPIENT_REJECTED = "recipient_rejected"
    DATA_SENT = "data_sent"
    QUIT_FAILED = "quit_failed"
    FAILED = "failed"
    CLOSED = "closed"


@dataclass(frozen=True)
class SendEvent:
    """
    One thing that happened during a send.

    Attributes:
        kind: What happened.
        host: The "host:port" of the SMTP server.
        detail: Human-readable description.
        recipient: The envelope recipient, for RECIPIENT_* events.
        error: The exception behind failure events.
    """
    kind: SendEventKind
    host: str
    detail: str = ""
    recipient: str | None = None
    error: BaseException | None = None


EventSink = Callable[[SendEvent], None]


# Log level per event kind; anything not listed is DEBUG
_LEVELS = {
    SendEventKind.CONNECTING: logging.INFO,
    SendEventKind.DATA_SENT: logging.INFO,
    SendEventKind.RECIPIENT_REJECTED: logging.WARNING,
    SendEventKind.QUIT_FAILED: logging.WARNING,
    SendEventKind.FAILED: logging.ERROR,
}


def log_event(event: SendEvent) -> None:
    """Default sink: write the event to the module logger."""
    level = _LEVELS.get(event.kind, logging.DEBUG)
    message = f"[{event.host}] {event.kind.value}"
    if event.detail:
        message += f": {event.detail}"
    logger.log(level, message)
