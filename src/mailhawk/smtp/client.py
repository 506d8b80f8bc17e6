# =============================================================================
# SMTP Sender
# =============================================================================
# Delivers a composed Message to an SMTP server.
#
# Key responsibilities:
#   - Choosing the session type: anonymous (plain TCP) when there is no
#     password, implicit TLS + AUTH PLAIN when there is one
#   - Issuing MAIL FROM, one RCPT TO per recipient, DATA, QUIT
#   - Translating aiosmtplib errors into our own exception types
#   - Closing the connection no matter which step failed
#
# Each send opens its own connection and closes it before returning; there
# is no pooling and no retrying. A refused recipient does not stop the send,
# it is recorded in the returned SendResult instead.
#
# Uses aiosmtplib for the protocol. send() is the blocking entry point and
# runs the async implementation to completion; async callers use
# send_async().
# =============================================================================

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import aiosmtplib
import keyring

from mailhawk.mime.composer import MessageComposer
from mailhawk.smtp.events import EventSink, SendEvent, SendEventKind, log_event

if TYPE_CHECKING:
    from mailhawk.core import Account, Message

# Ports used when the server address does not name one
DEFAULT_TLS_PORT = 465
DEFAULT_PLAIN_PORT = 25


@dataclass
class SendResult:
    """
    Outcome of a completed send.

    The message was accepted by the server for every address in
    `accepted`. Addresses in `rejected` were refused at RCPT time and did
    not get the message.

    Attributes:
        accepted: Envelope recipients the server accepted.
        rejected: One RecipientError per refused recipient.
    """
    accepted: list[str] = field(default_factory=list)
    rejected: list["RecipientError"] = field(default_factory=list)

    @property
    def rejected_addresses(self) -> list[str]:
        """Addresses of the refused recipients."""
        return [e.recipient for e in self.rejected]

    @property
    def all_accepted(self) -> bool:
        """True if no recipient was refused."""
        return not self.rejected


class SMTPSender:
    """
    Sends messages to one SMTP server.

    Usage:
        >>> sender = SMTPSender("me@example.com", "secret", "smtp.example.com:465")
        >>> result = sender.send(message)
        >>> result.rejected_addresses
        []

    Attributes:
        username: Envelope sender (MAIL FROM) and AUTH login.
        password: AUTH password. Empty selects the anonymous path.
        host: Server hostname.
        port: Server port.
        verify_tls: Verify the server certificate on the TLS path.
        timeout: Seconds allowed for each network operation.
    """

    # Timeout for SMTP operations (seconds)
    TIMEOUT = 30

    def __init__(
        self,
        username: str,
        password: str,
        host: str,
        *,
        verify_tls: bool = True,
        timeout: float = TIMEOUT,
        on_event: EventSink | None = None,
        composer: MessageComposer | None = None,
    ) -> None:
        """
        Initialize the sender.

        Args:
            username: Envelope sender address and login name.
            password: Login password; "" for anonymous relaying.
            host: Server as "host:port" (IPv6 as "[addr]:port"). The port
                  defaults to 465 with a password and 25 without.
            verify_tls: Set to False to accept any server certificate.
            timeout: Seconds allowed for each network operation.
            on_event: Receives a SendEvent for every step. Defaults to
                      log_event (standard logging).
            composer: Serializes messages. Defaults to a MessageComposer.
        """
        self.username = username
        self.password = password
        default_port = DEFAULT_TLS_PORT if password else DEFAULT_PLAIN_PORT
        self.host, self.port = split_host_port(host, default_port)
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.on_event = on_event or log_event
        self.composer = composer or MessageComposer()

    @classmethod
    def from_account(
        cls,
        account: "Account",
        password: str | None = None,
        **kwargs,
    ) -> "SMTPSender":
        """
        Create a sender for a configured account.

        The password is looked up in the system keyring unless given. No
        stored password means the account sends anonymously.
        """
        if password is None:
            password = keyring.get_password(account.keyring_service, account.email) or ""

        return cls(
            account.email,
            password,
            account.server_address,
            verify_tls=account.verify_tls,
            timeout=account.timeout,
            **kwargs,
        )

    @property
    def is_authenticated(self) -> bool:
        """True if sends go through TLS + AUTH."""
        return len(self.password) > 0

    @property
    def address(self) -> str:
        """The server as "host:port", for messages."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def send(self, message: "Message") -> SendResult:
        """
        Send a message, blocking until the session is over.

        Must not be called from a running event loop; use send_async there.

        Returns:
            Which recipients were accepted and which were refused.

        Raises:
            SMTPConnectionError: If the server cannot be reached.
            SMTPAuthenticationError: If AUTH is refused.
            EnvelopeError: If MAIL FROM is refused.
            TransmissionError: If the message data is not accepted.
        """
        return asyncio.run(self.send_async(message))

    async def send_async(self, message: "Message") -> SendResult:
        """Async version of send()."""
        data = self.composer.compose(message)
        client = self._create_client()

        mode = "AUTH" if self.is_authenticated else "anonymous"
        self._emit(
            SendEventKind.CONNECTING,
            f"{mode} connection with username {self.username}",
        )

        try:
            await self._connect(client)
            if self.is_authenticated:
                await self._authenticate(client)
            await self._mail_from(client)
            result = await self._recipients(client, message)
            await self._transmit(client, data, result)
            await self._quit(client)
            return result

        except SMTPError as e:
            self._emit(SendEventKind.FAILED, str(e), error=e)
            raise
        finally:
            if client.is_connected:
                client.close()
            self._emit(SendEventKind.CLOSED)

    # -------------------------------------------------------------------------
    # Session steps
    # -------------------------------------------------------------------------

    def _create_client(self) -> aiosmtplib.SMTP:
        """
        Build the (unconnected) aiosmtplib client.

        The authenticated path uses implicit TLS with the server name taken
        from the host. The anonymous path never upgrades to TLS.
        """
        return aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=self.is_authenticated,
            start_tls=False,
            validate_certs=self.verify_tls,
            timeout=self.timeout,
        )

    async def _connect(self, client: aiosmtplib.SMTP) -> None:
        try:
            await client.connect()
            await self._greet(client)
        except (aiosmtplib.SMTPException, OSError) as e:
            raise SMTPConnectionError(
                f"Failed to connect to SMTP {self.address}: {e}"
            ) from e
        self._emit(SendEventKind.CONNECTED)

    async def _greet(self, client: aiosmtplib.SMTP) -> None:
        """EHLO, falling back to HELO for servers without ESMTP."""
        try:
            await client.ehlo()
        except aiosmtplib.SMTPHeloError:
            await client.helo()

    async def _authenticate(self, client: aiosmtplib.SMTP) -> None:
        try:
            await client.auth_plain(self.username, self.password)
        except aiosmtplib.SMTPException as e:
            raise SMTPAuthenticationError(
                f"SMTP authentication failed for {self.username}: {e}"
            ) from e
        self._emit(SendEventKind.AUTHENTICATED, f"as {self.username}")

    async def _mail_from(self, client: aiosmtplib.SMTP) -> None:
        try:
            await client.mail(self.username)
        except aiosmtplib.SMTPException as e:
            raise EnvelopeError(f"Sender {self.username} refused: {e}") from e
        self._emit(SendEventKind.SENDER_ACCEPTED, self.username)

    async def _recipients(
        self,
        client: aiosmtplib.SMTP,
        message: "Message",
    ) -> SendResult:
        """
        RCPT TO for every To, CC and BCC address.

        A recipient refused by the server is recorded and skipped. Anything
        else (lost connection, timeout) ends the send.
        """
        result = SendResult()

        for recipient in message.all_recipients:
            address = recipient.address
            try:
                await client.rcpt(address)
            except aiosmtplib.SMTPResponseException as e:
                error = RecipientError(address, e.code, e.message)
                result.rejected.append(error)
                self._emit(
                    SendEventKind.RECIPIENT_REJECTED,
                    str(error),
                    recipient=address,
                    error=error,
                )
                continue
            except aiosmtplib.SMTPException as e:
                raise EnvelopeError(f"Failed while adding recipient {address}: {e}") from e

            result.accepted.append(address)
            self._emit(SendEventKind.RECIPIENT_ACCEPTED, address, recipient=address)

        return result

    async def _transmit(
        self,
        client: aiosmtplib.SMTP,
        data: bytes,
        result: SendResult,
    ) -> None:
        """
        DATA, the message, and the terminating '.'.

        The recipient results gathered so far travel with the error, so a
        caller can tell whether DATA failed because nobody was accepted.
        """
        try:
            await client.data(data)
        except aiosmtplib.SMTPException as e:
            raise TransmissionError(f"Message data not accepted: {e}", result) from e
        self._emit(SendEventKind.DATA_SENT, f"{len(data)} bytes")

    async def _quit(self, client: aiosmtplib.SMTP) -> None:
        """
        End the session politely.

        The server has already taken the message at this point, so a failed
        QUIT is reported but does not fail the send.
        """
        try:
            await client.quit()
        except aiosmtplib.SMTPException as e:
            self._emit(SendEventKind.QUIT_FAILED, str(e), error=e)

    def _emit(self, kind: SendEventKind, detail: str = "", **kwargs) -> None:
        self.on_event(SendEvent(kind=kind, host=self.address, detail=detail, **kwargs))


def split_host_port(address: str, default_port: int) -> tuple[str, int]:
    """
    Split "host:port" (or "[v6addr]:port") into its parts.

    Examples:
        >>> split_host_port("smtp.example.com:587", 25)
        ('smtp.example.com', 587)
        >>> split_host_port("[::1]", 25)
        ('::1', 25)

    Raises:
        ValueError: If the port is not a number.
    """
    if address.startswith("["):
        host, _, rest = address[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, _, port = address.partition(":")
    else:
        host, port = address, ""

    if not port:
        return host, default_port
    try:
        return host, int(port)
    except ValueError as e:
        raise ValueError(f"Invalid port in SMTP address {address!r}") from e


# =============================================================================
# Exceptions
# =============================================================================

class SMTPError(Exception):
    """Base exception for SMTP operations."""
    pass


class SMTPConnectionError(SMTPError):
    """Raised when unable to connect to SMTP server."""
    pass


class SMTPAuthenticationError(SMTPError):
    """Raised when SMTP authentication fails."""
    pass


class SendError(SMTPError):
    """Raised when a message cannot be handed over to the server."""
    pass


class EnvelopeError(SendError):
    """Raised when the server refuses the envelope sender (MAIL FROM)."""
    pass


class TransmissionError(SendError):
    """
    Raised when opening, writing or closing the DATA stream fails.

    Attributes:
        result: Accepted and refused recipients at the time of the failure.
    """

    def __init__(self, message: str, result: SendResult | None = None) -> None:
        super().__init__(message)
        self.result = result or SendResult()


class RecipientError(SMTPError):
    """
    A single recipient refused at RCPT time.

    Not raised by the sender; collected in SendResult.rejected.
    """

    def __init__(self, recipient: str, code: int, reply: str) -> None:
        super().__init__(f"Recipient {recipient} refused: {code} {reply}")
        self.recipient = recipient
        self.code = code
        self.reply = reply
