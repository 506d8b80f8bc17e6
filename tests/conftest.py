# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the mailhawk test suite.
#
# The SMTP server is replaced by FakeServer: it hands out FakeSMTP objects
# in place of aiosmtplib.SMTP and records every command they receive, so
# tests can check the exact command sequence of a send.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

import aiosmtplib

from mailhawk.core import Account, Message


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_boundaries():
    """A boundary factory returning MIXED, then ALT, for readable output."""
    def factory():
        values = iter(["MIXED", "ALT"])
        return lambda: next(values)
    return factory


@pytest.fixture
def sample_account():
    """Create a sample Account for testing."""
    return Account(
        name="test",
        email="test@example.com",
        display_name="Test User",
        smtp_host="smtp.example.com",
        smtp_port=465,
    )


@pytest.fixture
def sample_message():
    """A message with three recipients spread over To, CC and BCC."""
    message = Message(
        subject="Test Subject",
        body_text="This is a test email body.",
        body_html="<p>This is a <b>test</b> email body.</p>",
    )
    message.set_from("Test User <test@example.com>")
    message.set_to(["alice@example.com"])
    message.set_cc(["bob@example.com"])
    message.set_bcc(["carol@example.com"])
    return message


# =============================================================================
# Fake SMTP server
# =============================================================================

class FakeSMTP:
    """Stands in for aiosmtplib.SMTP; records commands on its server."""

    def __init__(self, server: "FakeServer", **kwargs) -> None:
        self.server = server
        self.kwargs = kwargs
        self.is_connected = False
        self.closed = False

    async def connect(self):
        self.server.commands.append("CONNECT")
        if "connect" in self.server.failures:
            raise aiosmtplib.SMTPConnectError("Connection refused")
        self.is_connected = True

    async def ehlo(self):
        self.server.commands.append("EHLO")
        if "ehlo" in self.server.failures:
            raise aiosmtplib.SMTPHeloError(502, "Command not implemented")

    async def helo(self):
        self.server.commands.append("HELO")
        if "helo" in self.server.failures:
            raise aiosmtplib.SMTPHeloError(501, "Syntax error")

    async def auth_plain(self, username, password):
        self.server.commands.append(f"AUTH PLAIN {username}")
        if "auth" in self.server.failures:
            raise aiosmtplib.SMTPAuthenticationError(535, "Authentication credentials invalid")

    async def mail(self, sender):
        self.server.commands.append(f"MAIL FROM:<{sender}>")
        if "mail" in self.server.failures:
            raise aiosmtplib.SMTPSenderRefused(550, "Sender rejected", sender)

    async def rcpt(self, recipient):
        self.server.commands.append(f"RCPT TO:<{recipient}>")
        if recipient in self.server.rejected:
            raise aiosmtplib.SMTPRecipientRefused(550, "No such user", recipient)
        if "rcpt" in self.server.failures:
            raise aiosmtplib.SMTPServerDisconnected("Connection lost")

    async def data(self, message):
        self.server.commands.append("DATA")
        if "data" in self.server.failures:
            raise aiosmtplib.SMTPDataError(554, "Transaction failed")
        self.server.received.append(message)

    async def quit(self):
        self.server.commands.append("QUIT")
        if "quit" in self.server.failures:
            raise aiosmtplib.SMTPServerDisconnected("Connection lost")
        self.is_connected = False

    def close(self):
        self.is_connected = False
        self.closed = True


class FakeServer:
    """
    Collects what FakeSMTP clients do.

    Attributes:
        failures: Steps that should fail ("connect", "ehlo", "helo", "auth",
                  "mail", "rcpt", "data", "quit").
        rejected: Recipients refused at RCPT time.
        commands: Commands in the order they were issued.
        received: Message data accepted by DATA.
        clients: Every FakeSMTP created.
    """

    def __init__(self) -> None:
        self.failures: set[str] = set()
        self.rejected: set[str] = set()
        self.commands: list[str] = []
        self.received: list[bytes] = []
        self.clients: list[FakeSMTP] = []

    def __call__(self, **kwargs) -> FakeSMTP:
        client = FakeSMTP(self, **kwargs)
        self.clients.append(client)
        return client


@pytest.fixture
def smtp_server(monkeypatch):
    """Replace aiosmtplib.SMTP with a recording fake."""
    server = FakeServer()
    monkeypatch.setattr(aiosmtplib, "SMTP", server)
    return server
