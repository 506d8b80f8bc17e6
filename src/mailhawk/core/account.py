# =============================================================================
# Account Model
# =============================================================================
# Represents a sending account: who we are and which SMTP server we talk to.
#
# IMPORTANT: Passwords are NOT stored here. They are retrieved from the system
# keyring at runtime using the 'keyring' library. This keeps credentials
# secure and out of config files. An account without a stored password is
# sent through anonymously (plain SMTP, no AUTH).
# =============================================================================

from dataclasses import dataclass
from email.utils import formataddr

from mailhawk.core.address import Address


@dataclass
class Account:
    """
    Represents an email account used for sending.

    Attributes:
        name: A unique identifier for this account (e.g., "personal", "relay").
              Used as the key in config files and for keyring lookups.
        email: The address used as SMTP envelope sender and as AUTH login.
        display_name: The name shown in the "From" field.
                      Defaults to the email address if not specified.

        smtp_host: Hostname of the SMTP server (e.g., "smtp.example.com").
        smtp_port: Port for the SMTP connection. None picks the default for
                   the session type when sending. Standard ports:
                   - 465 for SMTP over implicit TLS (authenticated sends)
                   - 25 for plain relays (anonymous sends)
        verify_tls: Verify the server certificate on TLS connections.
                    Only turn this off for test servers with self-signed certs.
        timeout: Seconds allowed for each network operation.

    Example:
        >>> account = Account(
        ...     name="personal",
        ...     email="user@example.com",
        ...     display_name="John Doe",
        ...     smtp_host="smtp.example.com",
        ...     smtp_port=465,
        ... )
    """

    # Account identification
    name: str                           # Unique account identifier
    email: str                          # Envelope sender / login
    display_name: str = ""              # Name shown in "From" field

    # SMTP configuration
    smtp_host: str = ""
    smtp_port: int | None = None        # None: 465 with a password, 25 without
    verify_tls: bool = True
    timeout: float = 30

    def __post_init__(self) -> None:
        """
        Post-initialization processing.
        Sets display_name to email if not provided.
        """
        if not self.display_name:
            self.display_name = self.email

    @property
    def keyring_service(self) -> str:
        """
        Returns the service name used for keyring password storage.

        Passwords can be managed with the keyring CLI:
            keyring set mailhawk:personal user@example.com
        """
        return f"mailhawk:{self.name}"

    @property
    def server_address(self) -> str:
        """The SMTP server as "host:port", or just the host if no port is set."""
        host = f"[{self.smtp_host}]" if ":" in self.smtp_host else self.smtp_host
        if self.smtp_port is None:
            return host
        return f"{host}:{self.smtp_port}"

    @property
    def sender_address(self) -> Address:
        """The account as the From address of outgoing messages."""
        if self.display_name and self.display_name != self.email:
            return Address(self.display_name, self.email)
        return Address(address=self.email)

    @property
    def from_header(self) -> str:
        """The sender as it should appear in the From header."""
        address = self.sender_address
        return formataddr((address.name, address.address))

    def __str__(self) -> str:
        """Human-readable representation showing account name and email."""
        return f"{self.name} <{self.email}>"

    def __repr__(self) -> str:
        """Developer-friendly representation with key fields."""
        return (
            f"Account(name={self.name!r}, email={self.email!r}, "
            f"smtp={self.server_address})"
        )
