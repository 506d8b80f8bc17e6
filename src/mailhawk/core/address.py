# =============================================================================
# Address Model
# =============================================================================
# A thin wrapper around an email address with an optional display name.
#
# Addresses are NOT validated. Whatever the standard library parser manages
# to extract is kept; if it extracts nothing, the raw text becomes the
# address so malformed input travels on to the SMTP server as-is (the server
# is the one that gets to reject it).
# =============================================================================

from dataclasses import dataclass
from email.utils import formataddr, parseaddr
from typing import Iterable


@dataclass(frozen=True)
class Address:
    """
    An email address, optionally with a display name.

    Attributes:
        name: Display name (e.g., "Jane Doe"). May be empty.
        address: The mailbox itself (e.g., "jane@example.com").

    Example:
        >>> str(Address.parse("Jane Doe <jane@example.com>"))
        'Jane Doe <jane@example.com>'
        >>> str(Address.parse("jane@example.com"))
        'jane@example.com'
    """
    name: str = ""
    address: str = ""

    @classmethod
    def parse(cls, text: str) -> "Address":
        """
        Parse "Display Name <addr>" or a bare "addr".

        Falls back to the stripped raw text when nothing can be parsed.
        """
        name, addr = parseaddr(text)
        if not addr:
            return cls(address=text.strip())
        return cls(name=name, address=addr)

    @property
    def domain(self) -> str:
        """The part after the last '@', or empty if there is none."""
        _, sep, domain = self.address.rpartition("@")
        return domain if sep else ""

    def render(self) -> str:
        """
        Returns the header form of this address.

        Non-ASCII display names come out as UTF-8 encoded words.
        """
        if not self.name:
            return self.address
        return formataddr((self.name, self.address), charset="utf-8")

    def __str__(self) -> str:
        return self.render()


def format_address_list(addresses: Iterable[Address]) -> str:
    """Render addresses for a To/Cc header, comma separated."""
    return ", ".join(a.render() for a in addresses)
