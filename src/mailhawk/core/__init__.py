# =============================================================================
# mailhawk Core Module
# =============================================================================
# This module contains the core domain models for mailhawk. These are pure
# Python dataclasses with no external dependencies — they can be imported
# anywhere without causing circular dependency issues.
#
# The core models represent:
#   - Address: An email address with an optional display name
#   - Message: An outgoing email (headers, bodies, attachments)
#   - Account: A sending account (SMTP server details)
# =============================================================================

from mailhawk.core.account import Account
from mailhawk.core.address import Address, format_address_list
from mailhawk.core.message import AttachmentReadError, Message

__all__ = [
    "Account",
    "Address",
    "format_address_list",
    "Message",
    "AttachmentReadError",
]
