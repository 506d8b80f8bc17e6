# =============================================================================
# MIME Module
# =============================================================================
# Produces wire-ready MIME messages. This is a composer only — there is no
# parser here, and only one structural shape is ever produced (see
# mailhawk.mime.composer for the layout).
# =============================================================================

from mailhawk.mime.composer import (
    MessageComposer,
    compose,
    encode_word,
    make_boundary,
    wrap_base64,
)
from mailhawk.mime.content_type import detect_content_type, sniff_content_type

__all__ = [
    "MessageComposer",
    "compose",
    "encode_word",
    "make_boundary",
    "wrap_base64",
    "detect_content_type",
    "sniff_content_type",
]
