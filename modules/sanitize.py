"""
Request input sanitization.

Identifiers, dispenser addresses and copy text arrive from the query string
or JSON bodies and end up in templates and log lines.
"""

from typing import Optional

import bleach

MAX_STAMP_ID_LENGTH = 128
MAX_ADDRESS_LENGTH = 128
MAX_COPY_TEXT_LENGTH = 256


def sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Strip whitespace and all markup; truncate to max_length."""
    if not text:
        return ""
    text = text.strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text
