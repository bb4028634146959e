from __future__ import annotations

import re
from typing import Optional

_VALID_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ANGLE_BRACKET = re.compile(r"<([^>]+)>")
_BARE_EMAIL = re.compile(r"[\w.-]+@[\w.-]+\.\w+")


def validate_email(email: str) -> bool:
    """Basic local@domain.tld shape check."""
    return bool(_VALID_EMAIL.match(email))


def extract_email_address(text: str) -> str:
    """
    Pull an address out of sender display text.
    Handles "Name <mail@domain>" first, then a bare address anywhere in the
    text, and falls back to the trimmed text itself.
    """
    match = _ANGLE_BRACKET.search(text)
    if match:
        return match.group(1)

    match = _BARE_EMAIL.search(text)
    if match:
        return match.group(0)

    return text.strip()


def parse_sender_text(text: Optional[str]) -> Optional[str]:
    """Return a validated address parsed from text, or None."""
    if not text or "@" not in text:
        return None
    candidate = extract_email_address(text).strip()
    if candidate and validate_email(candidate):
        return candidate
    return None
