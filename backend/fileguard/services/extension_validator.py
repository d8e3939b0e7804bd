"""Syntax check for extension strings (no dots, no punctuation, max 20 chars)."""
import re

MAX_EXTENSION_LENGTH = 20

_EXTENSION_RE = re.compile(r"^[A-Za-z0-9]+$")


def normalize_extension(ext: str) -> str:
    """Trim and lower-case an extension for storage and comparison."""
    return ext.strip().lower()


def validate_extension(ext: str | None) -> bool:
    """Return True if `ext` is a non-blank, alphanumeric string of at most 20 chars."""
    if ext is None:
        return False
    value = ext.strip()
    if not value or len(value) > MAX_EXTENSION_LENGTH:
        return False
    return bool(_EXTENSION_RE.match(value))
