"""
Normalization utilities for lezec.cz diary data.

Handles:
- windows-1250 page decoding
- Diary date format (01.01.2024)
- Composite grade cells ("6a [6a+]")
- Route link titles ("partners - note")
"""

import re
from typing import Optional


# lezec.cz serves every page in this code page, regardless of headers
PAGE_ENCODING = "cp1250"

DATE_PATTERN = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")

# "<suggested> [<origin>]"
GRADE_PATTERN = re.compile(r"^(.+?)\s*\[(.+?)\]$")

TITLE_SEPARATOR = " - "


def decode_page(content: bytes) -> str:
    """
    Decode a raw response body from lezec.cz.

    Args:
        content: Response bytes

    Bytes the code page leaves undefined (0x81, 0x98, ...) become
    U+FFFD instead of failing the whole page.

    Returns:
        Decoded markup
    """
    return content.decode(PAGE_ENCODING, errors="replace")


def clean_text(text: Optional[str]) -> str:
    """Strip surrounding whitespace; None becomes an empty string."""
    if not text:
        return ""
    return text.strip()


def is_diary_date(text: str) -> bool:
    """Check that text is a DD.MM.YYYY diary date."""
    return bool(DATE_PATTERN.match(text))


def parse_grade(raw: str) -> tuple[str, Optional[str]]:
    """
    Split a grade cell into origin and suggested grade.

    "6a [6a+]" -> ("6a+", "6a"): the bracketed part is the grade the
    route is listed with, the prefix is the climber's suggestion.
    Anything else is taken verbatim as the origin grade.

    Args:
        raw: Grade cell text (already stripped)

    Returns:
        Tuple of (origin_grade, suggested_grade or None)
    """
    match = GRADE_PATTERN.match(raw)
    if match:
        return match.group(2).strip(), match.group(1).strip()

    return raw, None


def parse_title(raw: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Split a route link title into partners and note.

    Only the first two segments are used: "A - B - C" gives
    partners "A" and note "B", and "C" is dropped.

    Args:
        raw: Title attribute of the route link

    Returns:
        Tuple of (partners, note); both None for an empty title.
        Partners may be an empty string (title starting with " - ").
    """
    if not raw:
        return None, None

    parts = raw.split(TITLE_SEPARATOR)
    partners = parts[0].strip()
    note = parts[1].strip() if len(parts) > 1 else None

    return partners, note


def parse_attempts(text: str) -> Optional[int]:
    """Parse the attempts cell; non-numeric text gives None."""
    text = text.strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        return None
    return int(text)
