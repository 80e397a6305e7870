"""
Text canonicalization and number/date normalization helpers.

CAS text arrives with arbitrary line wraps introduced by the PDF layout.
Everything downstream matches against a single-spaced canonical form, and
reads numbers and dates through the normalizers in this module.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

WHITESPACE_RE = re.compile(r"\s+")
NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
SHORT_DATE_RE = re.compile(r"^\d{2}-[A-Za-z]{3}-\d{4}$")


def clean_text(text: Optional[str]) -> str:
    """
    Collapse all runs of whitespace (including newlines) into single spaces.

    Args:
        text: Raw text, possibly None.

    Returns:
        Trimmed single-spaced text, or an empty string.
    """
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def parse_number(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse an Indian-formatted number such as ``1,23,456.78``.

    Grouping commas and any currency symbols are dropped. Anything that
    cannot be read as a number becomes ``Decimal("0")``.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value

    cleaned = NON_NUMERIC_RE.sub("", str(value).replace(",", ""))
    if not cleaned:
        return Decimal("0")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")


def parse_date(value: Optional[str]) -> str:
    """
    Convert a ``DD-MMM-YYYY`` date into ISO ``YYYY-MM-DD``.

    Month abbreviations are matched case-insensitively. Values in any other
    shape are returned unchanged.
    """
    if not value:
        return ""
    value = value.strip()
    if not SHORT_DATE_RE.match(value):
        return value
    day, month, year = value.split("-")
    try:
        parsed = datetime.strptime(f"{day}-{month.title()}-{year}", "%d-%b-%Y")
    except ValueError:
        return value
    return parsed.date().isoformat()
