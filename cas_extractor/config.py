"""Tunable limits for the CAS extractor."""

import os


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


PARSER_VERSION = "2.0.0"

# Extracted text shorter than this is treated as an image-only PDF
MIN_TEXT_LENGTH = _env_int("CAS_EXTRACTOR_MIN_TEXT_LENGTH", 100)

# Enforced by callers (the CLI) before parsing starts
MAX_FILE_SIZE = _env_int("CAS_EXTRACTOR_MAX_FILE_SIZE", 10 * 1024 * 1024)

MIN_ACCOUNT_SECTION_LENGTH = 100

# Pages with less text than this are re-extracted in layout mode
LAYOUT_FALLBACK_THRESHOLD = 100
