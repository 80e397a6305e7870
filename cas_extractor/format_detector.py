"""
CAS format detection.

Each supported statement format is described by a keyword signature.
A signature matches when enough of its distinct keywords occur in the
lower-cased document text.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


class CASFormat(Enum):
    """Statement formats the extractor can classify."""
    CDSL = "CDSL"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class FormatSignature:
    """
    Keyword evidence for one statement format.

    Attributes:
        cas_format: Format reported when the signature matches
        keywords: Lower-case phrases searched for in the text
        min_matches: Number of distinct keywords required
    """
    cas_format: CASFormat
    keywords: Tuple[str, ...]
    min_matches: int

    def count_matches(self, lowered_text: str) -> int:
        return sum(1 for keyword in self.keywords if keyword in lowered_text)

    def matches(self, lowered_text: str) -> bool:
        return self.count_matches(lowered_text) >= self.min_matches


# Ordered; the first satisfied signature wins
FORMAT_SIGNATURES: Tuple[FormatSignature, ...] = (
    FormatSignature(
        cas_format=CASFormat.CDSL,
        keywords=(
            "cdsl",
            "central depository services",
            "dp name",
            "dp id",
            "bo id",
        ),
        min_matches=2,
    ),
)


@dataclass(frozen=True)
class FormatDetection:
    """Outcome of format detection with the per-signature evidence."""
    cas_format: CASFormat
    match_counts: Dict[str, int]

    @property
    def is_known(self) -> bool:
        return self.cas_format is not CASFormat.UNKNOWN


def detect_format(
    text: str, signatures: Tuple[FormatSignature, ...] = FORMAT_SIGNATURES
) -> FormatDetection:
    """
    Classify canonical document text into a known CAS format.

    Args:
        text: Canonicalized full-document text.
        signatures: Signatures to evaluate, in priority order.

    Returns:
        FormatDetection naming the first matching format, or UNKNOWN.
    """
    lowered = (text or "").lower()
    counts: Dict[str, int] = {}
    detected = CASFormat.UNKNOWN

    for signature in signatures:
        hits = signature.count_matches(lowered)
        counts[signature.cas_format.value] = hits
        logger.debug(
            f"{signature.cas_format.value}: {hits}/{len(signature.keywords)} keywords "
            f"(need {signature.min_matches})"
        )
        if detected is CASFormat.UNKNOWN and hits >= signature.min_matches:
            detected = signature.cas_format

    logger.info(f"Detected CAS format: {detected.value}")
    return FormatDetection(cas_format=detected, match_counts=counts)
