"""
Account section segmentation for CDSL CAS text.

The canonical text of a CDSL statement repeats a ``DP Name :`` header for
every demat account. This module cuts the text into one slice per account
using anchor-to-next-anchor slicing, and locates the holding statement that
belongs to a given BO ID.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from cas_extractor.config import MIN_ACCOUNT_SECTION_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountSection:
    """
    A slice of canonical text describing one demat account.

    Attributes:
        start: Offset of the first character in the source text
        end: Offset one past the last character (exclusive)
        text: The sliced text
    """
    start: int
    end: int
    text: str


class SectionPatterns:
    """
    Regex patterns for locating account sections.

    Sections start at ``DP Name :`` and stop just before the next account,
    the mutual fund part of the statement, or the end of the document.
    """

    ACCOUNT_SECTION = re.compile(
        r"DP\s+Name\s*:\s*[A-Z].*?(?=DP\s+Name\s*:|MF\s+Folios|Mutual\s+Fund|$)",
        re.IGNORECASE | re.DOTALL,
    )
    DP_ID_MARKER = re.compile(r"DP\s+ID", re.IGNORECASE)
    CLIENT_ID_MARKER = re.compile(r"CLIENT\s+ID", re.IGNORECASE)

    # The account header is repeated inside the transaction history
    TRANSACTIONS_MARKER = re.compile(r"STATEMENT\s+OF\s+TRANSACTIONS", re.IGNORECASE)

    BO_ID_ANCHOR = re.compile(r"BO\s+ID", re.IGNORECASE)
    HOLDING_STATEMENT_MARKER = re.compile(r"HOLDING\s+STATEMENT", re.IGNORECASE)
    PORTFOLIO_VALUE_MARKER = re.compile(r"Portfolio\s+Value", re.IGNORECASE)


def is_account_section(text: str) -> bool:
    """
    Check whether a candidate slice is a genuine account section.

    Args:
        text: Candidate section text.

    Returns:
        True if the slice names both a DP ID and a Client ID, is not part of
        the transaction history and is long enough to hold an account.
    """
    return (
        SectionPatterns.DP_ID_MARKER.search(text) is not None
        and SectionPatterns.CLIENT_ID_MARKER.search(text) is not None
        and SectionPatterns.TRANSACTIONS_MARKER.search(text) is None
        and len(text.strip()) > MIN_ACCOUNT_SECTION_LENGTH
    )


def split_account_sections(text: str) -> List[AccountSection]:
    """
    Split canonical text into demat account sections.

    Matching is greedy and left to right without backtracking, so the
    returned sections are disjoint and in document order.

    Args:
        text: Canonicalized full-document text.

    Returns:
        Accepted account sections.
    """
    sections: List[AccountSection] = []
    candidates = 0

    for match in SectionPatterns.ACCOUNT_SECTION.finditer(text):
        candidates += 1
        section_text = match.group(0)
        if not is_account_section(section_text):
            logger.debug(f"Rejected account candidate at offset {match.start()}")
            continue
        sections.append(
            AccountSection(start=match.start(), end=match.end(), text=section_text)
        )

    logger.info(f"Found {len(sections)} account sections ({candidates} candidates)")
    return sections


def find_holding_block(text: str, bo_id: str) -> Optional[str]:
    """
    Locate the holding statement for a BO ID.

    The block runs from the ``BO ID <bo_id>`` anchor to the next ``BO ID``
    anchor (or the end of the text).

    Args:
        text: Canonicalized full-document text.
        bo_id: Beneficiary Owner ID of the account.

    Returns:
        The block text if it contains a holding statement with a portfolio
        value line, otherwise None.
    """
    if not bo_id:
        return None

    anchor = re.compile(rf"BO\s+ID\s*:?\s*{re.escape(bo_id)}", re.IGNORECASE)
    start_match = anchor.search(text)
    if not start_match:
        return None

    next_anchor = SectionPatterns.BO_ID_ANCHOR.search(text, start_match.end())
    end = next_anchor.start() if next_anchor else len(text)
    block = text[start_match.start():end]

    if has_holding_statement(block):
        return block
    return None


def has_holding_statement(text: str) -> bool:
    """Check for a holding statement heading and its portfolio value line."""
    return (
        SectionPatterns.HOLDING_STATEMENT_MARKER.search(text) is not None
        and SectionPatterns.PORTFOLIO_VALUE_MARKER.search(text) is not None
    )
