"""
Holdings parser for CDSL CAS statements.

This module parses the security rows of a demat holding statement and
sorts each row into an asset bucket. A row reads:

    ISIN  NAME  CURRENT-BAL  --  --  --  FREE-BAL  MARKET-PRICE  VALUE
"""

import logging
import re
from typing import Dict, List

from cas_extractor.models import Holding, Holdings
from cas_extractor.text_utils import clean_text, parse_number

logger = logging.getLogger(__name__)


class HoldingsParser:
    """
    Parser for the holding statement of a demat account.

    Classification rules, checked in order:
    - equity issuer ISIN (INE...) or "equity" in the name: equities
    - fund ISIN (INF...) or "etf" in the name: demat mutual funds
    - anything else: equities

    Corporate bonds, government securities and AIF units have buckets in
    the model but no rule that populates them.
    """

    ROW_PATTERN = re.compile(
        r"([A-Z]{2}[A-Z0-9]{9}\d)\s+(.+?)\s+([\d,]+\.?\d*)\s+--\s+--\s+--\s+"
        r"([\d,]+\.?\d*)\s+([\d,]+\.?\d*)\s+([\d,]+\.?\d*)",
        re.DOTALL,
    )

    EQUITIES = "equities"
    DEMAT_MUTUAL_FUNDS = "demat_mutual_funds"

    def parse(self, block: str) -> Holdings:
        """
        Parse all holding rows in a holding statement block.

        Args:
            block: Canonical text of one account's holding statement.

        Returns:
            Holdings with every parsed row in its bucket.
        """
        buckets: Dict[str, List[Holding]] = {bucket: [] for bucket in Holdings.BUCKETS}

        for match in self.ROW_PATTERN.finditer(block):
            holding = Holding(
                isin=match.group(1),
                name=clean_text(match.group(2)),
                units=parse_number(match.group(3)),
                free_balance=parse_number(match.group(4)),
                market_price=parse_number(match.group(5)),
                value=parse_number(match.group(6)),
            )
            bucket = classify_holding(holding)
            buckets[bucket].append(holding)
            logger.debug(f"Parsed holding {holding.isin} into {bucket}")

        holdings = Holdings(**{bucket: tuple(rows) for bucket, rows in buckets.items()})
        logger.info(f"Parsed {holdings.count} holdings")
        return holdings


def classify_holding(holding: Holding) -> str:
    """
    Decide the bucket a holding belongs to.

    Args:
        holding: Parsed holding row.

    Returns:
        Name of the Holdings bucket.
    """
    name = holding.name.lower()
    if holding.isin.startswith("INE") or "equity" in name:
        return HoldingsParser.EQUITIES
    if holding.isin.startswith("INF") or "etf" in name:
        return HoldingsParser.DEMAT_MUTUAL_FUNDS
    return HoldingsParser.EQUITIES


def parse_holdings(block: str) -> Holdings:
    """
    Convenience function to parse holdings from a holding statement block.

    Args:
        block: Canonical holding statement text.

    Returns:
        Bucketed holdings.
    """
    parser = HoldingsParser()
    return parser.parse(block)
