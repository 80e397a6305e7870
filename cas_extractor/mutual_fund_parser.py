"""
Mutual fund folio parser for CDSL CAS statements.

The mutual fund part of a CDSL statement starts at ``MUTUAL FUND UNITS
HELD``. It names the AMC and folio, followed by scheme rows of the form

    ISIN  SCHEME NAME  UNITS  NAV  VALUE
"""

import logging
import re
from typing import List, Optional

from cas_extractor.models import MutualFundFolio, MutualFundScheme, SchemeType
from cas_extractor.text_utils import clean_text, parse_number

logger = logging.getLogger(__name__)


class MutualFundParser:
    """Parser for the mutual fund units section."""

    SECTION_ANCHOR = re.compile(r"MUTUAL\s+FUND\s+UNITS\s+HELD", re.IGNORECASE)
    AMC_PATTERN = re.compile(
        r"\b([A-Z][A-Za-z&]*(?:\s+[A-Z][A-Za-z&]*){0,4})\s+Mutual\s+Fund\b",
        re.IGNORECASE,
    )
    FOLIO_PATTERN = re.compile(r"Folio\s+No[\s:]*([\d/]+)", re.IGNORECASE)
    SCHEME_PATTERN = re.compile(
        r"([A-Z]{2}[A-Z0-9]{9}\d)\s+(.+?)\s+([\d,]+\.?\d*)\s+([\d,]+\.?\d*)\s+([\d,]+\.?\d*)",
        re.DOTALL,
    )

    DEBT_KEYWORDS = ("debt", "bond", "liquid")
    HYBRID_KEYWORDS = ("hybrid", "balanced")

    def parse(self, text: str) -> List[MutualFundFolio]:
        """
        Parse mutual fund folios from canonical document text.

        Args:
            text: Canonicalized full-document text.

        Returns:
            Folios with at least one scheme; empty when the section is absent.
        """
        anchor = self.SECTION_ANCHOR.search(text)
        if not anchor:
            logger.info("No mutual fund section found")
            return []

        # The AMC is searched after the all-caps anchor phrase
        section = text[anchor.start():]
        body = text[anchor.end():]

        amc = self._extract_amc(body)
        if not amc:
            logger.info("Mutual fund section has no AMC name")
            return []

        folio_match = self.FOLIO_PATTERN.search(section)
        folio_number = folio_match.group(1) if folio_match else ""

        schemes = self.parse_schemes(section)
        if not schemes:
            logger.info(f"No schemes found for AMC {amc}")
            return []

        folio = MutualFundFolio(
            amc=amc,
            folio_number=folio_number,
            schemes=tuple(schemes),
        )
        logger.info(f"Parsed folio with {len(schemes)} schemes, value={folio.value}")
        return [folio]

    def parse_schemes(self, section: str) -> List[MutualFundScheme]:
        """Parse every scheme row in the section."""
        schemes: List[MutualFundScheme] = []
        for match in self.SCHEME_PATTERN.finditer(section):
            name = clean_text(match.group(2))
            schemes.append(
                MutualFundScheme(
                    isin=match.group(1),
                    name=name,
                    units=parse_number(match.group(3)),
                    nav=match.group(4),
                    value=parse_number(match.group(5)),
                    scheme_type=determine_scheme_type(name),
                )
            )
        return schemes

    def _extract_amc(self, text: str) -> Optional[str]:
        match = self.AMC_PATTERN.search(text)
        if not match:
            return None
        return clean_text(match.group(1))


def determine_scheme_type(scheme_name: str) -> SchemeType:
    """
    Derive the scheme type from keywords in its name.

    Args:
        scheme_name: Scheme name as printed.

    Returns:
        DEBT, HYBRID, or EQUITY when nothing else matches.
    """
    if not scheme_name:
        return SchemeType.EQUITY

    name = scheme_name.lower()
    if any(keyword in name for keyword in MutualFundParser.DEBT_KEYWORDS):
        return SchemeType.DEBT
    if any(keyword in name for keyword in MutualFundParser.HYBRID_KEYWORDS):
        return SchemeType.HYBRID
    return SchemeType.EQUITY


def parse_mutual_funds(text: str) -> List[MutualFundFolio]:
    """
    Convenience function to parse mutual fund folios.

    Args:
        text: Canonicalized full-document text.

    Returns:
        List of parsed folios.
    """
    parser = MutualFundParser()
    return parser.parse(text)
