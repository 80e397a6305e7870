"""
Consolidated Account Statement (CAS) extractor.

Converts a CDSL CAS PDF into a typed record of investor details, demat
account holdings and mutual fund folios.
"""

from cas_extractor.exceptions import (
    CASParseError,
    FormatParseFailureError,
    InsufficientTextError,
    UnreadableDocumentError,
    UnrecognizedFormatError,
    WrongPasswordError,
)
from cas_extractor.models import (
    DematAccount,
    Holding,
    Holdings,
    InsurancePolicy,
    Investor,
    MutualFundFolio,
    MutualFundScheme,
    ParsedStatement,
    Summary,
    ValidationResult,
)
from cas_extractor.main import CASParser, parse_cas_bytes, parse_cas_pdf

__version__ = "2.0.0"
__all__ = [
    "CASParseError",
    "CASParser",
    "DematAccount",
    "FormatParseFailureError",
    "Holding",
    "Holdings",
    "InsurancePolicy",
    "InsufficientTextError",
    "Investor",
    "MutualFundFolio",
    "MutualFundScheme",
    "ParsedStatement",
    "Summary",
    "UnreadableDocumentError",
    "UnrecognizedFormatError",
    "ValidationResult",
    "WrongPasswordError",
    "parse_cas_bytes",
    "parse_cas_pdf",
]
