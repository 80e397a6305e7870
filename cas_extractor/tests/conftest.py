"""Shared fixtures for CAS extractor tests."""

from typing import List

import pytest

from cas_extractor.extractor import ExtractedDocument, PageContent
from cas_extractor.text_utils import clean_text

HEADER_PAGE = """Consolidated Account Statement
CAS ID : AB12345678
Statement Period : 01-Mar-2024 to 31-Mar-2024
Rahul Sharma S O Ramesh Sharma
PAN : ABCDE1234F
Address : 12 MG ROAD
BANGALORE KARNATAKA
PINCODE : 560001
Email Id : rahul.sharma@example.com
Mobile No : 9876543210
Central Depository Services (India) Limited CDSL
DP Name : ZERODHA BROKING LIMITED
DP ID : 12345678 CLIENT ID : 87654321
BO ID : 1234567887654321
Account Status : ACTIVE BSDA : NO
Nominee : PRIYA SHARMA
"""

HOLDING_PAGE = """HOLDING STATEMENT AS ON 31-03-2024
ISIN Security Current Bal Frozen Bal Pledge Bal Pledge Setup Bal
Free Bal Market Price Value
INE123456789 ACME INDUSTRIES LIMITED 100 -- -- -- 100 500.00 50,000.00
Portfolio Value 50,000.00
"""

MUTUAL_FUND_PAGE = """MUTUAL FUND UNITS HELD AS ON 31-Mar-2024
HDFC Mutual Fund
Folio No : 1234567/89
ISIN Scheme Name Units NAV Value
INF179K01AB1 HDFC Liquid Fund Direct Growth 10.000 100.00 1,000.00
INF179K01CD2 HDFC Flexi Cap Fund Direct Growth 20.000 100.00 2,000.00
"""

MUTUAL_FUND_ONLY_PAGE = """Consolidated Account Statement CDSL
Central Depository Services (India) Limited
Statement Period : 01-Mar-2024 to 31-Mar-2024
Rahul Sharma PAN : ABCDE1234F
""" + MUTUAL_FUND_PAGE

SECOND_ACCOUNT_PAGE = """DP Name : ANGEL ONE LIMITED
DP ID : 11112222 CLIENT ID : 33334444
BO ID : 1111222233334444
Account Status : ACTIVE BSDA : YES
HOLDING STATEMENT AS ON 31-03-2024
INF204KB14I2 NIPPON INDIA ETF NIFTY BEES 10 -- -- -- 10 250.00 2,500.00
Portfolio Value 2,500.00
"""


class FakeExtractor:
    """Stands in for PDFExtractor, returning fixed page texts."""

    def __init__(self, pages: List[str] = None, error: Exception = None):
        self.pages = pages or []
        self.error = error
        self.calls = 0

    def extract(self, data: bytes) -> ExtractedDocument:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ExtractedDocument(
            pages=[
                PageContent(page_number=i, raw_text=text)
                for i, text in enumerate(self.pages, start=1)
            ],
            total_pages=len(self.pages),
        )


@pytest.fixture
def header_page():
    return HEADER_PAGE


@pytest.fixture
def holding_page():
    return HOLDING_PAGE


@pytest.fixture
def second_account_page():
    return SECOND_ACCOUNT_PAGE


@pytest.fixture
def mutual_fund_page():
    return MUTUAL_FUND_PAGE


@pytest.fixture
def single_account_pages():
    """Two-page statement with one demat account and one equity holding."""
    return [HEADER_PAGE, HOLDING_PAGE]


@pytest.fixture
def full_statement_pages():
    """Statement with two demat accounts and a mutual fund folio."""
    return [HEADER_PAGE, HOLDING_PAGE, SECOND_ACCOUNT_PAGE, MUTUAL_FUND_PAGE]


@pytest.fixture
def mutual_fund_only_pages():
    """Statement with a single mutual fund folio and no demat account."""
    return [MUTUAL_FUND_ONLY_PAGE]


@pytest.fixture
def canonical():
    """Join and canonicalize pages the way the orchestrator does."""

    def _canonical(*pages: str) -> str:
        return " ".join(clean_text(page) for page in pages if clean_text(page))

    return _canonical


@pytest.fixture
def fake_extractor():
    """Factory for FakeExtractor instances."""
    return FakeExtractor
