"""Tests for the mutual fund folio parser."""

from decimal import Decimal

from cas_extractor.models import SchemeType
from cas_extractor.mutual_fund_parser import (
    MutualFundParser,
    determine_scheme_type,
    parse_mutual_funds,
)


class TestMutualFundParser:
    """Tests for MutualFundParser class."""

    def test_parse_folio(self, canonical, mutual_fund_only_pages):
        """Test parsing the AMC, folio and schemes."""
        folios = parse_mutual_funds(canonical(*mutual_fund_only_pages))

        assert len(folios) == 1
        folio = folios[0]
        assert folio.amc == "HDFC"
        assert folio.folio_number == "1234567/89"
        assert folio.registrar == ""
        assert len(folio.schemes) == 2
        assert folio.value == Decimal("3000.00")

    def test_scheme_fields(self, canonical, mutual_fund_page):
        """Test each scheme's fields."""
        folio = MutualFundParser().parse(canonical(mutual_fund_page))[0]

        liquid, flexi = folio.schemes
        assert liquid.isin == "INF179K01AB1"
        assert liquid.name == "HDFC Liquid Fund Direct Growth"
        assert liquid.units == Decimal("10.000")
        assert liquid.nav == "100.00"
        assert liquid.value == Decimal("1000.00")
        assert liquid.scheme_type is SchemeType.DEBT
        assert liquid.arn_code is None
        assert flexi.isin == "INF179K01CD2"
        assert flexi.scheme_type is SchemeType.EQUITY

    def test_upper_case_amc_line(self):
        """Test an AMC line printed in capitals."""
        text = (
            "MUTUAL FUND UNITS HELD AS ON 31-Mar-2024 HDFC MUTUAL FUND Folio No : 1234567/89 "
            "INF179K01AB1 HDFC LIQUID FUND DIRECT GROWTH 10.000 100.00 1,000.00"
        )

        folios = parse_mutual_funds(text)

        assert len(folios) == 1
        assert folios[0].amc == "HDFC"
        assert folios[0].folio_number == "1234567/89"
        assert folios[0].schemes[0].name == "HDFC LIQUID FUND DIRECT GROWTH"
        assert folios[0].schemes[0].scheme_type is SchemeType.DEBT

    def test_multi_word_upper_case_amc(self, canonical, mutual_fund_page):
        """Test a multi-word AMC name in capitals."""
        page = mutual_fund_page.replace("HDFC Mutual Fund", "ADITYA BIRLA SUN LIFE MUTUAL FUND")
        text = canonical(page)

        folio = parse_mutual_funds(text)[0]

        assert folio.amc == "ADITYA BIRLA SUN LIFE"
        assert len(folio.schemes) == 2

    def test_no_section(self):
        """Test text without the mutual fund units heading."""
        assert parse_mutual_funds("HDFC Mutual Fund Folio No : 1") == []

    def test_no_amc(self):
        """Test a section without an AMC name."""
        text = "MUTUAL FUND UNITS HELD INF179K01AB1 LIQUID 10.000 100.00 1,000.00"
        assert parse_mutual_funds(text) == []

    def test_no_schemes(self):
        """Test a section that names an AMC but lists no schemes."""
        text = "MUTUAL FUND UNITS HELD AS ON 31-Mar-2024 HDFC Mutual Fund Folio No : 1"
        assert parse_mutual_funds(text) == []

    def test_missing_folio_number(self):
        """Test that a missing folio number is empty."""
        text = (
            "MUTUAL FUND UNITS HELD SBI Mutual Fund "
            "INF200K01RJ1 SBI Balanced Advantage Fund 5.000 20.00 100.00"
        )

        folio = parse_mutual_funds(text)[0]

        assert folio.amc == "SBI"
        assert folio.folio_number == ""
        assert folio.schemes[0].scheme_type is SchemeType.HYBRID


class TestDetermineSchemeType:
    """Tests for scheme type classification."""

    def test_debt_keywords(self):
        """Test debt keywords."""
        assert determine_scheme_type("ABC Corporate Bond Fund") is SchemeType.DEBT
        assert determine_scheme_type("ABC Liquid Fund") is SchemeType.DEBT
        assert determine_scheme_type("ABC Short Term Debt") is SchemeType.DEBT

    def test_hybrid_keywords(self):
        """Test hybrid keywords."""
        assert determine_scheme_type("ABC Hybrid Equity Fund") is SchemeType.HYBRID
        assert determine_scheme_type("ABC Balanced Advantage") is SchemeType.HYBRID

    def test_debt_checked_before_hybrid(self):
        """Test that debt keywords take priority."""
        assert determine_scheme_type("ABC Conservative Hybrid Debt") is SchemeType.DEBT

    def test_default_equity(self):
        """Test the equity fallback."""
        assert determine_scheme_type("ABC Flexi Cap Fund") is SchemeType.EQUITY
        assert determine_scheme_type("") is SchemeType.EQUITY
