"""Tests for CAS holdings parser."""

from decimal import Decimal

from cas_extractor.holdings_parser import HoldingsParser, classify_holding, parse_holdings
from cas_extractor.models import Holding

BLOCK = (
    "BO ID : 1234567887654321 HOLDING STATEMENT AS ON 31-03-2024 "
    "ISIN Security Current Bal Frozen Bal Pledge Bal Pledge Setup Bal Free Bal "
    "Market Price Value "
    "INE123456789 ACME INDUSTRIES LIMITED 1,000 -- -- -- 900 500.00 5,00,000.00 "
    "INF204KB14I2 NIPPON INDIA ETF NIFTY BEES 10 -- -- -- 10 250.00 2,500.00 "
    "Portfolio Value 5,02,500.00"
)


class TestHoldingsParser:
    """Tests for HoldingsParser class."""

    def test_parse_single_holding(self):
        """Test parsing a single holding row."""
        block = (
            "HOLDING STATEMENT INE123456789 ACME INDUSTRIES LIMITED "
            "100 -- -- -- 100 500.00 50,000.00 Portfolio Value 50,000.00"
        )

        holdings = parse_holdings(block)

        assert holdings.count == 1
        h = holdings.equities[0]
        assert h.isin == "INE123456789"
        assert h.name == "ACME INDUSTRIES LIMITED"
        assert h.units == Decimal("100")
        assert h.free_balance == Decimal("100")
        assert h.market_price == Decimal("500.00")
        assert h.value == Decimal("50000.00")

    def test_parse_multiple_holdings_into_buckets(self):
        """Test that rows are sorted into equity and fund buckets."""
        holdings = HoldingsParser().parse(BLOCK)

        assert holdings.count == 2
        assert [h.isin for h in holdings.equities] == ["INE123456789"]
        assert [h.isin for h in holdings.demat_mutual_funds] == ["INF204KB14I2"]
        assert holdings.corporate_bonds == ()
        assert holdings.government_securities == ()
        assert holdings.aifs == ()

    def test_indian_grouping_commas(self):
        """Test that lakh-style grouping is parsed."""
        holdings = parse_holdings(BLOCK)

        acme = holdings.equities[0]
        assert acme.units == Decimal("1000")
        assert acme.free_balance == Decimal("900")
        assert acme.value == Decimal("500000.00")

    def test_holdings_value(self):
        """Test the total value of parsed holdings."""
        holdings = parse_holdings(BLOCK)

        assert holdings.value == Decimal("502500.00")

    def test_row_without_placeholder_columns_is_skipped(self):
        """Test that rows lacking the pledge placeholders are ignored."""
        block = "HOLDING STATEMENT INE123456789 ACME LIMITED 100 100 500.00 50,000.00"

        assert parse_holdings(block).count == 0

    def test_empty_block(self):
        """Test parsing an empty block."""
        holdings = parse_holdings("")

        assert holdings.count == 0
        assert holdings.value == Decimal("0")


class TestClassifyHolding:
    """Tests for holding classification."""

    def test_equity_isin(self):
        """Test that INE ISINs are equities."""
        assert classify_holding(Holding(isin="INE002A01018", name="RELIANCE")) == "equities"

    def test_equity_isin_wins_over_etf_name(self):
        """Test that an equity ISIN takes priority over an ETF name."""
        holding = Holding(isin="INE002A01018", name="SOMETHING ETF")
        assert classify_holding(holding) == "equities"

    def test_fund_isin(self):
        """Test that INF ISINs are demat mutual funds."""
        holding = Holding(isin="INF204KB14I2", name="NIPPON INDIA NIFTY BEES")
        assert classify_holding(holding) == "demat_mutual_funds"

    def test_equity_name_wins_over_fund_isin(self):
        """Test that 'equity' in the name is checked before the fund ISIN."""
        holding = Holding(isin="INF179K01AB1", name="HDFC Equity Savings")
        assert classify_holding(holding) == "equities"

    def test_etf_name(self):
        """Test that ETF names are demat mutual funds."""
        holding = Holding(isin="US0000000001", name="GLOBAL ETF")
        assert classify_holding(holding) == "demat_mutual_funds"

    def test_default_is_equities(self):
        """Test that unclassified holdings fall back to equities."""
        holding = Holding(isin="US0378331005", name="APPLE INC")
        assert classify_holding(holding) == "equities"
