"""Tests for CAS validator."""

from decimal import Decimal

from cas_extractor.models import (
    DematAccount,
    Holding,
    Holdings,
    Investor,
    MutualFundFolio,
    MutualFundScheme,
    ParsedStatement,
)
from cas_extractor.validator import (
    CASValidator,
    validate_isin,
    validate_pan,
    validate_statement,
)


def _holding(**kwargs):
    values = dict(
        isin="INE123456789",
        name="ACME INDUSTRIES LIMITED",
        units=Decimal("100"),
        market_price=Decimal("500"),
        value=Decimal("50000"),
    )
    values.update(kwargs)
    return Holding(**values)


def _statement(*holdings, investor=None):
    account = DematAccount(
        dp_id="12345678",
        dp_name="ZERODHA BROKING LIMITED",
        client_id="87654321",
        holdings=Holdings(equities=tuple(holdings)),
    )
    return ParsedStatement(
        investor=investor or Investor(name="Rahul Sharma", pan="ABCDE1234F"),
        demat_accounts=(account,),
    )


class TestValidateISIN:
    """Tests for ISIN validation."""

    def test_valid_isin(self):
        """Test valid ISIN formats."""
        assert validate_isin("INF179K01234") is True
        assert validate_isin("INE002A01018") is True
        assert validate_isin("INF204KB14I2") is True

    def test_invalid_isin(self):
        """Test invalid ISIN formats."""
        assert validate_isin("") is False
        assert validate_isin("INF179") is False  # Too short
        assert validate_isin("INF179K012345") is False  # Too long
        assert validate_isin("inf179k01234") is False  # Lowercase


class TestValidatePAN:
    """Tests for PAN validation."""

    def test_valid_pan(self):
        """Test valid PAN format."""
        assert validate_pan("ABCDE1234F") is True

    def test_invalid_pan(self):
        """Test invalid PAN formats."""
        assert validate_pan("") is False
        assert validate_pan("ABCD1234F") is False
        assert validate_pan("abcde1234f") is False


class TestCASValidator:
    """Tests for CASValidator class."""

    def test_valid_statement(self):
        """Test a consistent statement passes."""
        result = validate_statement(_statement(_holding()))

        assert result.is_valid is True
        assert result.errors == []

    def test_missing_pan_is_warning(self):
        """Test that a missing PAN only warns."""
        result = validate_statement(_statement(_holding(), investor=Investor(name="X")))

        assert result.is_valid is True
        assert any("PAN" in w for w in result.warnings)

    def test_invalid_isin_is_error(self):
        """Test that a malformed ISIN fails validation."""
        result = CASValidator().validate_holding(_holding(isin="BAD"))

        assert result.is_valid is False

    def test_value_mismatch_is_warning(self):
        """Test that units x price far from value warns."""
        result = CASValidator().validate_holding(_holding(value=Decimal("10000")))

        assert result.is_valid is True
        assert any("Value mismatch" in w for w in result.warnings)

    def test_value_within_tolerance(self):
        """Test that small rounding differences are accepted."""
        result = CASValidator().validate_holding(_holding(value=Decimal("50100")))

        assert result.warnings == []

    def test_account_without_holdings_warns(self):
        """Test that an empty account is flagged."""
        result = CASValidator().validate_account(DematAccount(dp_id="1", client_id="2"))

        assert any("No holdings" in w for w in result.warnings)

    def test_folio_checks(self):
        """Test scheme checks inside a folio."""
        folio = MutualFundFolio(
            amc="HDFC",
            schemes=(MutualFundScheme(isin="INF179K01AB1", name="Liquid", value=Decimal("0")),),
        )

        result = CASValidator().validate_folio(folio)

        assert result.is_valid is True
        assert any("folio number" in w for w in result.warnings)
        assert any("Zero value" in w for w in result.warnings)

    def test_summary_consistent(self):
        """Test that the derived summary always agrees with its leaves."""
        result = CASValidator().validate_summary(_statement(_holding(), _holding()))

        assert result.is_valid is True
