"""
Validation module for the CAS extractor.

This module checks the integrity and consistency of a parsed statement.
Validation never changes the statement; it reports errors (data that is
certainly wrong) and warnings (data worth a second look).
"""

import logging
import re
from decimal import Decimal

from cas_extractor.models import (
    DematAccount,
    Holding,
    Investor,
    MutualFundFolio,
    ParsedStatement,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# Validation constants
VALUE_TOLERANCE = Decimal("0.01")  # 1% tolerance for value calculations
ISIN_PATTERN = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}[0-9]$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")


class CASValidator:
    """
    Validator for parsed CAS statements.

    Implements validation rules including:
    - Format validation (ISIN, PAN patterns)
    - Value calculations (units × market price ≈ value)
    - Summary consistency with the leaf collections
    """

    def __init__(self, value_tolerance: Decimal = VALUE_TOLERANCE):
        """
        Initialize the validator.

        Args:
            value_tolerance: Tolerance for value calculations (as decimal, e.g., 0.01 = 1%).
        """
        self.value_tolerance = value_tolerance

    def validate(self, statement: ParsedStatement) -> ValidationResult:
        """
        Perform complete validation of a parsed statement.

        Args:
            statement: Parsed statement to validate.

        Returns:
            ValidationResult with errors and warnings.
        """
        result = ValidationResult()

        result.merge(self.validate_investor(statement.investor))

        for account in statement.demat_accounts:
            result.merge(self.validate_account(account))

        for folio in statement.mutual_funds:
            result.merge(self.validate_folio(folio))

        result.merge(self.validate_summary(statement))

        logger.info(
            f"Validation complete: valid={result.is_valid}, "
            f"errors={len(result.errors)}, warnings={len(result.warnings)}"
        )
        return result

    def validate_investor(self, investor: Investor) -> ValidationResult:
        """Validate investor information."""
        result = ValidationResult()

        if not investor.pan:
            result.add_warning("Investor PAN is missing")
        elif not PAN_PATTERN.match(investor.pan):
            result.add_error(f"Invalid PAN format: {investor.pan}")

        if not investor.name:
            result.add_warning("Investor name is missing")

        return result

    def validate_account(self, account: DematAccount) -> ValidationResult:
        """Validate a demat account and its holdings."""
        result = ValidationResult()
        label = account.dp_id or account.dp_name

        if not account.dp_id:
            result.add_warning(f"Missing DP ID for account: {label}")
        if not account.client_id:
            result.add_warning(f"Missing client ID for account: {label}")
        if account.holdings.count == 0:
            result.add_warning(f"No holdings found for account: {label}")

        for holding in account.holdings.all():
            result.merge(self.validate_holding(holding))

        return result

    def validate_holding(self, holding: Holding) -> ValidationResult:
        """
        Validate a single demat holding.

        Args:
            holding: Holding data to validate.

        Returns:
            ValidationResult for holding validation.
        """
        result = ValidationResult()

        if not ISIN_PATTERN.match(holding.isin):
            result.add_error(f"Invalid ISIN format: {holding.isin}")

        if holding.units < 0:
            result.add_warning(f"Negative units for {holding.name[:30]} ({holding.units})")

        # units × market price ≈ value
        if holding.units > 0 and holding.market_price > 0 and holding.value > 0:
            calculated_value = holding.units * holding.market_price
            diff_ratio = abs(calculated_value - holding.value) / holding.value
            if diff_ratio > self.value_tolerance:
                result.add_warning(
                    f"Value mismatch for {holding.name[:30]}: "
                    f"calculated={calculated_value:.2f}, "
                    f"stated={holding.value:.2f}, "
                    f"diff={diff_ratio*100:.2f}%"
                )

        return result

    def validate_folio(self, folio: MutualFundFolio) -> ValidationResult:
        """Validate a mutual fund folio and its schemes."""
        result = ValidationResult()

        if not folio.folio_number:
            result.add_warning(f"Missing folio number for AMC: {folio.amc}")

        for scheme in folio.schemes:
            if not ISIN_PATTERN.match(scheme.isin):
                result.add_error(f"Invalid ISIN format: {scheme.isin}")
            if scheme.value <= 0:
                result.add_warning(f"Zero value for scheme: {scheme.name[:30]}")

        return result

    def validate_summary(self, statement: ParsedStatement) -> ValidationResult:
        """Check the summary against the accounts and folios it describes."""
        result = ValidationResult()
        summary = statement.summary

        expected = sum((a.value for a in statement.demat_accounts), Decimal("0")) + sum(
            (f.value for f in statement.mutual_funds), Decimal("0")
        ) + summary.insurance.total_value
        if summary.total_value != expected:
            result.add_error(
                f"Summary total {summary.total_value} does not match holdings total {expected}"
            )

        return result


def validate_statement(statement: ParsedStatement) -> ValidationResult:
    """
    Convenience function to validate a parsed statement.

    Args:
        statement: Parsed statement to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    validator = CASValidator()
    return validator.validate(statement)


def validate_isin(isin: str) -> bool:
    """
    Validate an ISIN format.

    Args:
        isin: ISIN string to validate.

    Returns:
        True if valid, False otherwise.
    """
    return bool(ISIN_PATTERN.match(isin))


def validate_pan(pan: str) -> bool:
    """
    Validate a PAN format.

    Args:
        pan: PAN string to validate.

    Returns:
        True if valid, False otherwise.
    """
    return bool(PAN_PATTERN.match(pan))
