"""
Summary aggregation for parsed CAS statements.

The summary is always derived from the leaf collections of a statement and
is never stored, so it cannot drift from the accounts and folios it
describes.
"""

from decimal import Decimal

from cas_extractor.models import AccountSummary, ParsedStatement, Summary


def summarize(statement: ParsedStatement) -> Summary:
    """
    Count and total the demat, mutual fund and insurance buckets.

    Args:
        statement: Parsed statement to summarize.

    Returns:
        Summary whose ``total_value`` is the exact sum of the three buckets.
    """
    demat = AccountSummary(
        count=len(statement.demat_accounts),
        total_value=sum((a.value for a in statement.demat_accounts), Decimal("0")),
    )
    mutual_funds = AccountSummary(
        count=len(statement.mutual_funds),
        total_value=sum((f.value for f in statement.mutual_funds), Decimal("0")),
    )
    insurance = AccountSummary(
        count=len(statement.insurance),
        total_value=sum((p.value for p in statement.insurance), Decimal("0")),
    )
    return Summary(demat=demat, mutual_funds=mutual_funds, insurance=insurance)
