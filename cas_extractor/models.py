"""
Data models for the CAS extractor.

This module defines the typed records produced by a parse:
- Investor identity
- Demat accounts with bucketed security holdings
- Mutual fund folios and their schemes
- Parse metadata and the derived portfolio summary

All records are frozen; collections are tuples. A new upload always yields
a wholly new ParsedStatement.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterator, List, Optional, Tuple


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class DepositoryType(Enum):
    """Depository that maintains a demat account."""
    CDSL = "cdsl"


class SchemeType(Enum):
    """Broad asset class of a mutual fund scheme, derived from its name."""
    EQUITY = "equity"
    DEBT = "debt"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class Investor:
    """
    Investor personal information from the CAS statement.

    Every field is best-effort; a field that was not found (or failed
    validation) is an empty string.

    Attributes:
        name: Full name of the investor
        pan: Permanent Account Number (AAAAA9999A)
        address: Registered address
        email: Email address, lower-cased
        mobile: Mobile number, digits only
        cas_id: CAS identifier printed by the depository
        pincode: Six digit postal code
    """
    name: str = ""
    pan: str = ""
    address: str = ""
    email: str = ""
    mobile: str = ""
    cas_id: str = ""
    pincode: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "pan": self.pan,
            "address": self.address,
            "email": self.email,
            "mobile": self.mobile,
            "cas_id": self.cas_id,
            "pincode": self.pincode,
        }


@dataclass(frozen=True)
class Holding:
    """
    A single security row from a demat holding statement.

    Attributes:
        isin: International Securities Identification Number (12 characters)
        name: Security name as printed
        units: Current balance
        value: Market value of the position
        market_price: Market price per unit
        free_balance: Units not pledged or locked in
    """
    isin: str
    name: str
    units: Decimal = Decimal("0")
    value: Decimal = Decimal("0")
    market_price: Decimal = Decimal("0")
    free_balance: Decimal = Decimal("0")

    def __post_init__(self):
        """Ensure Decimal types."""
        for attr in ("units", "value", "market_price", "free_balance"):
            object.__setattr__(self, attr, _to_decimal(getattr(self, attr)))

    def to_dict(self) -> dict:
        return {
            "isin": self.isin,
            "name": self.name,
            "units": self.units,
            "value": self.value,
            "additional_info": {
                "market_price": self.market_price,
                "free_balance": self.free_balance,
            },
        }


@dataclass(frozen=True)
class Holdings:
    """
    Securities of one demat account, split into asset buckets.

    Bucket order is fixed and also defines iteration order.
    """
    equities: Tuple[Holding, ...] = ()
    demat_mutual_funds: Tuple[Holding, ...] = ()
    corporate_bonds: Tuple[Holding, ...] = ()
    government_securities: Tuple[Holding, ...] = ()
    aifs: Tuple[Holding, ...] = ()

    BUCKETS = (
        "equities",
        "demat_mutual_funds",
        "corporate_bonds",
        "government_securities",
        "aifs",
    )

    def all(self) -> Iterator[Holding]:
        """Iterate over every holding in bucket order."""
        for bucket in self.BUCKETS:
            yield from getattr(self, bucket)

    @property
    def count(self) -> int:
        return sum(len(getattr(self, bucket)) for bucket in self.BUCKETS)

    @property
    def value(self) -> Decimal:
        return sum((h.value for h in self.all()), Decimal("0"))

    def to_dict(self) -> dict:
        return {
            bucket: [h.to_dict() for h in getattr(self, bucket)]
            for bucket in self.BUCKETS
        }


@dataclass(frozen=True)
class AccountStatus:
    """Status metadata printed in a demat account header."""
    status: str = "Active"
    bo_type: Optional[str] = None
    bo_sub_status: str = ""
    bsda: str = "NO"
    nominee: str = ""
    email: str = ""

    @property
    def is_active(self) -> bool:
        return self.status.strip().lower() == "active"

    @property
    def is_bsda(self) -> bool:
        return self.bsda.strip().upper() == "YES"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "bo_type": self.bo_type,
            "bo_sub_status": self.bo_sub_status,
            "bsda": self.bsda,
            "nominee": self.nominee,
            "email": self.email,
        }


@dataclass(frozen=True)
class DematAccount:
    """
    A depository (demat) account and its holdings.

    Attributes:
        dp_id: Depository Participant ID
        dp_name: Depository Participant name
        bo_id: Beneficiary Owner ID
        client_id: Client ID with the DP
        demat_type: Depository maintaining the account
        holdings: Bucketed securities
        status: Account status metadata
    """
    dp_id: str = ""
    dp_name: str = ""
    bo_id: str = ""
    client_id: str = ""
    demat_type: DepositoryType = DepositoryType.CDSL
    holdings: Holdings = field(default_factory=Holdings)
    status: AccountStatus = field(default_factory=AccountStatus)

    @property
    def value(self) -> Decimal:
        """Market value of the account, the sum of all holdings."""
        return self.holdings.value

    def to_dict(self) -> dict:
        return {
            "dp_id": self.dp_id,
            "dp_name": self.dp_name,
            "bo_id": self.bo_id,
            "client_id": self.client_id,
            "demat_type": self.demat_type.value,
            "holdings": self.holdings.to_dict(),
            "additional_info": self.status.to_dict(),
            "value": self.value,
        }


@dataclass(frozen=True)
class MutualFundScheme:
    """
    A mutual fund scheme held in a folio.

    ``nav`` is kept exactly as printed in the statement.
    """
    isin: str
    name: str
    units: Decimal = Decimal("0")
    nav: str = ""
    value: Decimal = Decimal("0")
    scheme_type: SchemeType = SchemeType.EQUITY
    arn_code: Optional[str] = None
    investment_value: Decimal = Decimal("0")

    def __post_init__(self):
        """Ensure Decimal types."""
        for attr in ("units", "value", "investment_value"):
            object.__setattr__(self, attr, _to_decimal(getattr(self, attr)))

    def to_dict(self) -> dict:
        return {
            "isin": self.isin,
            "name": self.name,
            "units": self.units,
            "nav": self.nav,
            "value": self.value,
            "scheme_type": self.scheme_type.value,
            "additional_info": {
                "arn_code": self.arn_code,
                "investment_value": self.investment_value,
            },
        }


@dataclass(frozen=True)
class MutualFundFolio:
    """An investor's folio with a single AMC."""
    amc: str
    folio_number: str = ""
    registrar: str = ""
    schemes: Tuple[MutualFundScheme, ...] = ()

    @property
    def value(self) -> Decimal:
        return sum((s.value for s in self.schemes), Decimal("0"))

    def to_dict(self) -> dict:
        return {
            "amc": self.amc,
            "folio_number": self.folio_number,
            "registrar": self.registrar,
            "schemes": [s.to_dict() for s in self.schemes],
            "value": self.value,
        }


@dataclass(frozen=True)
class InsurancePolicy:
    """A life insurance policy listed in the statement."""
    policy_number: str = ""
    insurer: str = ""
    name: str = ""
    value: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "value", _to_decimal(self.value))

    def to_dict(self) -> dict:
        return {
            "policy_number": self.policy_number,
            "insurer": self.insurer,
            "name": self.name,
            "value": self.value,
        }


@dataclass(frozen=True)
class StatementPeriod:
    """Statement period with ISO formatted dates (empty when not found)."""
    from_date: str = ""
    to_date: str = ""

    def to_dict(self) -> dict:
        return {"from": self.from_date, "to": self.to_date}


@dataclass(frozen=True)
class ParseMeta:
    """Metadata attached to a parse result by the orchestrator."""
    cas_type: str
    tracking_id: str = ""
    file_name: Optional[str] = None
    file_size: int = 0
    parse_time_ms: int = 0
    parser_version: str = ""
    generated_at: str = ""
    statement_period: StatementPeriod = field(default_factory=StatementPeriod)

    def to_dict(self) -> dict:
        return {
            "cas_type": self.cas_type,
            "tracking_id": self.tracking_id,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "parse_time": self.parse_time_ms,
            "parser_version": self.parser_version,
            "generated_at": self.generated_at,
            "statement_period": self.statement_period.to_dict(),
        }


@dataclass(frozen=True)
class AccountSummary:
    """Count and total value of one top-level bucket."""
    count: int = 0
    total_value: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {"count": self.count, "total_value": self.total_value}


@dataclass(frozen=True)
class Summary:
    """Per-bucket and grand totals derived from a ParsedStatement."""
    demat: AccountSummary = field(default_factory=AccountSummary)
    mutual_funds: AccountSummary = field(default_factory=AccountSummary)
    insurance: AccountSummary = field(default_factory=AccountSummary)

    @property
    def total_value(self) -> Decimal:
        return (
            self.demat.total_value
            + self.mutual_funds.total_value
            + self.insurance.total_value
        )

    def to_dict(self) -> dict:
        return {
            "accounts": {
                "demat": self.demat.to_dict(),
                "mutual_funds": self.mutual_funds.to_dict(),
                "insurance": self.insurance.to_dict(),
            },
            "total_value": self.total_value,
        }


@dataclass(frozen=True)
class ParsedStatement:
    """
    Complete parsed CAS statement.

    This is the top-level container returned by the parser. ``summary`` is
    recomputed from the leaf collections on every access.

    Attributes:
        investor: Investor personal information
        demat_accounts: Demat accounts in document order
        mutual_funds: Mutual fund folios
        insurance: Insurance policies (not extracted yet, always empty)
        meta: Parse metadata
    """
    investor: Investor = field(default_factory=Investor)
    demat_accounts: Tuple[DematAccount, ...] = ()
    mutual_funds: Tuple[MutualFundFolio, ...] = ()
    insurance: Tuple[InsurancePolicy, ...] = ()
    meta: Optional[ParseMeta] = None

    @property
    def summary(self) -> Summary:
        # summary imports this module
        from cas_extractor.summary import summarize

        return summarize(self)

    @property
    def total_value(self) -> Decimal:
        return self.summary.total_value

    def to_dict(self) -> dict:
        """
        Convert the statement to a dictionary for JSON serialization.

        Decimal values are left as Decimal; use ``DecimalEncoder`` (or
        ``export_to_json``) to serialize.
        """
        return {
            "investor": self.investor.to_dict(),
            "demat_accounts": [a.to_dict() for a in self.demat_accounts],
            "mutual_funds": [f.to_dict() for f in self.mutual_funds],
            "insurance": {"life_insurance_policies": [p.to_dict() for p in self.insurance]},
            "meta": self.meta.to_dict() if self.meta else None,
            "summary": self.summary.to_dict(),
        }


@dataclass
class ValidationResult:
    """
    Result of validation checks on a parsed statement.

    Attributes:
        is_valid: True if all critical validations pass
        errors: List of critical errors that indicate parsing failures
        warnings: List of non-critical issues that should be reviewed
    """
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add a critical error and mark result as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a non-critical warning."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.is_valid:
            self.is_valid = False
