"""
Pattern-driven field extraction for CAS text.

Every field is described by an ordered list of ``FieldRule`` objects. The
first rule whose pattern matches decides the field: its value is cleaned
and validated, and a value that fails validation leaves the field empty
rather than storing something partial. Fields are extracted independently,
so a missing PAN never blocks the name.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from cas_extractor.models import AccountStatus, Investor, StatementPeriod
from cas_extractor.text_utils import clean_text, parse_date

logger = logging.getLogger(__name__)

PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MOBILE_PATTERN = re.compile(r"^[0-9]{10,}$")
PINCODE_PATTERN = re.compile(r"^[1-9][0-9]{5}$")


def _accept(value: str) -> bool:
    return bool(value)


def is_valid_pan(value: str) -> bool:
    return bool(PAN_PATTERN.match(value))


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_valid_mobile(value: str) -> bool:
    """Accept only fully visible numbers; masked ones such as 98XXXXXX10 fail."""
    return bool(MOBILE_PATTERN.match(value))


def is_valid_pincode(value: str) -> bool:
    return bool(PINCODE_PATTERN.match(value))


@dataclass(frozen=True)
class FieldRule:
    """
    One candidate pattern for a field.

    Attributes:
        pattern: Compiled regex; group 1 holds the value
        validator: Predicate the cleaned value must satisfy
        normalize: Transformation applied after whitespace cleanup
    """
    pattern: re.Pattern
    validator: Callable[[str], bool] = _accept
    normalize: Optional[Callable[[str], str]] = None


def extract_field(text: str, rules: Sequence[FieldRule]) -> str:
    """
    Extract a single field using its ordered rules.

    Args:
        text: Text to search.
        rules: Candidate rules, highest priority first.

    Returns:
        The validated value, or an empty string.
    """
    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        value = clean_text(match.group(1))
        if rule.normalize:
            value = rule.normalize(value)
        if value and rule.validator(value):
            return value
        logger.debug(f"Discarded value failing validation for {rule.pattern.pattern[:30]}")
        return ""
    return ""


def _lower_no_spaces(value: str) -> str:
    return re.sub(r"\s", "", value).lower()


# Labels that terminate free-text values in single-spaced text
_LABEL_STOP = (
    r"(?=\s+(?:DP\s+ID|CLIENT\s+ID|BO\s+ID|PAN|Email|Mobile|Phone|PIN\s*CODE|PINCODE"
    r"|CAS\s+ID|Address|Nominee|BSDA|Account\s+Status|BO\s+Status|BO\s+Type"
    r"|BO\s+Sub\s+Status|HOLDING\s+STATEMENT|STATEMENT\s+OF\s+TRANSACTIONS)\b|$)"
)

# Up to four name words, title case or all caps
_NAME_WORDS = r"([A-Z][A-Za-z]+(?:\s+[A-Za-z][A-Za-z]+){0,3})"


class InvestorRules:
    """Ordered extraction rules for investor fields."""

    NAME = [
        FieldRule(re.compile(_NAME_WORDS + r"\s+(?:S\s+O|D\s+O|W\s+O)\s+")),
        FieldRule(re.compile(_NAME_WORDS + r"\s+PAN\s*:")),
        FieldRule(re.compile(r"Name\s*:\s*([A-Z][a-zA-Z\s]+?)(?=\s+(?:PAN|S\s+O)\b|$)")),
    ]
    PAN = [
        FieldRule(
            re.compile(r"\bPAN\s*:?\s*([A-Za-z0-9]{10})\b", re.IGNORECASE),
            validator=is_valid_pan,
            normalize=str.upper,
        ),
    ]
    EMAIL = [
        FieldRule(
            re.compile(r"Email\s+Id\s*:?\s*(\S+@\S+)", re.IGNORECASE),
            validator=is_valid_email,
            normalize=_lower_no_spaces,
        ),
    ]
    MOBILE = [
        FieldRule(
            re.compile(r"Mobile\s+No\s*:?\s*(\+?[0-9Xx*]{10,})", re.IGNORECASE),
            validator=is_valid_mobile,
            normalize=lambda v: v.lstrip("+"),
        ),
    ]
    CAS_ID = [
        FieldRule(re.compile(r"CAS\s+ID\s*:?\s*([A-Z0-9]+)", re.IGNORECASE)),
    ]
    PINCODE = [
        FieldRule(
            re.compile(r"PIN\s*CODE\s*:?\s*(\d{6})\b", re.IGNORECASE),
            validator=is_valid_pincode,
        ),
    ]
    ADDRESS = [
        FieldRule(re.compile(r"Address\s*:\s*(.+?)" + _LABEL_STOP, re.IGNORECASE)),
    ]


class AccountRules:
    """Ordered extraction rules for demat account header fields."""

    DP_NAME = [
        FieldRule(re.compile(r"DP\s+Name\s*:\s*(.+?)" + _LABEL_STOP, re.IGNORECASE)),
    ]
    DP_ID = [
        FieldRule(re.compile(r"DP\s+ID\s*:?\s*(\d+)", re.IGNORECASE)),
    ]
    CLIENT_ID = [
        FieldRule(re.compile(r"CLIENT\s+ID\s*:?\s*(\d+)", re.IGNORECASE)),
    ]
    STATUS = [
        FieldRule(re.compile(r"Account\s+Status\s*:?\s*([A-Za-z]+)", re.IGNORECASE)),
        FieldRule(re.compile(r"BO\s+Status\s*:?\s*([A-Za-z]+)", re.IGNORECASE)),
    ]
    BO_TYPE = [
        FieldRule(re.compile(r"BO\s+Type\s*:?\s*(.+?)" + _LABEL_STOP, re.IGNORECASE)),
    ]
    BO_SUB_STATUS = [
        FieldRule(re.compile(r"BO\s+Sub\s+Status\s*:?\s*(.+?)" + _LABEL_STOP, re.IGNORECASE)),
    ]
    BSDA = [
        FieldRule(
            re.compile(r"BSDA\s*(?:Flag)?\s*:?\s*(YES|NO|Y|N)\b", re.IGNORECASE),
            normalize=lambda v: "YES" if v.upper().startswith("Y") else "NO",
        ),
    ]
    NOMINEE = [
        FieldRule(re.compile(r"Nominee(?:\s+Name)?\s*:\s*(.+?)" + _LABEL_STOP, re.IGNORECASE)),
    ]
    EMAIL = [
        FieldRule(
            re.compile(r"Email\s*(?:Id)?\s*:?\s*(\S+@\S+)", re.IGNORECASE),
            validator=is_valid_email,
            normalize=_lower_no_spaces,
        ),
    ]


STATEMENT_PERIOD_PATTERN = re.compile(
    r"(?:Statement\s+Period|Period)\s*:?\s*(\d{2}-[A-Z]{3}-\d{4})\s*to\s*(\d{2}-[A-Z]{3}-\d{4})",
    re.IGNORECASE,
)
BO_ID_PATTERN = re.compile(r"BO\s+ID\s*:?\s*(\d+)", re.IGNORECASE)


def extract_investor(text: str) -> Investor:
    """
    Extract investor details from canonical text.

    Args:
        text: Canonicalized full-document text.

    Returns:
        Investor with every field found; missing fields are empty.
    """
    investor = Investor(
        name=extract_field(text, InvestorRules.NAME),
        pan=extract_field(text, InvestorRules.PAN),
        address=extract_field(text, InvestorRules.ADDRESS),
        email=extract_field(text, InvestorRules.EMAIL),
        mobile=extract_field(text, InvestorRules.MOBILE),
        cas_id=extract_field(text, InvestorRules.CAS_ID),
        pincode=extract_field(text, InvestorRules.PINCODE),
    )
    logger.info(
        "Investor fields: "
        + ", ".join(
            f"{key}={'found' if value else 'missing'}"
            for key, value in investor.to_dict().items()
        )
    )
    return investor


@dataclass(frozen=True)
class AccountHeader:
    """Identity fields of a demat account section."""
    dp_name: str = ""
    dp_id: str = ""
    client_id: str = ""


def extract_account_header(section_text: str) -> AccountHeader:
    """Extract DP name, DP ID and Client ID from an account section."""
    return AccountHeader(
        dp_name=extract_field(section_text, AccountRules.DP_NAME),
        dp_id=extract_field(section_text, AccountRules.DP_ID),
        client_id=extract_field(section_text, AccountRules.CLIENT_ID),
    )


def extract_account_status(section_text: str) -> AccountStatus:
    """
    Extract status metadata from an account section.

    Defaults mirror an active, non-BSDA account with no nominee.
    """
    defaults = AccountStatus()
    return AccountStatus(
        status=extract_field(section_text, AccountRules.STATUS).title() or defaults.status,
        bo_type=extract_field(section_text, AccountRules.BO_TYPE) or defaults.bo_type,
        bo_sub_status=extract_field(section_text, AccountRules.BO_SUB_STATUS),
        bsda=extract_field(section_text, AccountRules.BSDA) or defaults.bsda,
        nominee=extract_field(section_text, AccountRules.NOMINEE),
        email=extract_field(section_text, AccountRules.EMAIL),
    )


def find_bo_ids(text: str) -> List[str]:
    """Return the distinct BO IDs in document order."""
    bo_ids: List[str] = []
    for match in BO_ID_PATTERN.finditer(text):
        bo_id = match.group(1)
        if bo_id not in bo_ids:
            bo_ids.append(bo_id)
    return bo_ids


def resolve_bo_id(
    bo_ids: Sequence[str], account_index: int, header: AccountHeader
) -> str:
    """
    Pick the BO ID for the account at ``account_index``.

    Accounts take BO IDs positionally. When the document has fewer BO IDs
    than accounts, the BO ID is the concatenation of DP ID and Client ID.
    """
    if account_index < len(bo_ids):
        return bo_ids[account_index]
    if header.dp_id and header.client_id:
        return header.dp_id + header.client_id
    return ""


def extract_statement_period(text: str) -> StatementPeriod:
    """Extract the statement period as ISO dates."""
    match = STATEMENT_PERIOD_PATTERN.search(text)
    if not match:
        return StatementPeriod()
    return StatementPeriod(
        from_date=parse_date(match.group(1)),
        to_date=parse_date(match.group(2)),
    )
