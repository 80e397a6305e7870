"""
Parser for CDSL Consolidated Account Statements.

Given canonical document text, this module segments the demat accounts,
extracts their headers and holdings, parses the mutual fund folios and
assembles a ParsedStatement (without metadata, which the orchestrator
attaches).
"""

import logging
from typing import List, Optional, Union

from cas_extractor.field_extractor import (
    extract_account_header,
    extract_account_status,
    extract_investor,
    extract_statement_period,
    find_bo_ids,
    resolve_bo_id,
)
from cas_extractor.holdings_parser import HoldingsParser
from cas_extractor.models import (
    DematAccount,
    DepositoryType,
    Holdings,
    ParsedStatement,
    StatementPeriod,
)
from cas_extractor.mutual_fund_parser import MutualFundParser
from cas_extractor.section_detector import (
    AccountSection,
    find_holding_block,
    has_holding_statement,
    split_account_sections,
)

logger = logging.getLogger(__name__)


class CDSLParser:
    """
    Extracts a ParsedStatement from CDSL CAS text.

    The parser is stateless between calls; ``statement_period`` is exposed
    separately because it travels in the metadata rather than the body.
    """

    cas_type = "CDSL"

    def __init__(self, log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None):
        self.log = log or logger
        self.holdings_parser = HoldingsParser()
        self.mutual_fund_parser = MutualFundParser()

    def parse(self, text: str) -> ParsedStatement:
        """
        Parse canonical CDSL text.

        Args:
            text: Canonicalized full-document text.

        Returns:
            ParsedStatement with investor, demat accounts and mutual funds.
        """
        investor = extract_investor(text)
        demat_accounts = self.extract_demat_accounts(text)
        mutual_funds = self.mutual_fund_parser.parse(text)

        self.log.info(
            f"CDSL parse: {len(demat_accounts)} demat accounts, "
            f"{len(mutual_funds)} mutual fund folios"
        )

        return ParsedStatement(
            investor=investor,
            demat_accounts=tuple(demat_accounts),
            mutual_funds=tuple(mutual_funds),
        )

    def extract_statement_period(self, text: str) -> StatementPeriod:
        """
        Read the statement period for the result metadata.

        Part of the per-format parser interface that CASParser dispatches
        to, so each format can locate its own period line.
        """
        return extract_statement_period(text)

    def extract_demat_accounts(self, text: str) -> List[DematAccount]:
        """
        Build one DematAccount per accepted account section.

        Accounts with neither a DP ID nor a DP name are dropped.
        """
        accounts: List[DematAccount] = []
        bo_ids = find_bo_ids(text)

        for index, section in enumerate(split_account_sections(text)):
            account = self._build_account(text, section, index, bo_ids)
            if account.dp_id or account.dp_name:
                accounts.append(account)
            else:
                self.log.warning(f"Dropping account section {index}: no DP ID or DP name")

        return accounts

    def _build_account(
        self,
        text: str,
        section: AccountSection,
        index: int,
        bo_ids: List[str],
    ) -> DematAccount:
        header = extract_account_header(section.text)
        bo_id = resolve_bo_id(bo_ids, index, header)

        # Holdings come from the BO ID block; fall back to the section itself
        block = find_holding_block(text, bo_id)
        if block is None and has_holding_statement(section.text):
            block = section.text
        holdings = self.holdings_parser.parse(block) if block else Holdings()

        account = DematAccount(
            dp_id=header.dp_id,
            dp_name=header.dp_name,
            bo_id=bo_id,
            client_id=header.client_id,
            demat_type=DepositoryType.CDSL,
            holdings=holdings,
            status=extract_account_status(section.text),
        )
        self.log.debug(
            f"Account {index}: dp_id={account.dp_id or '-'}, "
            f"holdings={holdings.count}, value={account.value}"
        )
        return account
