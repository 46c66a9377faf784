"""Lynx (Interactive Brokers) activity statement CSV parser.

The activity statement is a prefixed-layout CSV holding dozens of sections.
Only cash dividends and the tax withheld on them are read; withholding lines
are matched to their dividend by pay date, symbol and currency.
"""

import logging
import re
from collections import defaultdict
from datetime import date
from decimal import Decimal
from pathlib import Path

from pydantic import Field

from statementparser.ingestion.base import BaseRowReader, BaseStatementParser, RowModel
from statementparser.ingestion.sections import Amount, Section, StatementDate, split_prefixed
from statementparser.models.enums import Broker, Currency
from statementparser.models.transaction import DividendTransaction, Transaction

logger = logging.getLogger(__name__)

SECTION_DIVIDENDS = "Dividends"
SECTION_WITHHOLDING_TAX = "Withholding Tax"

# 'AAPL(US0378331005) Cash Dividend USD 0.23 per Share (Ordinary Dividend)'
_SYMBOL_RE = re.compile(r"^\s*([^\s(]+)\s*\(")


class DividendRow(RowModel):
    section: str = Field(alias=SECTION_DIVIDENDS)
    kind: str = Field(alias="Header")
    currency: str = Field(alias="Currency")
    pay_date: StatementDate = Field(alias="Date")
    description: str = Field(alias="Description")
    amount: Amount = Field(alias="Amount")


class WithholdingTaxRow(RowModel):
    section: str = Field(alias=SECTION_WITHHOLDING_TAX)
    kind: str = Field(alias="Header")
    currency: str = Field(alias="Currency")
    pay_date: StatementDate = Field(alias="Date")
    description: str = Field(alias="Description")
    amount: Amount = Field(alias="Amount")
    code: str = Field(alias="Code")


def _detect_symbol(description: str) -> str:
    """Extract the ticker from a Lynx dividend description."""
    match = _SYMBOL_RE.match(description)
    if match:
        return match.group(1)
    parts = description.split()
    return parts[0] if parts else ""


class LynxRowReader(BaseRowReader):
    ROW_MODELS = {
        SECTION_DIVIDENDS: DividendRow,
        SECTION_WITHHOLDING_TAX: WithholdingTaxRow,
    }

    def split_sections(self, content: str, source: str) -> dict[str, Section]:
        return split_prefixed(content, set(self.ROW_MODELS), source)

    def skip_row(self, section: str, values: dict[str, str]) -> bool:
        # Per-currency and grand total lines: 'Total', 'Total in USD', 'Total Dividends in USD'
        return values.get("Currency", "").strip().startswith("Total")


class LynxParser(BaseStatementParser):
    """Parses Lynx activity statement CSV exports into dividend transactions."""

    reader = LynxRowReader()

    def parse(self, file_path: Path) -> list[Transaction]:
        source = str(file_path)
        records = self.reader.read_all(self._read_text(file_path), source)

        withheld: dict[tuple[date, str, Currency], Decimal] = defaultdict(Decimal)
        withholding_rows: dict[tuple[date, str, Currency], WithholdingTaxRow] = {}
        for row in records[SECTION_WITHHOLDING_TAX]:
            currency = self._currency(row.currency, source, SECTION_WITHHOLDING_TAX, row)
            key = (row.pay_date, _detect_symbol(row.description), currency)
            withheld[key] += row.amount
            withholding_rows.setdefault(key, row)

        transactions: list[Transaction] = []
        for row in records[SECTION_DIVIDENDS]:
            symbol = _detect_symbol(row.description)
            currency = self._currency(row.currency, source, SECTION_DIVIDENDS, row)
            transactions.append(
                self._build(
                    DividendTransaction,
                    source,
                    SECTION_DIVIDENDS,
                    row,
                    broker=Broker.LYNX,
                    date=row.pay_date,
                    name=symbol,
                    currency=currency,
                    income=row.amount,
                    tax=withheld.pop((row.pay_date, symbol, currency), Decimal("0")),
                )
            )

        # Withholding with no dividend line, e.g. a tax adjustment in a later statement
        for (pay_date, symbol, currency), tax in withheld.items():
            logger.warning(
                "%s: withholding tax %s %s on %s has no matching dividend",
                source, tax, currency, pay_date,
            )
            transactions.append(
                self._build(
                    DividendTransaction,
                    source,
                    SECTION_WITHHOLDING_TAX,
                    withholding_rows[(pay_date, symbol, currency)],
                    broker=Broker.LYNX,
                    date=pay_date,
                    name=symbol,
                    currency=currency,
                    income=Decimal("0"),
                    tax=tax,
                )
            )

        logger.debug("%s: %d dividend transaction(s)", source, len(transactions))
        return transactions
