"""Morgan Stanley StockPlan Connect activity export parser."""

import logging
from decimal import Decimal
from pathlib import Path

from pydantic import Field

from statementparser.exceptions import UnknownTransactionError
from statementparser.ingestion.base import BaseRowReader, BaseStatementParser, RowModel
from statementparser.ingestion.sections import (
    Amount,
    OptionalAmount,
    Section,
    StatementDate,
    split_blocked,
)
from statementparser.models.enums import Broker, Currency
from statementparser.models.transaction import (
    DepositTransaction,
    DividendTransaction,
    Transaction,
)

logger = logging.getLogger(__name__)

SECTION_SHARE_DEPOSITS = "Share Deposits"
SECTION_CASH_DIVIDENDS = "Cash Dividends"

# StockPlan Connect reports everything in the plan currency
_CURRENCY = Currency.USD

_DEPOSIT_TYPES = {"DEPOSIT", "RELEASE", "SHARE DEPOSIT"}


class ShareDepositRow(RowModel):
    deposit_date: StatementDate = Field(alias="Date")
    symbol: str = Field(alias="Symbol")
    activity: str = Field(alias="Type")
    price: Amount = Field(alias="Price")
    quantity: Amount = Field(alias="Quantity")


class CashDividendRow(RowModel):
    pay_date: StatementDate = Field(alias="Date")
    symbol: str = Field(alias="Symbol")
    amount: Amount = Field(alias="Amount")
    tax_withheld: OptionalAmount = Field(default=Decimal("0"), alias="Tax Withheld")


class MorganStanleyRowReader(BaseRowReader):
    ROW_MODELS = {
        SECTION_SHARE_DEPOSITS: ShareDepositRow,
        SECTION_CASH_DIVIDENDS: CashDividendRow,
    }

    def split_sections(self, content: str, source: str) -> dict[str, Section]:
        return split_blocked(content, set(self.ROW_MODELS), source)


class MorganStanleyParser(BaseStatementParser):
    """Parses share deposits and cash dividends from a StockPlan Connect export."""

    reader = MorganStanleyRowReader()

    def parse(self, file_path: Path) -> list[Transaction]:
        source = str(file_path)
        records = self.reader.read_all(self._read_text(file_path), source)
        transactions: list[Transaction] = []

        for row in records[SECTION_SHARE_DEPOSITS]:
            if row.activity.upper() not in _DEPOSIT_TYPES:
                raise UnknownTransactionError(row.activity, f"{source} line {row.line}", row.deposit_date)
            transactions.append(
                self._build(
                    DepositTransaction,
                    source,
                    SECTION_SHARE_DEPOSITS,
                    row,
                    broker=Broker.MORGAN_STANLEY,
                    date=row.deposit_date,
                    name=row.symbol,
                    currency=_CURRENCY,
                    units=row.quantity,
                    price=row.price,
                )
            )

        for row in records[SECTION_CASH_DIVIDENDS]:
            transactions.append(
                self._build(
                    DividendTransaction,
                    source,
                    SECTION_CASH_DIVIDENDS,
                    row,
                    broker=Broker.MORGAN_STANLEY,
                    date=row.pay_date,
                    name=row.symbol,
                    currency=_CURRENCY,
                    income=row.amount,
                    tax=row.tax_withheld,
                )
            )

        logger.debug("%s: %d transaction(s)", source, len(transactions))
        return transactions
