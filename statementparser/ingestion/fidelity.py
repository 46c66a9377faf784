"""Fidelity NetBenefits ESPP purchase history parser."""

import logging
from pathlib import Path

from pydantic import Field

from statementparser.ingestion.base import BaseRowReader, BaseStatementParser, RowModel
from statementparser.ingestion.sections import Amount, Section, StatementDate, split_blocked
from statementparser.models.enums import Broker
from statementparser.models.transaction import ESPPTransaction, Transaction

logger = logging.getLogger(__name__)

SECTION_ESPP_PURCHASES = "ESPP Purchases"


class ESPPPurchaseRow(RowModel):
    purchase_date: StatementDate = Field(alias="Purchase Date")
    symbol: str = Field(alias="Symbol")
    quantity: Amount = Field(alias="Quantity")
    purchase_price: Amount = Field(alias="Purchase Price")
    market_price: Amount = Field(alias="Market Price")
    currency: str = Field(default="USD", alias="Currency")


class FidelityRowReader(BaseRowReader):
    ROW_MODELS = {SECTION_ESPP_PURCHASES: ESPPPurchaseRow}

    def split_sections(self, content: str, source: str) -> dict[str, Section]:
        return split_blocked(content, set(self.ROW_MODELS), source)


class FidelityParser(BaseStatementParser):
    """Parses ESPP purchases from a Fidelity purchase history export."""

    reader = FidelityRowReader()

    def parse(self, file_path: Path) -> list[Transaction]:
        source = str(file_path)
        records = self.reader.read_all(self._read_text(file_path), source)
        transactions: list[Transaction] = [
            self._build(
                ESPPTransaction,
                source,
                SECTION_ESPP_PURCHASES,
                row,
                broker=Broker.FIDELITY,
                date=row.purchase_date,
                name=row.symbol,
                currency=self._currency(row.currency, source, SECTION_ESPP_PURCHASES, row),
                units=row.quantity,
                purchase_price=row.purchase_price,
                market_price=row.market_price,
            )
            for row in records[SECTION_ESPP_PURCHASES]
        ]
        logger.debug("%s: %d ESPP purchase(s)", source, len(transactions))
        return transactions
