"""Data models for the statement parser."""

from statementparser.models.currency import (
    DEFAULT_CURRENCY_LIST,
    CurrencyDescriptor,
    CurrencyList,
)
from statementparser.models.enums import Broker, Currency
from statementparser.models.reports import ForwardFeasibility, LotLine, TaxLotReport
from statementparser.models.transaction import (
    DepositTransaction,
    DividendTransaction,
    ESPPTransaction,
    LotTransaction,
    Transaction,
)

__all__ = [
    "Broker",
    "Currency",
    "CurrencyDescriptor",
    "CurrencyList",
    "DEFAULT_CURRENCY_LIST",
    "DepositTransaction",
    "DividendTransaction",
    "ESPPTransaction",
    "ForwardFeasibility",
    "LotLine",
    "LotTransaction",
    "TaxLotReport",
    "Transaction",
]
