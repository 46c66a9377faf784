"""Shared test fixtures for the statement parser."""

from datetime import date
from decimal import Decimal

import pytest

from statementparser.config import Scenario
from statementparser.models.enums import Broker, Currency
from statementparser.models.transaction import (
    DepositTransaction,
    DividendTransaction,
    ESPPTransaction,
)


def _make_deposit(
    day: date, units: str, price: str, name: str = "GOOG"
) -> DepositTransaction:
    return DepositTransaction(
        broker=Broker.MORGAN_STANLEY,
        date=day,
        name=name,
        currency=Currency.USD,
        units=Decimal(units),
        price=Decimal(price),
    )


def _make_espp(
    day: date, units: str, market_price: str, purchase_price: str | None = None
) -> ESPPTransaction:
    return ESPPTransaction(
        broker=Broker.FIDELITY,
        date=day,
        name="MSFT",
        currency=Currency.USD,
        units=Decimal(units),
        market_price=Decimal(market_price),
        purchase_price=Decimal(purchase_price) if purchase_price else None,
    )


@pytest.fixture
def sample_dividend() -> DividendTransaction:
    return DividendTransaction(
        broker=Broker.LYNX,
        date=date(2022, 3, 10),
        name="AAPL",
        currency=Currency.USD,
        income=Decimal("2.20"),
        tax=Decimal("-0.33"),
    )


@pytest.fixture
def older_lot() -> DepositTransaction:
    return _make_deposit(date(2021, 1, 1), "5", "200")


@pytest.fixture
def newer_lot() -> DepositTransaction:
    return _make_deposit(date(2022, 6, 1), "10", "250")


@pytest.fixture
def sample_scenario() -> Scenario:
    return Scenario(
        selling_price=Decimal("256.38"),
        sold_at_date=date(2023, 3, 6),
        units_retained=Decimal("13"),
        eligible_date=date(2020, 3, 6),
    )


@pytest.fixture
def make_deposit():
    return _make_deposit


@pytest.fixture
def make_espp():
    return _make_espp
