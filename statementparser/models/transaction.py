"""Normalized transaction models produced by every broker parser."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statementparser.exceptions import NotApplicableError
from statementparser.models.enums import Broker, Currency


class Transaction(BaseModel, ABC):
    """A single normalized statement entry. Immutable once built."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    broker: Broker
    date: date
    name: str = Field(min_length=1)
    currency: Currency

    @property
    @abstractmethod
    def amount(self) -> Decimal:
        """Variant-specific quantity (unit count for share lots)."""

    def __str__(self) -> str:
        return (
            f"Broker: {self.broker} Date: {self.date.isoformat()} "
            f"Name: {self.name} Currency: {self.currency}"
        )


class DividendTransaction(Transaction):
    """Cash dividend with the tax withheld on it. Not a share lot."""

    income: Decimal
    tax: Decimal = Decimal("0")

    @field_validator("tax")
    @classmethod
    def _tax_magnitude(cls, value: Decimal) -> Decimal:
        # Brokers report withholding as a negative cash movement
        return abs(value)

    @property
    def amount(self) -> Decimal:
        raise NotApplicableError("amount", type(self).__name__)

    def __str__(self) -> str:
        return f"{super().__str__()} Income: {self.income} Tax: {self.tax}"


class LotTransaction(Transaction):
    """A discrete acquisition of shares, tracked individually for tax purposes."""

    units: Decimal = Field(gt=0)

    @property
    def amount(self) -> Decimal:
        return self.units

    @property
    @abstractmethod
    def acquisition_price(self) -> Decimal:
        """Per-unit price the lot's gain is measured against."""


class DepositTransaction(LotTransaction):
    """Shares deposited into the account (e.g. an RSU release) at a given price."""

    price: Decimal

    @property
    def acquisition_price(self) -> Decimal:
        return self.price

    def __str__(self) -> str:
        return f"{super().__str__()} Amount: {self.units} Price: {self.price}"


class ESPPTransaction(LotTransaction):
    """Shares bought through an employee stock purchase plan."""

    market_price: Decimal
    purchase_price: Decimal | None = None

    @property
    def acquisition_price(self) -> Decimal:
        return self.market_price

    def __str__(self) -> str:
        text = f"{super().__str__()} Amount: {self.units} Market price: {self.market_price}"
        if self.purchase_price is not None:
            text += f" Purchase price: {self.purchase_price}"
        return text
