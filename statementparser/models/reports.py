"""Result models returned by the tax-lot engine."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from statementparser.models.enums import Broker, Currency


class LotLine(BaseModel):
    date: date
    name: str
    broker: Broker
    currency: Currency
    amount: Decimal
    price: Decimal
    gain: Decimal


class ForwardFeasibility(BaseModel):
    """How much of the currently held stock can be sold against a realized loss."""

    current_price: Decimal
    current_date: date
    units: Decimal
    forecast_gain: Decimal
    lots: list[LotLine]
    candidates: list[LotLine]


class TaxLotReport(BaseModel):
    selling_price: Decimal
    sold_at_date: date
    eligible_date: date
    units_retained: Decimal
    realized_gain: Decimal
    realized_loss: Decimal
    eligible_units: Decimal
    leftover_units: Decimal
    taxable: list[LotLine]
    leftover: list[LotLine]
    forward: ForwardFeasibility | None = None
