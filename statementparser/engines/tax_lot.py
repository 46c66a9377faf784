"""Tax-lot selection and capital gain/loss computation.

Given every normalized transaction and a known past sale, works out which
share lots the broker treated as sold, the gain or loss realized on them, and
how many currently held shares could be sold today before the gain reaches
that loss.
"""

from collections.abc import Iterator, Sequence
from datetime import date
from decimal import Decimal
from itertools import accumulate

from statementparser.config import Scenario
from statementparser.exceptions import ContractViolationError
from statementparser.models.reports import ForwardFeasibility, LotLine, TaxLotReport
from statementparser.models.transaction import LotTransaction, Transaction

_ZERO = Decimal("0")


def _total_units(lots: Sequence[LotTransaction]) -> Decimal:
    return sum((lot.amount for lot in lots), _ZERO)


class TaxLotEngine:
    """Computes realized gain/loss on a past sale and forward sale feasibility."""

    def eligible_lots(
        self,
        transactions: Sequence[Transaction],
        eligible_date: date,
        sold_at_date: date,
    ) -> list[LotTransaction]:
        """Share lots acquired in [eligible_date, sold_at_date). Dividends never qualify."""
        return [
            t
            for t in transactions
            if isinstance(t, LotTransaction) and eligible_date <= t.date < sold_at_date
        ]

    @staticmethod
    def retention_scan(
        lots: Sequence[LotTransaction], units_retained: Decimal
    ) -> Iterator[tuple[LotTransaction, Decimal, bool]]:
        """Yield (lot, cumulative units including the lot, retained?) in the given order.

        A lot counts as retained while the running total, after adding the
        lot itself, is still strictly below units_retained.
        """
        running = accumulate(lot.amount for lot in lots)
        for lot, cumulative in zip(lots, running):
            yield lot, cumulative, cumulative < units_retained

    def leftover_lots(
        self, eligible: Sequence[LotTransaction], units_retained: Decimal
    ) -> list[LotTransaction]:
        """Lots assumed still held after the sale, most recently acquired first.

        Lots acquired on the same day keep their input order.
        """
        newest_first = sorted(eligible, key=lambda lot: lot.date, reverse=True)
        leftover: list[LotTransaction] = []
        for lot, _cumulative, retained in self.retention_scan(newest_first, units_retained):
            if not retained:
                break
            leftover.append(lot)
        return leftover

    @staticmethod
    def taxable_lots(
        eligible: Sequence[LotTransaction], leftover: Sequence[LotTransaction]
    ) -> list[LotTransaction]:
        """Eligible lots not retained, compared by identity so equal-valued lots stay distinct."""
        retained = {id(lot) for lot in leftover}
        return [lot for lot in eligible if id(lot) not in retained]

    @staticmethod
    def lot_line(lot: Transaction, price: Decimal) -> LotLine:
        """Gain on a whole lot if sold at price."""
        if not isinstance(lot, LotTransaction):
            raise ContractViolationError(
                f"{type(lot).__name__} {lot.name} on {lot.date} reached the gain computation"
            )
        acquisition_price = lot.acquisition_price
        return LotLine(
            date=lot.date,
            name=lot.name,
            broker=lot.broker,
            currency=lot.currency,
            amount=lot.amount,
            price=acquisition_price,
            gain=lot.amount * (price - acquisition_price),
        )

    def realized_gain(
        self, taxable: Sequence[LotTransaction], selling_price: Decimal
    ) -> tuple[Decimal, list[LotLine]]:
        """Total gain over the taxable lots, with one detail line per lot."""
        lines = [self.lot_line(lot, selling_price) for lot in taxable]
        return sum((line.gain for line in lines), _ZERO), lines

    def forward_feasibility(
        self,
        transactions: Sequence[Transaction],
        leftover: Sequence[LotTransaction],
        sold_at_date: date,
        current_price: Decimal,
        loss: Decimal,
        current_date: date | None = None,
    ) -> ForwardFeasibility:
        """Oldest-first prefix of held lots whose combined gain stays below loss.

        Held lots are everything acquired after the sale plus the lots
        retained through it.
        """
        acquired_later = [
            t for t in transactions if isinstance(t, LotTransaction) and t.date > sold_at_date
        ]
        pool = sorted([*acquired_later, *leftover], key=lambda lot: lot.date)
        candidates = [self.lot_line(lot, current_price) for lot in pool]

        forecast_gain = _ZERO
        sellable: list[LotLine] = []
        for line in candidates:
            if forecast_gain + line.gain >= loss:
                break
            forecast_gain += line.gain
            sellable.append(line)

        return ForwardFeasibility(
            current_price=current_price,
            current_date=current_date or date.today(),
            units=sum((line.amount for line in sellable), _ZERO),
            forecast_gain=forecast_gain,
            lots=sellable,
            candidates=candidates,
        )

    def compute(self, transactions: Sequence[Transaction], scenario: Scenario) -> TaxLotReport:
        """Run the full computation for one scenario."""
        eligible = self.eligible_lots(transactions, scenario.eligible_date, scenario.sold_at_date)
        leftover = self.leftover_lots(eligible, scenario.units_retained)
        taxable = self.taxable_lots(eligible, leftover)

        gain, taxable_lines = self.realized_gain(taxable, scenario.selling_price)
        loss = -gain

        forward = None
        if scenario.current_price is not None:
            forward = self.forward_feasibility(
                transactions,
                leftover,
                scenario.sold_at_date,
                scenario.current_price,
                loss,
                scenario.current_date,
            )

        return TaxLotReport(
            selling_price=scenario.selling_price,
            sold_at_date=scenario.sold_at_date,
            eligible_date=scenario.eligible_date,
            units_retained=scenario.units_retained,
            realized_gain=gain,
            realized_loss=loss,
            eligible_units=_total_units(eligible),
            leftover_units=_total_units(leftover),
            taxable=taxable_lines,
            leftover=[self.lot_line(lot, scenario.selling_price) for lot in leftover],
            forward=forward,
        )
