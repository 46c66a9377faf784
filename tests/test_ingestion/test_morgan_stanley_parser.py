"""Unit tests for the Morgan Stanley StockPlan Connect parser."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from statementparser.exceptions import FormatError, UnknownTransactionError
from statementparser.ingestion.morgan_stanley import MorganStanleyParser
from statementparser.models.enums import Broker, Currency
from statementparser.models.transaction import DepositTransaction, DividendTransaction


@pytest.fixture
def parser():
    return MorganStanleyParser()


_TITLE = "Morgan Stanley StockPlan Connect - Activity"
_DEPOSITS = "Share Deposits"
_DEPOSIT_HEADER = "Date,Symbol,Type,Price,Quantity"
_DEPOSIT_ROW_1 = "15-Mar-2022,GOOG,Deposit,$130.50 USD,12"
_DEPOSIT_ROW_2 = '15-Jun-2022,GOOG,Release,"$1,130.00 USD",3'
_DIVIDENDS = "Cash Dividends"
_DIVIDEND_HEADER = "Date,Symbol,Amount,Tax Withheld"
_DIVIDEND_ROW = "20-Jun-2022,GOOG,$12.00,($1.80)"


def _write_csv(tmp_path: Path, *rows: str) -> Path:
    csv_path = tmp_path / "morgan_stanley.csv"
    csv_path.write_text("\n".join(rows))
    return csv_path


class TestMorganStanleyParser:
    def test_parse_deposits_and_dividends(self, parser, tmp_path):
        csv_path = _write_csv(
            tmp_path,
            _TITLE,
            "",
            _DEPOSITS, _DEPOSIT_HEADER, _DEPOSIT_ROW_1, _DEPOSIT_ROW_2,
            "",
            _DIVIDENDS, _DIVIDEND_HEADER, _DIVIDEND_ROW,
        )
        transactions = parser.parse(csv_path)

        deposits = [t for t in transactions if isinstance(t, DepositTransaction)]
        dividends = [t for t in transactions if isinstance(t, DividendTransaction)]
        assert len(deposits) == 2
        assert len(dividends) == 1

        first = deposits[0]
        assert first.broker == Broker.MORGAN_STANLEY
        assert first.date == date(2022, 3, 15)
        assert first.name == "GOOG"
        assert first.currency == Currency.USD
        assert first.amount == Decimal("12")
        assert first.price == Decimal("130.50")
        assert deposits[1].price == Decimal("1130.00")

        dividend = dividends[0]
        assert dividend.income == Decimal("12.00")
        assert dividend.tax == Decimal("1.80")

    def test_tax_withheld_column_optional(self, parser, tmp_path):
        csv_path = _write_csv(tmp_path, _DIVIDENDS, "Date,Symbol,Amount", "20-Jun-2022,GOOG,$12.00")
        (dividend,) = parser.parse(csv_path)
        assert dividend.tax == Decimal("0")

    def test_blank_tax_withheld(self, parser, tmp_path):
        csv_path = _write_csv(tmp_path, _DIVIDENDS, _DIVIDEND_HEADER, "20-Jun-2022,GOOG,$12.00,")
        (dividend,) = parser.parse(csv_path)
        assert dividend.tax == Decimal("0")

    def test_unknown_activity_type(self, parser, tmp_path):
        csv_path = _write_csv(
            tmp_path, _DEPOSITS, _DEPOSIT_HEADER, "15-Mar-2022,GOOG,Withdrawal,$130.50,12"
        )
        with pytest.raises(UnknownTransactionError, match="Withdrawal"):
            parser.parse(csv_path)

    def test_missing_quantity_column(self, parser, tmp_path):
        csv_path = _write_csv(
            tmp_path, _DEPOSITS, "Date,Symbol,Type,Price", "15-Mar-2022,GOOG,Deposit,$130.50"
        )
        with pytest.raises(FormatError, match="Quantity"):
            parser.parse(csv_path)

    def test_zero_quantity_rejected(self, parser, tmp_path):
        csv_path = _write_csv(tmp_path, _DEPOSITS, _DEPOSIT_HEADER, "15-Mar-2022,GOOG,Deposit,$130.50,0")
        with pytest.raises(FormatError) as exc_info:
            parser.parse(csv_path)
        assert exc_info.value.line == 3

    def test_missing_symbol_rejected(self, parser, tmp_path):
        csv_path = _write_csv(tmp_path, _DEPOSITS, _DEPOSIT_HEADER, "15-Mar-2022,,Deposit,$130.50,2")
        with pytest.raises(FormatError, match="name"):
            parser.parse(csv_path)

    def test_empty_file(self, parser, tmp_path):
        assert parser.parse(_write_csv(tmp_path)) == []
