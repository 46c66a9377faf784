"""Tests for section splitting and value cleaning."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import BaseModel

from statementparser.exceptions import FormatError
from statementparser.ingestion.sections import (
    Amount,
    OptionalAmount,
    StatementDate,
    split_blocked,
    split_prefixed,
)


class _Values(BaseModel):
    amount: Amount
    optional: OptionalAmount
    day: StatementDate


class TestSplitPrefixed:
    def test_collects_data_lines_with_headers(self):
        text = "\n".join([
            "Statement,Header,Field Name,Field Value",
            "Statement,Data,BrokerName,Lynx",
            "Dividends,Header,Currency,Date,Description,Amount",
            "Dividends,Data,USD,2022-03-10,AAPL(US0378331005) Cash Dividend,2.20",
            "Dividends,Total,,,,2.20",
        ])
        sections = split_prefixed(text, {"Dividends"}, "stmt.csv")
        assert list(sections) == ["Dividends"]
        section = sections["Dividends"]
        assert section.header_line == 3
        assert len(section.rows) == 1
        assert section.rows[0].line == 4
        assert section.rows[0].values["Amount"] == "2.20"
        assert section.rows[0].values["Dividends"] == "Dividends"

    def test_repeated_header_rebinds_columns(self):
        text = "\n".join([
            "Dividends,Header,Currency,Date,Description,Amount",
            "Dividends,Data,USD,2022-03-10,AAPL(X) Cash Dividend,2.20",
            "Dividends,Header,Currency,Amount,Date,Description",
            "Dividends,Data,EUR,1.10,2022-04-01,SAP(X) Cash Dividend",
        ])
        rows = split_prefixed(text, {"Dividends"}, "stmt.csv")["Dividends"].rows
        assert rows[0].values["Amount"] == "2.20"
        assert rows[1].values["Amount"] == "1.10"
        assert rows[1].values["Currency"] == "EUR"

    def test_data_before_header(self):
        with pytest.raises(FormatError, match="line 1"):
            split_prefixed("Dividends,Data,USD,2022-03-10,x,1", {"Dividends"}, "stmt.csv")

    def test_no_known_sections(self):
        assert split_prefixed("Trades,Header,Symbol\nTrades,Data,AAPL", {"Dividends"}, "s") == {}

    def test_quoted_cell_spanning_lines(self):
        text = "\n".join([
            "Dividends,Header,Currency,Date,Description,Amount",
            "Dividends,Data,USD,2022-03-10,\"AAPL(US0378331005) Cash Dividend",
            "(Ordinary Dividend)\",2.20",
            "Dividends,Data,USD,2022-03-15,MSFT(US5949181045) Cash Dividend,6.20",
        ])
        rows = split_prefixed(text, {"Dividends"}, "stmt.csv")["Dividends"].rows
        assert len(rows) == 2
        assert rows[0].line == 2
        assert rows[0].values["Description"] == "AAPL(US0378331005) Cash Dividend\n(Ordinary Dividend)"
        assert rows[0].values["Amount"] == "2.20"
        assert rows[1].line == 4
        assert rows[1].values["Amount"] == "6.20"


class TestSplitBlocked:
    def test_section_ends_at_blank_line(self):
        text = "\n".join([
            "Some export title",
            "Share Deposits",
            "Date,Symbol,Type,Price,Quantity",
            "15-Mar-2022,GOOG,Deposit,$130.50,12",
            "",
            "Not part of any section,1,2",
        ])
        sections = split_blocked(text, {"Share Deposits"}, "ms.csv")
        section = sections["Share Deposits"]
        assert section.headers == ["Date", "Symbol", "Type", "Price", "Quantity"]
        assert [row.line for row in section.rows] == [4]

    def test_next_marker_starts_new_section(self):
        text = "\n".join([
            "Share Deposits",
            "Date,Symbol,Type,Price,Quantity",
            "15-Mar-2022,GOOG,Deposit,$130.50,12",
            "Cash Dividends",
            "Date,Symbol,Amount",
            "20-Jun-2022,GOOG,$12.00",
        ])
        sections = split_blocked(text, {"Share Deposits", "Cash Dividends"}, "ms.csv")
        assert len(sections["Share Deposits"].rows) == 1
        assert sections["Cash Dividends"].rows[0].values == {
            "Date": "20-Jun-2022",
            "Symbol": "GOOG",
            "Amount": "$12.00",
        }

    def test_empty_text(self):
        assert split_blocked("", {"Share Deposits"}, "ms.csv") == {}


class TestValueCleaning:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("$1,234.56 USD", Decimal("1234.56")),
            ("(12.00)", Decimal("-12.00")),
            ("-0.33", Decimal("-0.33")),
            ("$130.50", Decimal("130.50")),
        ],
    )
    def test_amounts(self, raw, expected):
        values = _Values(amount=raw, optional="", day="2022-03-10")
        assert values.amount == expected
        assert values.optional == Decimal("0")

    @pytest.mark.parametrize(
        "raw",
        ["2022-03-10", "20220310", "03/10/2022", "10-Mar-2022", "2022-03-10, 20:20:00"],
    )
    def test_dates(self, raw):
        assert _Values(amount="1", optional="1", day=raw).day == date(2022, 3, 10)

    def test_bad_date(self):
        with pytest.raises(ValueError):
            _Values(amount="1", optional="1", day="yesterday")

    def test_bad_amount(self):
        with pytest.raises(ValueError):
            _Values(amount="n/a", optional="1", day="2022-03-10")
