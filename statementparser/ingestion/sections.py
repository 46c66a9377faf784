"""Splitting delimited statement text into named sections, and value cleaning.

Brokers lay sections out in one of two ways:

    prefixed  Every line starts with the section label, the second cell says
              whether the line is a Header, Data or Total line:

                  Dividends,Header,Currency,Date,Description,Amount
                  Dividends,Data,USD,2022-03-10,AAPL(US0378331005) Cash Dividend,2.30

    blocked   A line holding only the section name, then a header line, then
              data lines until a blank line or the next section marker:

                  Share Deposits
                  Date,Symbol,Type,Price,Quantity
                  15-Mar-2022,GOOG,Deposit,$130.50 USD,12
"""

import csv
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator

from statementparser.exceptions import FormatError

_DATE_FORMATS = ("%Y-%m-%d", "%Y%m%d", "%m/%d/%Y", "%d-%b-%Y", "%d-%b-%y")


@dataclass
class SectionRow:
    line: int
    values: dict[str, str]


@dataclass
class Section:
    name: str
    headers: list[str] = field(default_factory=list)
    header_line: int | None = None
    rows: list[SectionRow] = field(default_factory=list)


def _lines(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield (1-based starting line number, cells) for each record of delimited text.

    Quoted cells may span lines; the record is numbered by its first line.
    """
    reader = csv.reader(text.splitlines(keepends=True))
    start = 1
    for cells in reader:
        yield start, cells
        start = reader.line_num + 1


def _is_blank(cells: list[str]) -> bool:
    return not any(cell.strip() for cell in cells)


def split_prefixed(text: str, known: set[str], source: str) -> dict[str, Section]:
    """Collect the lines of every known section in a prefixed-layout file."""
    sections: dict[str, Section] = {}
    for number, cells in _lines(text):
        if _is_blank(cells):
            continue
        name = cells[0].strip()
        if name not in known or len(cells) < 2:
            continue

        kind = cells[1].strip()
        section = sections.setdefault(name, Section(name=name))
        if kind == "Header":
            # A section may repeat its header, e.g. once per currency block
            section.headers = [cell.strip() for cell in cells]
            section.header_line = number
        elif kind == "Data":
            if not section.headers:
                raise FormatError(source, "data line before section header", name, number)
            section.rows.append(SectionRow(line=number, values=dict(zip(section.headers, cells))))
    return sections


def split_blocked(text: str, known: set[str], source: str) -> dict[str, Section]:
    """Collect the lines of every known section in a blocked-layout file."""
    sections: dict[str, Section] = {}
    current: Section | None = None
    for number, cells in _lines(text):
        if _is_blank(cells):
            current = None
            continue

        first = cells[0].strip()
        if first in known and _is_blank(cells[1:]):
            current = sections.setdefault(first, Section(name=first))
            current.headers = []
            continue
        if current is None:
            continue

        if not current.headers:
            current.headers = [cell.strip() for cell in cells]
            current.header_line = number
        else:
            current.rows.append(SectionRow(line=number, values=dict(zip(current.headers, cells))))
    return sections


def _clean_amount(value: Any) -> Any:
    """Strip currency decoration: '$1,234.56 USD' -> '1234.56', '(12.00)' -> '-12.00'."""
    if not isinstance(value, str):
        return value
    cleaned = value.strip().replace("$", "").replace(",", "")
    parts = cleaned.split()
    if len(parts) == 2 and parts[1].isalpha():
        cleaned = parts[0]
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    return cleaned


def _clean_optional_amount(value: Any) -> Any:
    cleaned = _clean_amount(value)
    if isinstance(cleaned, str) and not cleaned:
        return "0"
    return cleaned


def _clean_date(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    # Lynx statements may carry a time part: '2022-03-10, 20:20:00'
    stripped = stripped.split(",")[0].strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(stripped, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognized date {value!r}")


Amount = Annotated[Decimal, BeforeValidator(_clean_amount)]
OptionalAmount = Annotated[Decimal, BeforeValidator(_clean_optional_amount)]
StatementDate = Annotated[date, BeforeValidator(_clean_date)]
