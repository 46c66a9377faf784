"""Scenario parameters and parser registration for a computation run."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from statementparser.ingestion import get_parser
from statementparser.ingestion.base import BaseStatementParser
from statementparser.models.enums import Broker

DEFAULT_BROKERS = ["*.csv=lynx"]


class Scenario(BaseModel):
    """A known past sale, plus an optional what-if sale at today's price."""

    selling_price: Decimal
    sold_at_date: date
    # Shares still held after the sale
    units_retained: Decimal = Field(ge=0)
    eligible_date: date
    current_price: Decimal | None = None
    current_date: date | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "Scenario":
        if self.eligible_date > self.sold_at_date:
            raise ValueError(
                f"eligible_date {self.eligible_date} is after sold_at_date {self.sold_at_date}"
            )
        return self


def load_scenario(path: Path | None = None, **overrides: Any) -> Scenario:
    """Build a Scenario from an optional JSON file, with non-None overrides on top."""
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Scenario file not found: {path}")
        data = json.loads(path.read_text())
    data.update({key: value for key, value in overrides.items() if value is not None})
    return Scenario.model_validate(data)


def parse_broker(name: str) -> Broker:
    """Accept 'lynx', 'morgan-stanley', 'MORGAN_STANLEY' and similar spellings."""
    normalized = name.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return Broker(normalized)
    except ValueError:
        choices = ", ".join(b.value.lower().replace("_", "-") for b in Broker)
        raise ValueError(f"Unknown broker {name!r} (expected one of: {choices})") from None


def build_parsers(mappings: list[str] | None = None) -> dict[str, BaseStatementParser]:
    """Turn 'PATTERN=BROKER' (or bare 'BROKER', meaning every file) entries into a parser map."""
    parsers: dict[str, BaseStatementParser] = {}
    for entry in mappings or DEFAULT_BROKERS:
        pattern, sep, broker_name = entry.rpartition("=")
        if not sep:
            pattern = "*"
        parsers[pattern.strip() or "*"] = get_parser(parse_broker(broker_name))
    return parsers
