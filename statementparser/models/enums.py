"""Enumerations for the statement parser."""

from enum import StrEnum


class Broker(StrEnum):
    LYNX = "LYNX"
    MORGAN_STANLEY = "MORGAN_STANLEY"
    FIDELITY = "FIDELITY"


class Currency(StrEnum):
    USD = "USD"
    EUR = "EUR"
    CZK = "CZK"
    GBP = "GBP"
    CHF = "CHF"
    CAD = "CAD"
    JPY = "JPY"
    AUD = "AUD"
    SEK = "SEK"
    NOK = "NOK"
    DKK = "DKK"
    PLN = "PLN"
    HUF = "HUF"
