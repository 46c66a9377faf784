"""Brokerage statement parser and tax-lot gain/loss calculator."""

__version__ = "0.1.0"
