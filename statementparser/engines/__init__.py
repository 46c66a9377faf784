"""Tax computation engines."""

from statementparser.engines.tax_lot import TaxLotEngine

__all__ = ["TaxLotEngine"]
