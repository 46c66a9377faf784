"""Custom exceptions for the statement parser."""

from datetime import date


class StatementParserError(Exception):
    """Base exception for statement parsing and tax-lot computation errors."""


class FormatError(StatementParserError):
    """Raised when a statement file or row cannot be mapped to the expected shape."""

    def __init__(
        self,
        source: str,
        message: str,
        section: str | None = None,
        line: int | None = None,
    ):
        self.source = source
        self.section = section
        self.line = line
        location = source
        if section:
            location += f" [{section}]"
        if line is not None:
            location += f" line {line}"
        super().__init__(f"Format error in {location}: {message}")


class UnknownCurrencyError(StatementParserError, LookupError):
    """Raised when a currency code is not in the currency list."""

    def __init__(
        self,
        code: str,
        source: str | None = None,
        section: str | None = None,
        line: int | None = None,
    ):
        self.code = code
        self.source = source
        self.section = section
        self.line = line
        message = f"Unknown currency code: {code!r}"
        if source:
            message += f" in {source}"
            if section:
                message += f" [{section}]"
            if line is not None:
                message += f" line {line}"
        super().__init__(message)


class UnknownTransactionError(StatementParserError, LookupError):
    """Raised when a statement row describes a transaction kind we cannot map."""

    def __init__(self, kind: str, source: str, transaction_date: date | None = None):
        self.kind = kind
        self.source = source
        self.transaction_date = transaction_date
        when = f" on {transaction_date}" if transaction_date else ""
        super().__init__(f"Unknown transaction type {kind!r}{when} in {source}")


class ContractViolationError(StatementParserError):
    """Raised when an internal invariant is broken. Indicates a bug, not bad input."""

    def __init__(self, message: str):
        super().__init__(f"Contract violation: {message}")


class NotApplicableError(StatementParserError, NotImplementedError):
    """Raised when an attribute has no meaning for a transaction variant."""

    def __init__(self, attribute: str, variant: str):
        self.attribute = attribute
        self.variant = variant
        super().__init__(f"'{attribute}' is not applicable to {variant}")
