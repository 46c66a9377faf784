"""Currency descriptors and the read-only lookup table built from them."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from statementparser.exceptions import UnknownCurrencyError
from statementparser.models.enums import Currency


class CurrencyDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    country: str


class CurrencyList:
    """Case-insensitive currency code lookup. Populated once, never mutated."""

    def __init__(self, descriptors: Iterable[CurrencyDescriptor]):
        table: dict[str, CurrencyDescriptor] = {}
        for descriptor in descriptors:
            key = descriptor.code.lower()
            if key in table:
                raise ValueError(f"Duplicate currency code: {descriptor.code}")
            table[key] = descriptor
        self._table = table

    def __getitem__(self, code: str) -> CurrencyDescriptor:
        try:
            return self._table[code.strip().lower()]
        except KeyError:
            raise UnknownCurrencyError(code) from None

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().lower() in self._table

    @property
    def is_empty(self) -> bool:
        return not self._table

    def currency(self, code: str) -> Currency:
        """Resolve a raw statement currency code to a Currency member."""
        descriptor = self[code]
        try:
            return Currency(descriptor.code.upper())
        except ValueError:
            raise UnknownCurrencyError(code) from None


_DESCRIPTORS = [
    CurrencyDescriptor(code="USD", name="dollar", country="USA"),
    CurrencyDescriptor(code="EUR", name="euro", country="EMU"),
    CurrencyDescriptor(code="CZK", name="koruna", country="Czech Republic"),
    CurrencyDescriptor(code="GBP", name="pound", country="United Kingdom"),
    CurrencyDescriptor(code="CHF", name="franc", country="Switzerland"),
    CurrencyDescriptor(code="CAD", name="dollar", country="Canada"),
    CurrencyDescriptor(code="JPY", name="yen", country="Japan"),
    CurrencyDescriptor(code="AUD", name="dollar", country="Australia"),
    CurrencyDescriptor(code="SEK", name="krona", country="Sweden"),
    CurrencyDescriptor(code="NOK", name="krone", country="Norway"),
    CurrencyDescriptor(code="DKK", name="krone", country="Denmark"),
    CurrencyDescriptor(code="PLN", name="zloty", country="Poland"),
    CurrencyDescriptor(code="HUF", name="forint", country="Hungary"),
]

DEFAULT_CURRENCY_LIST = CurrencyList(_DESCRIPTORS)
