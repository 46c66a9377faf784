"""Base interfaces for broker row readers and statement parsers."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from statementparser.exceptions import FormatError, UnknownCurrencyError
from statementparser.ingestion.sections import Section
from statementparser.models.currency import DEFAULT_CURRENCY_LIST, CurrencyList
from statementparser.models.enums import Currency
from statementparser.models.transaction import Transaction

logger = logging.getLogger(__name__)


class RowModel(BaseModel):
    """Typed record for one data line of a statement section.

    Fields are bound to column headers through aliases, so column order in
    the file does not matter.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    _line: int = PrivateAttr(default=0)

    @property
    def line(self) -> int:
        return self._line


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


class BaseRowReader(ABC):
    """Maps the raw lines of a broker's statement sections to typed row records."""

    ROW_MODELS: ClassVar[dict[str, type[RowModel]]] = {}

    @abstractmethod
    def split_sections(self, content: str, source: str) -> dict[str, Section]:
        """Locate every known section in the file content."""
        ...

    def skip_row(self, section: str, values: dict[str, str]) -> bool:
        """Return True for data lines that carry no record, e.g. totals."""
        return False

    def read(self, content: str, section: str, source: str = "<statement>") -> list[RowModel]:
        """Read the records of a single section. A missing section yields []."""
        if section not in self.ROW_MODELS:
            raise ValueError(f"{type(self).__name__} has no section {section!r}")
        found = self.split_sections(content, source).get(section)
        if found is None:
            return []
        return self._read_section(found, source)

    def read_all(self, content: str, source: str = "<statement>") -> dict[str, list[RowModel]]:
        """Read every known section; sections absent from the file map to []."""
        found = self.split_sections(content, source)
        return {
            name: self._read_section(found[name], source) if name in found else []
            for name in self.ROW_MODELS
        }

    def _read_section(self, section: Section, source: str) -> list[RowModel]:
        model = self.ROW_MODELS[section.name]
        if not section.headers:
            raise FormatError(source, "section has no header line", section.name)

        required = {
            field.alias or name
            for name, field in model.model_fields.items()
            if field.is_required()
        }
        missing = sorted(required - set(section.headers))
        if missing:
            raise FormatError(
                source,
                f"missing column(s): {', '.join(missing)}",
                section.name,
                section.header_line,
            )

        records: list[RowModel] = []
        for row in section.rows:
            if self.skip_row(section.name, row.values):
                continue
            try:
                record = model.model_validate(row.values)
            except ValidationError as exc:
                raise FormatError(source, _describe(exc), section.name, row.line) from exc
            record._line = row.line
            records.append(record)

        logger.debug("%s: read %d row(s) from section %r", source, len(records), section.name)
        return records


class BaseStatementParser(ABC):
    """Abstract base class for all broker statement parsers."""

    reader: BaseRowReader

    def __init__(self, currency_list: CurrencyList = DEFAULT_CURRENCY_LIST):
        self.currency_list = currency_list

    @abstractmethod
    def parse(self, file_path: Path) -> list[Transaction]:
        """Parse one statement file into normalized transactions."""
        ...

    @staticmethod
    def _read_text(file_path: Path) -> str:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        try:
            return file_path.read_text(encoding="utf-8-sig")  # Handle BOM
        except UnicodeDecodeError as exc:
            raise FormatError(str(file_path), "file is not UTF-8 text") from exc

    def _currency(self, code: str, source: str, section: str, record: RowModel) -> Currency:
        """Resolve a row's currency cell, reporting unknown codes against the row."""
        try:
            return self.currency_list.currency(code)
        except UnknownCurrencyError as exc:
            raise UnknownCurrencyError(code, source, section, record.line) from exc

    @staticmethod
    def _build(
        transaction_cls: type[Transaction],
        source: str,
        section: str,
        record: RowModel,
        **fields: Any,
    ) -> Transaction:
        """Construct a transaction, reporting invalid values against the source row."""
        try:
            return transaction_cls(**fields)
        except ValidationError as exc:
            raise FormatError(source, _describe(exc), section, record.line) from exc
