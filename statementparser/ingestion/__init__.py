"""Broker statement readers and parsers."""

from statementparser.ingestion.base import BaseRowReader, BaseStatementParser, RowModel
from statementparser.ingestion.fidelity import FidelityParser, FidelityRowReader
from statementparser.ingestion.lynx import LynxParser, LynxRowReader
from statementparser.ingestion.morgan_stanley import MorganStanleyParser, MorganStanleyRowReader
from statementparser.ingestion.parser import TransactionParser, resolve_file_paths
from statementparser.models.enums import Broker

_PARSER_MAP: dict[Broker, type[BaseStatementParser]] = {
    Broker.LYNX: LynxParser,
    Broker.MORGAN_STANLEY: MorganStanleyParser,
    Broker.FIDELITY: FidelityParser,
}


def get_parser(broker: Broker) -> BaseStatementParser:
    """Return a parser instance for a broker's statement format."""
    parser_cls = _PARSER_MAP[broker]
    return parser_cls()


__all__ = [
    "get_parser",
    "resolve_file_paths",
    "BaseRowReader",
    "BaseStatementParser",
    "FidelityParser",
    "FidelityRowReader",
    "LynxParser",
    "LynxRowReader",
    "MorganStanleyParser",
    "MorganStanleyRowReader",
    "RowModel",
    "TransactionParser",
]
