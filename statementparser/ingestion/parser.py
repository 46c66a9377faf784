"""Routes statement files to broker parsers and collects their transactions."""

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from fnmatch import fnmatch
from pathlib import Path

from statementparser.ingestion.base import BaseStatementParser
from statementparser.models.transaction import Transaction

logger = logging.getLogger(__name__)


def resolve_file_paths(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories (recursively) into a flat list of files.

    Paths that do not exist are skipped with a warning.
    """
    output: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            output.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        elif path.is_file():
            output.append(path)
        else:
            logger.warning("Path %s does not exist, skipping", path)
    return output


class TransactionParser:
    """Parses statement files with the broker parser registered for each file type.

    Parsers are keyed by a glob pattern matched against the file name; the
    first matching pattern wins.
    """

    def __init__(self, parsers: Mapping[str, BaseStatementParser]):
        self._parsers = dict(parsers)

    def parser_for(self, file_path: Path) -> BaseStatementParser | None:
        name = file_path.name.lower()
        for pattern, parser in self._parsers.items():
            if fnmatch(name, pattern.lower()):
                return parser
        return None

    def parse(self, file_path: Path) -> list[Transaction]:
        """Parse one file. Files with no registered parser yield []."""
        parser = self.parser_for(file_path)
        if parser is None:
            logger.warning("No parser registered for %s, skipping", file_path)
            return []
        transactions = parser.parse(file_path)
        logger.info(
            "Parsed %d transaction(s) from %s with %s",
            len(transactions), file_path, type(parser).__name__,
        )
        return transactions

    def parse_all(
        self, file_paths: Iterable[Path], max_workers: int | None = None
    ) -> list[Transaction]:
        """Parse every file concurrently, one task per file.

        Results are concatenated in completion order. The first failing file
        raises out of this call and no partial result is returned.
        """
        paths = list(file_paths)
        if not paths:
            return []

        transactions: list[Transaction] = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self.parse, path): path for path in paths}
            for future in as_completed(futures):
                transactions.extend(future.result())
        return transactions
