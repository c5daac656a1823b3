"""
Pipeline driver for the bank statement reporter.

Processes a batch of CSV statements: each file is parsed on its own into
a ProcessingResult and the results are merged, in input order, into the
session held by FinancialReporter. Problems are reported through the
session's error list; nothing raised while processing a file escapes
the driver.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from bank_report.aggregator import calculate_totals, get_date_range
from bank_report.categorizer import categorize
from bank_report.config import Config
from bank_report.file_handler import FileHandler
from bank_report.header_mapper import detect_headers
from bank_report.models import (
    LARGE_EXPENSE_THRESHOLD,
    CategoryTotals,
    ProcessingResult,
    SkippedRow,
    Transaction,
)
from bank_report.row_parser import RowParser, split_csv_line

NO_DATA_ROWS = "No data rows found"
MISSING_REQUIRED_COLUMNS = "Could not detect required Date and Description columns"
MISSING_AMOUNT_COLUMNS = "Could not detect amount columns (Debit/Credit or Amount)"


def file_error(file_name: str, reason: str) -> str:
    """Format an error that concerns a whole file."""
    return f"File {file_name}: {reason}"


class FinancialReporter:
    """
    Session-scoped driver for parsing, categorizing and totalling statements.

    Each call to ``process_texts`` or ``process_files`` starts a new
    session; the transactions and errors of the previous one are dropped.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        logger: Optional[logging.Logger] = None,
        file_handler: Optional[FileHandler] = None,
        categorizer: Callable[[str], str] = categorize,
    ):
        """
        Initialize the reporter.

        Args:
            config: Application configuration; defaults are used when None
            logger: Logger instance from the main application
            file_handler: Reader used by ``process_files``
            categorizer: Function mapping a description to a category
        """
        self.logger = (logger or logging.getLogger(__name__)).getChild(
            "FinancialReporter"
        )
        self.large_expense_threshold = float(
            config.get("large_expense_threshold", LARGE_EXPENSE_THRESHOLD)
            if config
            else LARGE_EXPENSE_THRESHOLD
        )
        self.max_workers = int(config.get("max_workers", 4) if config else 4)
        self.file_handler = file_handler or FileHandler(self.logger)
        self.categorizer = categorizer

        self._transactions: List[Transaction] = []
        self._errors: List[str] = []
        self._results: List[ProcessingResult] = []

    @property
    def transactions(self) -> List[Transaction]:
        """All transactions accepted in the current session, in file order."""
        return list(self._transactions)

    @property
    def errors(self) -> List[str]:
        """All error messages of the current session."""
        return list(self._errors)

    @property
    def results(self) -> List[ProcessingResult]:
        """Per-file results of the current session, in input order."""
        return list(self._results)

    @property
    def skipped_rows(self) -> int:
        """Number of rows skipped across all files of the session."""
        return sum(result.skipped_rows for result in self._results)

    def get_skipped_details(self) -> List[SkippedRow]:
        """Details of every skipped row across the session."""
        return [row for result in self._results for row in result.skipped]

    def category_totals(self) -> CategoryTotals:
        """Per-category totals over the session's transactions."""
        return calculate_totals(self._transactions)

    def get_date_range(self) -> str:
        """Human-readable span of the session's transactions."""
        return get_date_range(self._transactions)

    def reset(self) -> None:
        """Drop the state of the previous session."""
        self._transactions = []
        self._errors = []
        self._results = []

    def parse_csv_data(self, content: str, file_name: str) -> ProcessingResult:
        """
        Parse the text of one CSV statement.

        Args:
            content: Full CSV text, header row first
            file_name: Name used to tag error messages

        Returns:
            ProcessingResult: Transactions, errors and row counts for the file
        """
        lines = [line.rstrip("\r") for line in content.strip().split("\n")]
        result = ProcessingResult(file_name=file_name, total_rows=len(lines))

        if len(lines) < 2:
            self._reject(result, NO_DATA_ROWS)
            return result

        headers = split_csv_line(lines[0])
        mapping = detect_headers(headers)
        self.logger.debug(f"Header mapping for {file_name}: {mapping}")

        if not mapping.has_required_columns():
            self._reject(result, MISSING_REQUIRED_COLUMNS)
            return result

        if not mapping.has_amount_columns():
            self._reject(result, MISSING_AMOUNT_COLUMNS)
            return result

        row_parser = RowParser(
            mapping,
            header_count=len(headers),
            file_name=file_name,
            logger=self.logger,
            large_expense_threshold=self.large_expense_threshold,
            categorizer=self.categorizer,
        )

        for index, line in enumerate(lines[1:], start=2):
            transaction = row_parser.parse_row(line, index, result)
            if transaction is not None:
                result.transactions.append(transaction)

        self.logger.info(
            f"Parsed {file_name}: {len(result.transactions)} transactions, "
            f"{result.skipped_rows} skipped of {result.total_rows - 1} data rows"
        )
        return result

    def process_texts(self, files: Iterable[Tuple[str, str]]) -> List[ProcessingResult]:
        """
        Start a new session and process already-read statements.

        Args:
            files: ``(file_name, content)`` pairs in the order to merge them

        Returns:
            List[ProcessingResult]: One result per file, in input order
        """
        self.reset()
        for file_name, content in files:
            self._merge(self._process_one(file_name, content))
        self._log_session()
        return self.results

    def process_files(self, paths: Sequence[str]) -> List[ProcessingResult]:
        """
        Start a new session and process statement files from disk.

        Files are read on a thread pool; parsing and merging happen in
        input order on the calling thread.

        Args:
            paths: Paths of the CSV files

        Returns:
            List[ProcessingResult]: One result per file, in input order
        """
        self.reset()
        if not paths:
            self.logger.warning("No files provided")
            return []

        workers = max(1, min(self.max_workers, len(paths)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            reads = list(pool.map(self._read, paths))

        for file_name, content, read_error in reads:
            if read_error is not None:
                result = ProcessingResult(file_name=file_name)
                self._reject(result, f"Could not read file ({read_error})")
                self._merge(result)
                continue
            self._merge(self._process_one(file_name, content))

        self._log_session()
        return self.results

    def _read(self, path: str) -> Tuple[str, str, Optional[str]]:
        try:
            file_name = os.path.basename(path)
        except TypeError:
            file_name = str(path)
        try:
            return file_name, self.file_handler.read_text(path), None
        except (OSError, UnicodeDecodeError, TypeError, ValueError) as e:
            return file_name, "", str(e)

    def _process_one(self, file_name: str, content: str) -> ProcessingResult:
        try:
            return self.parse_csv_data(content, file_name)
        except Exception as e:  # pylint: disable=broad-except
            self.logger.exception(f"Error processing {file_name}")
            result = ProcessingResult(file_name=file_name)
            self._reject(result, f"Error processing file ({e})")
            return result

    def _reject(self, result: ProcessingResult, reason: str) -> None:
        message = file_error(result.file_name, reason)
        self.logger.warning(message)
        result.errors.append(message)

    def _merge(self, result: ProcessingResult) -> None:
        self._results.append(result)
        self._transactions.extend(result.transactions)
        self._errors.extend(result.errors)

    def _log_session(self) -> None:
        self.logger.info(
            f"Processed {len(self._results)} files: {len(self._transactions)} "
            f"transactions, {self.skipped_rows} skipped rows, "
            f"{len(self._errors)} errors"
        )
