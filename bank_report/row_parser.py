"""
Row parsing for bank CSV exports.

Turns one data line of a CSV file into a Transaction, using the
HeaderMapping resolved for that file. Rows that cannot be used are
counted as skipped on the file's ProcessingResult; unexpected failures
are also recorded as errors tagged with the file name and line number.
"""

import datetime as dt
import logging
import re
from typing import Callable, List, Optional, Tuple

from dateutil import parser as date_parser

from bank_report.categorizer import categorize
from bank_report.models import (
    LARGE_EXPENSE_THRESHOLD,
    HeaderMapping,
    ProcessingResult,
    Transaction,
)

_NON_NUMERIC = re.compile(r"[^-\d.]")
_NUMBER_PREFIX = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")
_DEFAULT_A = dt.datetime(2000, 1, 1)
_DEFAULT_B = dt.datetime(2001, 2, 2)

# Skip reasons
TOO_FEW_COLUMNS = "Too few columns"
INVALID_DATE = "Invalid date"
EMPTY_DESCRIPTION = "Empty description"


def split_csv_line(line: str) -> List[str]:
    """
    Split a CSV line on commas that are not inside double quotes.

    Quotes are removed from the resulting values and every value is
    trimmed. Doubled quotes inside a quoted field are not supported.

    Args:
        line: One line of CSV text, without the line terminator

    Returns:
        List[str]: Field values in order
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def _expand_year(year: int) -> int:
    if year < 100:
        return year + (2000 if year < 50 else 1900)
    return year


def _leading_int(part: str) -> Optional[int]:
    match = _LEADING_DIGITS.match(part)
    return int(match.group(1)) if match else None


def _parse_full_date(text: str) -> Optional[dt.date]:
    # Anything dateutil fills in from its default is not a full date.
    try:
        first = date_parser.parse(text, default=_DEFAULT_A)
        second = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date()


def parse_date(text: str) -> Optional[dt.date]:
    """
    Parse a transaction date.

    ``M/D/Y`` values are read month first from the leading digits of each
    part, so a trailing time such as ``01/15/2024 10:30:00`` is ignored.
    Two-digit years below 50 land in the 2000s, the rest in the 1900s.
    Anything else goes through a generic date parser, which must find a
    year, a month and a day.

    Args:
        text: Raw date text

    Returns:
        Optional[dt.date]: The calendar date, or None if it is not a valid date
    """
    cleaned = text.strip()
    parts = cleaned.split("/")

    if len(parts) == 3:
        numbers = [_leading_int(part) for part in parts]
        if None not in numbers:
            month, day, year = numbers
            try:
                return dt.date(_expand_year(year), month, day)
            except (ValueError, OverflowError):
                return None
    return _parse_full_date(cleaned)


def parse_amount(text: str) -> float:
    """
    Parse a monetary string such as ``"$1,200.00"`` or ``"-45.67"``.

    A Unicode minus sign counts as ``-``. Every other character besides
    digits, ``-`` and ``.`` is dropped and the leading number is read.
    Unparseable values become 0.0.
    """
    cleaned = _NON_NUMERIC.sub("", (text or "").replace("\u2212", "-"))
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))


class RowParser:
    """
    Parses the data rows of one CSV file.

    A parser is bound to a single file: its HeaderMapping, its header
    width and its name, which is used to tag error messages.
    """

    def __init__(
        self,
        mapping: HeaderMapping,
        header_count: int,
        file_name: str,
        logger: Optional[logging.Logger] = None,
        large_expense_threshold: float = LARGE_EXPENSE_THRESHOLD,
        categorizer: Callable[[str], str] = categorize,
    ):
        """
        Initialize the parser.

        Args:
            mapping: Column positions resolved from the header row
            header_count: Number of header fields; shorter rows are skipped
            file_name: Name used in error messages
            logger: Logger instance for logging parsing events
            large_expense_threshold: Debits above this are large expenses
            categorizer: Function mapping a description to a category
        """
        self.mapping = mapping
        self.header_count = header_count
        self.file_name = file_name
        self.large_expense_threshold = large_expense_threshold
        self.categorizer = categorizer
        self.logger = (logger or logging.getLogger(__name__)).getChild("RowParser")

    def parse_row(
        self, line: str, row_number: int, result: ProcessingResult
    ) -> Optional[Transaction]:
        """
        Parse one data line.

        Args:
            line: Raw CSV line
            row_number: 1-based line number in the file (the header is 1)
            result: Result receiving skip counts and errors for this file

        Returns:
            Optional[Transaction]: The transaction, or None if the row was skipped
        """
        row: List[str] = []
        try:
            row = split_csv_line(line)

            if len(row) < self.header_count:
                self._skip(result, row_number, row, TOO_FEW_COLUMNS)
                return None

            date = parse_date(row[self.mapping.date_column])
            if date is None:
                self._skip(result, row_number, row, INVALID_DATE)
                return None

            description = row[self.mapping.description_column].strip()
            if not description:
                self._skip(result, row_number, row, EMPTY_DESCRIPTION)
                return None

            debit, credit = self._resolve_amounts(row)

            return Transaction.create(
                date=date,
                description=description,
                debit=debit,
                credit=credit,
                category=self.categorizer(description),
                threshold=self.large_expense_threshold,
            )
        except Exception as e:  # pylint: disable=broad-except
            message = f"File {self.file_name}, row {row_number}: {e}"
            self.logger.warning(message)
            result.errors.append(message)
            result.skip(row_number, row, str(e))
            return None

    def _resolve_amounts(self, row: List[str]) -> Tuple[float, float]:
        """
        Work out the debit and credit magnitudes of a row.

        Separate debit/credit columns take precedence over a signed amount
        column. A file with only one of debit or credit reads that column.
        """
        mapping = self.mapping

        if mapping.debit_column is not None and mapping.credit_column is not None:
            debit = abs(parse_amount(row[mapping.debit_column] or "0"))
            credit = abs(parse_amount(row[mapping.credit_column] or "0"))
            return debit, credit

        if mapping.amount_column is not None:
            amount = parse_amount(row[mapping.amount_column])
            if amount < 0:
                return abs(amount), 0.0
            return 0.0, abs(amount)

        if mapping.debit_column is not None:
            return abs(parse_amount(row[mapping.debit_column])), 0.0

        if mapping.credit_column is not None:
            return 0.0, abs(parse_amount(row[mapping.credit_column]))

        raise ValueError("No amount column mapped")

    def _skip(
        self, result: ProcessingResult, row_number: int, row: List[str], reason: str
    ) -> None:
        self.logger.debug(
            f"Skipping {self.file_name} row {row_number}: {reason} ({row})"
        )
        result.skip(row_number, row, reason)
