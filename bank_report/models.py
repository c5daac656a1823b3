"""Data models for the bank statement reporter."""

from dataclasses import dataclass, field
import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field  # pylint: disable=import-error

LARGE_EXPENSE_THRESHOLD = 200.0


class Transaction(BaseModel):
    """
    A single categorized bank transaction.

    Attributes:
        date: Calendar date of the transaction
        description: Description or merchant text as exported by the bank
        debit: Expense magnitude, never negative
        credit: Income magnitude, never negative
        category: Category name, or "Unclassified"
        is_large_expense: True when the debit exceeds the large-expense threshold
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    description: str = Field(min_length=1)
    debit: float = Field(default=0.0, ge=0)
    credit: float = Field(default=0.0, ge=0)
    category: str
    is_large_expense: bool = False

    @classmethod
    def create(
        cls,
        date: dt.date,
        description: str,
        debit: float,
        credit: float,
        category: str,
        threshold: float = LARGE_EXPENSE_THRESHOLD,
    ) -> "Transaction":
        """Build a transaction, deriving ``is_large_expense`` from ``threshold``."""
        return cls(
            date=date,
            description=description,
            debit=debit,
            credit=credit,
            category=category,
            is_large_expense=debit > threshold,
        )

    @property
    def net_amount(self) -> float:
        """Credit minus debit."""
        return self.credit - self.debit


@dataclass(frozen=True)
class HeaderMapping:
    """
    Column positions resolved from a CSV header row.

    ``None`` means the column was not found.
    """

    date_column: Optional[int] = None
    description_column: Optional[int] = None
    debit_column: Optional[int] = None
    credit_column: Optional[int] = None
    amount_column: Optional[int] = None

    def has_required_columns(self) -> bool:
        return self.date_column is not None and self.description_column is not None

    def has_amount_columns(self) -> bool:
        return (
            self.debit_column is not None
            or self.credit_column is not None
            or self.amount_column is not None
        )


@dataclass
class CategoryTotal:
    """
    Running totals for one category.

    Attributes:
        debit_total: Sum of debits
        credit_total: Sum of credits
        net_amount: Sum of (credit - debit)
        transaction_count: Number of transactions added
    """

    debit_total: float = 0.0
    credit_total: float = 0.0
    net_amount: float = 0.0
    transaction_count: int = 0

    def add(self, transaction: Transaction) -> None:
        """Accumulate a transaction into the totals."""
        self.debit_total += transaction.debit
        self.credit_total += transaction.credit
        self.net_amount += transaction.credit - transaction.debit
        self.transaction_count += 1


CategoryTotals = Dict[str, CategoryTotal]


@dataclass
class SkippedRow:
    """
    Represents a data row that was skipped during parsing.

    Attributes:
        file_name: Name of the file the row came from
        row_index: 1-based line number in the file (the header is line 1)
        row_data: The split fields of the row
        reason: Reason why the row was skipped
    """

    file_name: str
    row_index: int
    row_data: List[Any]
    reason: str


@dataclass
class ProcessingResult:
    """
    Outcome of parsing a single CSV file.

    Attributes:
        file_name: Name of the processed file
        transactions: Accepted transactions in file order
        errors: Human-readable error messages tagged with file and row
        skipped_rows: Number of data rows that did not produce a transaction
        total_rows: Number of lines in the file, header included
        skipped: Details for each skipped row
    """

    file_name: str
    transactions: List[Transaction] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    skipped_rows: int = 0
    total_rows: int = 0
    skipped: List[SkippedRow] = field(default_factory=list)

    def skip(self, row_index: int, row_data: List[Any], reason: str) -> None:
        """Count a skipped row and remember why it was skipped."""
        self.skipped_rows += 1
        self.skipped.append(
            SkippedRow(
                file_name=self.file_name,
                row_index=row_index,
                row_data=list(row_data),
                reason=reason,
            )
        )

    def get_summary(self) -> Dict[str, Any]:
        """
        Get summary statistics about the processing result.

        Returns:
            Dict[str, Any]: Summary statistics
        """
        return {
            "file_name": self.file_name,
            "total_rows": self.total_rows,
            "transactions": len(self.transactions),
            "skipped_rows": self.skipped_rows,
            "errors": len(self.errors),
        }
