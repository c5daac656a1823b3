"""
Aggregation of categorized transactions.

Per-category totals are purely additive, so the result does not depend
on the order in which transactions are fed in.
"""

import datetime as dt
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import polars as pl

from bank_report.models import CategoryTotal, CategoryTotals, Transaction


def calculate_totals(transactions: Iterable[Transaction]) -> CategoryTotals:
    """
    Accumulate debit, credit, net and count per category.

    Args:
        transactions: Transactions to aggregate

    Returns:
        CategoryTotals: Totals keyed by category; only categories with at
        least one transaction are present
    """
    totals: CategoryTotals = {}
    for transaction in transactions:
        totals.setdefault(transaction.category, CategoryTotal()).add(transaction)
    return totals


def sort_by_date(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Return a new list ordered by date; ties keep their original order."""
    return sorted(transactions, key=lambda t: t.date)


def group_by_category(
    transactions: Iterable[Transaction],
) -> Dict[str, List[Transaction]]:
    """Group transactions by category, keeping their relative order."""
    grouped: Dict[str, List[Transaction]] = defaultdict(list)
    for transaction in transactions:
        grouped[transaction.category].append(transaction)
    return dict(grouped)


def date_bounds(
    transactions: Iterable[Transaction],
) -> Optional[Tuple[dt.date, dt.date]]:
    """Return the earliest and latest dates, or None when there are none."""
    dates = [t.date for t in transactions]
    if not dates:
        return None
    return min(dates), max(dates)


def format_date(value: dt.date) -> str:
    """Format a date as ``M/D/YYYY``."""
    return f"{value.month}/{value.day}/{value.year}"


def get_date_range(transactions: Iterable[Transaction]) -> str:
    """
    Describe the span of the transactions.

    Returns:
        str: ``"start - end"``, a single date when both ends coincide, or
        an empty string when there are no transactions
    """
    bounds = date_bounds(transactions)
    if bounds is None:
        return ""
    start, end = format_date(bounds[0]), format_date(bounds[1])
    return start if start == end else f"{start} - {end}"


def totals_to_dataframe(totals: CategoryTotals) -> pl.DataFrame:
    """
    Convert category totals to a DataFrame sorted by category name.

    Args:
        totals: Category totals

    Returns:
        pl.DataFrame: One row per category
    """
    categories = sorted(totals)
    return pl.DataFrame(
        {
            "Category": categories,
            "Debit": [round(totals[c].debit_total, 2) for c in categories],
            "Credit": [round(totals[c].credit_total, 2) for c in categories],
            "Net": [round(totals[c].net_amount, 2) for c in categories],
            "Transactions": [totals[c].transaction_count for c in categories],
        },
        schema={
            "Category": pl.Utf8,
            "Debit": pl.Float64,
            "Credit": pl.Float64,
            "Net": pl.Float64,
            "Transactions": pl.Int64,
        },
    )


def transactions_to_dataframe(transactions: Sequence[Transaction]) -> pl.DataFrame:
    """
    Convert transactions to a DataFrame, one row each, in the given order.

    Args:
        transactions: Transactions to convert

    Returns:
        pl.DataFrame: Columns Date, Description, Debit, Credit, Category, LargeExpense
    """
    return pl.DataFrame(
        {
            "Date": [t.date for t in transactions],
            "Description": [t.description for t in transactions],
            "Debit": [t.debit for t in transactions],
            "Credit": [t.credit for t in transactions],
            "Category": [t.category for t in transactions],
            "LargeExpense": [t.is_large_expense for t in transactions],
        },
        schema={
            "Date": pl.Date,
            "Description": pl.Utf8,
            "Debit": pl.Float64,
            "Credit": pl.Float64,
            "Category": pl.Utf8,
            "LargeExpense": pl.Boolean,
        },
    )
