"""
Header detection for bank CSV exports.

Banks name their columns differently ("Transaction Date", "Posting Date",
"Merchant", "Withdrawal", ...). This module locates the columns the
reporter needs from the header row of a file.
"""

from typing import List, Optional, Sequence

from bank_report.models import HeaderMapping

DEBIT_HEADERS = ("debit", "withdrawal")
CREDIT_HEADERS = ("credit", "deposit")
AMOUNT_HEADERS = ("amount",)


def normalize_headers(headers: Sequence[str]) -> List[str]:
    """Trim and lower-case every header."""
    return [str(header).strip().lower() for header in headers]


def _first_containing(headers: List[str], *needles: str) -> Optional[int]:
    for index, header in enumerate(headers):
        if any(needle in header for needle in needles):
            return index
    return None


def detect_headers(headers: Sequence[str]) -> HeaderMapping:
    """
    Build a HeaderMapping from a header row.

    The date column is the first header containing "date" and the
    description column the first containing "description" or "merchant".
    Amount columns need an exact match; every header is checked, so a later
    duplicate replaces an earlier one.

    Args:
        headers: Raw header strings in file order

    Returns:
        HeaderMapping: Resolved column positions, ``None`` where absent
    """
    normalized = normalize_headers(headers)

    debit_column = credit_column = amount_column = None
    for index, header in enumerate(normalized):
        if header in DEBIT_HEADERS:
            debit_column = index
        elif header in CREDIT_HEADERS:
            credit_column = index
        elif header in AMOUNT_HEADERS:
            amount_column = index

    return HeaderMapping(
        date_column=_first_containing(normalized, "date"),
        description_column=_first_containing(normalized, "description", "merchant"),
        debit_column=debit_column,
        credit_column=credit_column,
        amount_column=amount_column,
    )
