"""Categorize bank CSV exports and report per-category totals."""

from bank_report.categorizer import BUSINESS_CATEGORIES, CATEGORIES, categorize
from bank_report.models import (
    CategoryTotal,
    HeaderMapping,
    ProcessingResult,
    SkippedRow,
    Transaction,
)
from bank_report.pipeline import FinancialReporter

__version__ = "0.1.0"

__all__ = [
    "BUSINESS_CATEGORIES",
    "CATEGORIES",
    "CategoryTotal",
    "FinancialReporter",
    "HeaderMapping",
    "ProcessingResult",
    "SkippedRow",
    "Transaction",
    "categorize",
]
