"""Tests for CSV row parsing, date and amount normalization."""

import os
import sys
import unittest
from datetime import date

from hypothesis import given, strategies as st

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# pylint: disable=wrong-import-position,import-error
from bank_report.models import HeaderMapping, ProcessingResult
from bank_report.row_parser import (
    EMPTY_DESCRIPTION,
    INVALID_DATE,
    TOO_FEW_COLUMNS,
    RowParser,
    parse_amount,
    parse_date,
    split_csv_line,
)

SIGNED = HeaderMapping(date_column=0, description_column=1, amount_column=2)
DUAL = HeaderMapping(
    date_column=0, description_column=1, debit_column=2, credit_column=3
)


class TestSplitCsvLine(unittest.TestCase):
    """Tests for quote-aware splitting."""

    def test_plain_fields_are_trimmed(self):
        self.assertEqual(split_csv_line(" a , b,c "), ["a", "b", "c"])

    def test_comma_inside_quotes(self):
        self.assertEqual(
            split_csv_line('01/05/24,"Chevron, Inc",-40.00'),
            ["01/05/24", "Chevron, Inc", "-40.00"],
        )

    def test_quoted_amount_with_thousands(self):
        self.assertEqual(
            split_csv_line('01/05/24,Rent,"$1,200.00",'),
            ["01/05/24", "Rent", "$1,200.00", ""],
        )

    def test_empty_line(self):
        self.assertEqual(split_csv_line(""), [""])


class TestParseDate(unittest.TestCase):
    """Tests for date normalization."""

    def test_two_digit_year_pivot(self):
        self.assertEqual(parse_date("01/15/49"), date(2049, 1, 15))
        self.assertEqual(parse_date("01/15/50"), date(1950, 1, 15))
        self.assertEqual(parse_date("1/5/24"), date(2024, 1, 5))

    def test_four_digit_year(self):
        self.assertEqual(parse_date("12/31/2023"), date(2023, 12, 31))

    def test_generic_fallback(self):
        self.assertEqual(parse_date("2024-03-09"), date(2024, 3, 9))
        self.assertEqual(parse_date("March 9, 2024"), date(2024, 3, 9))

    def test_invalid_dates(self):
        self.assertIsNone(parse_date("02/30/2024"))
        self.assertIsNone(parse_date("13/01/2024"))
        self.assertIsNone(parse_date("aa/bb/cc"))
        self.assertIsNone(parse_date(""))
        self.assertIsNone(parse_date("not a date"))

    def test_trailing_time_is_ignored(self):
        self.assertEqual(parse_date("01/15/2024 10:30:00"), date(2024, 1, 15))
        self.assertEqual(parse_date("1/5/24 08:00"), date(2024, 1, 5))

    def test_partial_dates_rejected(self):
        self.assertIsNone(parse_date("Jan"))
        self.assertIsNone(parse_date("15"))
        self.assertIsNone(parse_date("Monday"))
        self.assertIsNone(parse_date("March 2024"))


class TestParseAmount(unittest.TestCase):
    """Tests for numeric cleanup."""

    def test_currency_symbols_and_commas(self):
        self.assertEqual(parse_amount("$1,200.00"), 1200.0)

    def test_negative(self):
        self.assertEqual(parse_amount("-45.67"), -45.67)

    def test_unparseable_defaults_to_zero(self):
        self.assertEqual(parse_amount(""), 0.0)
        self.assertEqual(parse_amount("n/a"), 0.0)
        self.assertEqual(parse_amount("-"), 0.0)

    def test_leading_number_is_read(self):
        self.assertEqual(parse_amount("12.50.3"), 12.5)


class TestRowParser(unittest.TestCase):
    """Tests for turning rows into transactions."""

    def parse(self, line, mapping=SIGNED, header_count=3, **kwargs):
        result = ProcessingResult(file_name="bank.csv")
        parser = RowParser(mapping, header_count, "bank.csv", **kwargs)
        return parser.parse_row(line, 2, result), result

    def test_signed_amount_negative_is_debit(self):
        transaction, result = self.parse("01/05/24,Chevron Gas,-45.67")
        self.assertEqual(transaction.debit, 45.67)
        self.assertEqual(transaction.credit, 0.0)
        self.assertEqual(transaction.category, "Auto")
        self.assertEqual(result.skipped_rows, 0)

    def test_signed_amount_positive_is_credit(self):
        transaction, _ = self.parse("01/06/24,Payroll Deposit,200.00")
        self.assertEqual((transaction.debit, transaction.credit), (0.0, 200.0))
        self.assertEqual(transaction.category, "Deposits")

    def test_zero_amount(self):
        transaction, _ = self.parse("01/06/24,Adjustment,0.00")
        self.assertEqual((transaction.debit, transaction.credit), (0.0, 0.0))

    def test_dual_columns_use_magnitudes(self):
        transaction, _ = self.parse(
            '01/05/24,Rent,"$1,200.00",', mapping=DUAL, header_count=4
        )
        self.assertEqual(transaction.debit, 1200.0)
        self.assertEqual(transaction.credit, 0.0)
        self.assertTrue(transaction.is_large_expense)

        transaction, _ = self.parse(
            "01/05/24,Refund,-30.00,-12.50", mapping=DUAL, header_count=4
        )
        self.assertEqual((transaction.debit, transaction.credit), (30.0, 12.5))

    def test_lone_debit_column(self):
        mapping = HeaderMapping(date_column=0, description_column=1, debit_column=2)
        transaction, _ = self.parse("01/05/24,Safeway,-80.00", mapping=mapping)
        self.assertEqual((transaction.debit, transaction.credit), (80.0, 0.0))

    def test_dual_columns_win_over_amount(self):
        mapping = HeaderMapping(
            date_column=0,
            description_column=1,
            debit_column=2,
            credit_column=3,
            amount_column=4,
        )
        transaction, _ = self.parse(
            "01/05/24,Safeway,10.00,,-99.00", mapping=mapping, header_count=5
        )
        self.assertEqual((transaction.debit, transaction.credit), (10.0, 0.0))

    def test_short_row_skipped_without_error(self):
        transaction, result = self.parse("01/05/24,Chevron")
        self.assertIsNone(transaction)
        self.assertEqual(result.skipped_rows, 1)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.skipped[0].reason, TOO_FEW_COLUMNS)

    def test_invalid_date_skipped(self):
        transaction, result = self.parse("someday,Chevron,-1")
        self.assertIsNone(transaction)
        self.assertEqual(result.skipped[0].reason, INVALID_DATE)
        self.assertEqual(result.errors, [])

    def test_date_with_time_is_accepted(self):
        transaction, result = self.parse("01/15/2024 10:30:00,Chevron,-40.00")
        self.assertEqual(transaction.date, date(2024, 1, 15))
        self.assertEqual(transaction.debit, 40.0)
        self.assertEqual(result.skipped_rows, 0)

    def test_empty_description_skipped(self):
        transaction, result = self.parse('01/05/24,"  ",-1')
        self.assertIsNone(transaction)
        self.assertEqual(result.skipped[0].reason, EMPTY_DESCRIPTION)

    def test_unexpected_error_is_recorded(self):
        def broken(_description):
            raise RuntimeError("categorizer failed")

        transaction, result = self.parse("01/05/24,Chevron,-1", categorizer=broken)
        self.assertIsNone(transaction)
        self.assertEqual(result.skipped_rows, 1)
        self.assertEqual(result.errors, ["File bank.csv, row 2: categorizer failed"])

    def test_custom_threshold(self):
        transaction, _ = self.parse("01/05/24,Chevron,-60", large_expense_threshold=50)
        self.assertTrue(transaction.is_large_expense)


@given(
    st.integers(min_value=1, max_value=12),
    st.integers(min_value=1, max_value=28),
    st.integers(min_value=0, max_value=99),
)
def test_two_digit_years_map_into_1950_2049(month, day, year):
    parsed = parse_date(f"{month:02d}/{day:02d}/{year:02d}")
    assert parsed is not None
    assert 1950 <= parsed.year <= 2049
    assert parsed.year % 100 == year
    assert (parsed.month, parsed.day) == (month, day)


@given(st.decimals(min_value=-100000, max_value=100000, places=2))
def test_amount_round_trips_formatted_values(value):
    text = f"${value:,.2f}"
    assert parse_amount(text) == float(f"{value:.2f}")


if __name__ == "__main__":
    unittest.main()
