"""
Command-line entry point for the bank statement reporter.

Reads one or more bank CSV exports, categorizes their transactions and
writes a static HTML report, with optional CSV exports and a JSON report
of skipped rows.
"""

import argparse
import logging
import os
import sys
import traceback
from typing import List, Optional

from bank_report.aggregator import totals_to_dataframe, transactions_to_dataframe
from bank_report.config import DEFAULT_CONFIG_PATH, Config
from bank_report.file_handler import FileHandler
from bank_report.logger import create_logger, level_from_name
from bank_report.pipeline import FinancialReporter
from bank_report.report import ReportRenderer


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bank-report",
        description="Categorize bank CSV exports and render an HTML report.",
    )
    parser.add_argument("files", nargs="+", help="CSV statement files")
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="YAML configuration file"
    )
    parser.add_argument(
        "--output", default=None, help="Path of the HTML report to write"
    )
    parser.add_argument(
        "--export-csv",
        default=None,
        metavar="DIR",
        help="Also write transactions.csv and category_totals.csv to DIR",
    )
    parser.add_argument(
        "--skipped-report",
        default=None,
        metavar="PATH",
        help="Write a JSON report of skipped rows to PATH",
    )
    parser.add_argument("--log-level", default=None, help="Override the log level")
    return parser


def log_error(logger: logging.Logger, error_message: str, traceback_str: str) -> None:
    """
    Log errors with traceback information.

    Args:
        logger: The logger to use
        error_message: The error message to log
        traceback_str: The traceback string to include
    """
    logger.error(f"Error occurred: {error_message}")
    logger.error(f"Traceback:\n{traceback_str}")


def write_outputs(
    reporter: FinancialReporter,
    renderer: ReportRenderer,
    file_handler: FileHandler,
    args: argparse.Namespace,
    config: Config,
) -> str:
    """
    Render the report and write every requested output.

    Returns:
        str: Path of the HTML report

    Raises:
        IOError: If an output cannot be written
    """
    transactions = reporter.transactions
    totals = reporter.category_totals()

    html_report = renderer.render(
        transactions, totals, reporter.get_date_range(), reporter.errors
    )
    output_path = args.output or os.path.join(
        config.get("output_folder", "output"),
        config.get("report.filename", "financial_report.html"),
    )
    file_handler.save_text(html_report, output_path)

    if args.export_csv:
        file_handler.save_to_csv(
            transactions_to_dataframe(transactions),
            os.path.join(args.export_csv, "transactions.csv"),
        )
        file_handler.save_to_csv(
            totals_to_dataframe(totals),
            os.path.join(args.export_csv, "category_totals.csv"),
        )

    if args.skipped_report:
        file_handler.save_skipped_rows_report(
            reporter.get_skipped_details(), args.skipped_report
        )

    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application entry point.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)

    try:
        config = Config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        return 1

    level = level_from_name(args.log_level or config.get("log_level", "INFO"))
    logger = create_logger(
        "bank_report", level=level, log_dir=config.get("log_dir", "logs"), console=True
    )
    logger.info(f"Processing {len(args.files)} files")

    file_handler = FileHandler(logger)
    reporter = FinancialReporter(config, logger, file_handler)
    renderer = ReportRenderer(config, logger)

    reporter.process_files(args.files)

    for error in reporter.errors:
        print(f"Warning: {error}", file=sys.stderr)

    try:
        output_path = write_outputs(reporter, renderer, file_handler, args, config)
    except IOError as e:
        log_error(logger, str(e), traceback.format_exc())
        logger.critical("Could not write the report.")
        return 1

    print(
        f"Processed {len(reporter.transactions)} transactions "
        f"({reporter.get_date_range() or 'no data'}); report written to {output_path}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
