"""
File operations for the bank statement reporter.

Reads statement files as UTF-8 text and writes the generated report,
CSV exports and the skipped-rows report.
"""

import json
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import polars as pl

from bank_report.models import SkippedRow


class FileHandler:
    """
    Handles file operations like reading statements and saving outputs.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the file handler with a logger.

        Args:
            logger: Logger instance
        """
        self.logger = (logger or logging.getLogger(__name__)).getChild("FileHandler")

    def read_text(self, path: str) -> str:
        """
        Read a statement file as UTF-8 text.

        A byte order mark, if present, is dropped.

        Raises:
            OSError: If the file cannot be opened
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        with open(path, "r", encoding="utf-8-sig") as f:
            content = f.read()
        self.logger.debug(f"Read {len(content)} characters from {path}")
        return content

    def save_text(self, content: str, path: str) -> str:
        """
        Write text to ``path``, creating directories as needed.

        Returns:
            str: The path written

        Raises:
            IOError: If writing fails
        """
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
            self.logger.info(f"Saved {path}")
            return path
        except OSError as e:
            self.logger.error(f"Error saving {path}: {str(e)}")
            raise IOError(f"Error saving {path}: {str(e)}") from e

    def save_to_csv(self, df: pl.DataFrame, path: str) -> None:
        """
        Save a DataFrame to CSV, creating directories as needed.

        Args:
            df: DataFrame to save
            path: Path to save the CSV file

        Raises:
            IOError: If saving fails
        """
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            df.write_csv(path, float_precision=2)
            self.logger.info(f"Successfully saved DataFrame to {path}")

        except Exception as e:
            self.logger.error(f"Error saving DataFrame to {path}: {str(e)}")
            raise IOError(f"Error saving DataFrame to {path}: {str(e)}") from e

    def save_skipped_rows_report(
        self, skipped_rows: List[SkippedRow], output_path: Optional[str] = None
    ) -> str:
        """
        Save a JSON report of skipped rows to help fix data issues.

        Args:
            skipped_rows: List of skipped rows to report
            output_path: Path to save the report. If None, a timestamped
                path under ``output/reports`` is used.

        Returns:
            str: Path where the report was saved, or "" when there was nothing to save

        Raises:
            IOError: If saving fails
        """
        if not skipped_rows:
            self.logger.info("No skipped rows to report")
            return ""

        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = os.path.join(
                "output", "reports", f"skipped_rows_{timestamp}.json"
            )

        by_file: Dict[str, List[Dict[str, object]]] = {}
        for row in skipped_rows:
            by_file.setdefault(row.file_name, []).append(
                {
                    "row_index": row.row_index,
                    "row_data": [str(cell) for cell in row.row_data],
                    "reason": row.reason,
                }
            )

        report = {
            "summary": {
                "total_skipped_rows": len(skipped_rows),
                "files_with_issues": len(by_file),
            },
            "skipped_rows_by_file": by_file,
        }

        return self.save_text(json.dumps(report, indent=2, ensure_ascii=False), output_path)
