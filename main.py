"""
Entry point for the bank statement reporter.

Equivalent to the ``bank-report`` console script.
"""

import sys

from bank_report.main import main

if __name__ == "__main__":
    sys.exit(main())
