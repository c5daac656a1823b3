"""
Report building and static HTML rendering.

The report is a consumer of the pipeline output: it summarizes the
session's transactions and category totals and renders them as a single
self-contained HTML page styled with Bootstrap, with a plotly donut chart
of expenses by category.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import plotly.graph_objects as go

from bank_report.aggregator import format_date, group_by_category, sort_by_date
from bank_report.categorizer import (
    BUSINESS_CATEGORIES,
    CATEGORIES,
    INTEREST_PAID,
    TRANSFERS,
)
from bank_report.config import Config
from bank_report.models import CategoryTotals, Transaction

NO_DATA_HTML = '<div class="alert alert-warning">No transactions to report.</div>'

DEFAULT_PALETTE = ["#6C3BCE", "#078080", "#F45D48", "#F8B400", "#3DA5D9"]
DEFAULT_CSS = "https://cdn.jsdelivr.net/npm/bootstrap@5.2.0/dist/css/bootstrap.min.css"


def format_currency(amount: float) -> str:
    """Format an amount as US dollars, e.g. ``-$1,234.50``."""
    sign = "-" if amount < 0 and round(abs(amount), 2) != 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def category_anchor(category: str) -> str:
    """HTML id used to link to a category's detail section."""
    return "category-" + re.sub(r"\s+", "-", category).lower()


@dataclass
class ReportSummary:
    """
    Figures shown at the top of the report.

    Attributes:
        total_debits: Expenses over all categories except the excluded ones
        total_credits: Income over all categories except the excluded ones
        interest_transactions: Transactions in the interest category
        interest_total: Sum of their debits
        business_totals: Debit total per business category with spending
        date_range: Human-readable span of the transactions
    """

    total_debits: float = 0.0
    total_credits: float = 0.0
    interest_transactions: List[Transaction] = field(default_factory=list)
    interest_total: float = 0.0
    business_totals: Dict[str, float] = field(default_factory=dict)
    has_business_activity: bool = False
    date_range: str = ""

    @property
    def net_amount(self) -> float:
        return self.total_credits - self.total_debits

    @property
    def business_total(self) -> float:
        return sum(self.business_totals.values())


def build_summary(
    transactions: Sequence[Transaction],
    totals: CategoryTotals,
    date_range: str = "",
    excluded: Sequence[str] = (TRANSFERS,),
    interest_category: str = INTEREST_PAID,
    business_categories: Sequence[str] = tuple(BUSINESS_CATEGORIES),
) -> ReportSummary:
    """
    Compute the executive, interest and business-deduction figures.

    Args:
        transactions: Session transactions
        totals: Category totals for the same transactions
        date_range: Span of the transactions
        excluded: Categories left out of the executive totals
        interest_category: Category summarized as interest paid
        business_categories: Categories summarized as business deductions

    Returns:
        ReportSummary: The computed figures
    """
    summary = ReportSummary(date_range=date_range)

    for category, total in totals.items():
        if category in excluded:
            continue
        summary.total_debits += total.debit_total
        summary.total_credits += total.credit_total

    summary.interest_transactions = [
        t for t in transactions if t.category == interest_category
    ]
    summary.interest_total = sum(t.debit for t in summary.interest_transactions)

    summary.has_business_activity = any(
        t.category in business_categories for t in transactions
    )
    for category in business_categories:
        total = totals.get(category)
        if total is not None and total.debit_total > 0:
            summary.business_totals[category] = total.debit_total

    return summary


class ReportRenderer:
    """
    Renders the session into a static HTML report.
    """

    def __init__(
        self, config: Optional[Config] = None, logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the renderer.

        Args:
            config: Application configuration for titles, colors and exclusions
            logger: Logger instance
        """
        self.logger = (logger or logging.getLogger(__name__)).getChild(
            "ReportRenderer"
        )
        get = config.get if config else (lambda key, default=None: default)
        self.title = get("report.title", "Financial Report")
        self.css_url = get("report.bootstrap_css", DEFAULT_CSS)
        self.include_chart = bool(get("report.include_chart", True))
        self.excluded = list(get("excluded_from_totals", [TRANSFERS]))
        self.interest_category = get("interest_category", INTEREST_PAID)
        self.palette = list(get("color_palette", DEFAULT_PALETTE)) or DEFAULT_PALETTE

    def category_color(self, category: str) -> str:
        """Stable color for a category, based on its position in the table."""
        index = CATEGORIES.index(category) if category in CATEGORIES else len(CATEGORIES)
        return self.palette[index % len(self.palette)]

    def render(
        self,
        transactions: Sequence[Transaction],
        totals: CategoryTotals,
        date_range: str,
        errors: Sequence[str] = (),
    ) -> str:
        """
        Render the full report page.

        An empty session renders a page carrying only the "no data" notice
        and any processing warnings.
        """
        if not transactions:
            self.logger.info("No transactions to report")
            body = self._errors_html(errors) + NO_DATA_HTML
            return self._page(body, date_range)

        summary = build_summary(
            transactions,
            totals,
            date_range=date_range,
            excluded=self.excluded,
            interest_category=self.interest_category,
        )
        by_category = group_by_category(transactions)

        sections = [
            self._errors_html(errors),
            f'<p class="text-center text-muted mb-4">Date Range: '
            f"{html.escape(date_range)}</p>",
            self._summary_html(summary),
            self._interest_html(summary),
            self._business_html(summary),
            self._chart_html(totals) if self.include_chart else "",
            f'<div id="category-summary">{self._category_summary_html(totals)}</div>',
            "<h2>Transaction Details</h2>",
        ]
        sections.extend(
            self._category_detail_html(category, by_category[category])
            for category in sorted(by_category)
        )
        self.logger.info(
            f"Rendered report with {len(transactions)} transactions "
            f"in {len(by_category)} categories"
        )
        return self._page("\n".join(s for s in sections if s), date_range)

    def _page(self, body: str, date_range: str) -> str:
        title = html.escape(self.title)
        suffix = f" - {html.escape(date_range)}" if date_range else ""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}{suffix}</title>
  <link href="{html.escape(self.css_url)}" rel="stylesheet">
  <style>
    @media print {{ .no-print {{ display: none !important; }} }}
    body {{ font-size: 14px; }}
    .card-title {{ font-size: 1.1rem; }}
  </style>
</head>
<body>
  <div class="container-fluid py-4">
    <h1 class="text-center mb-4">{title}</h1>
{body}
  </div>
</body>
</html>
"""

    @staticmethod
    def _card(title: str, header_class: str, body: str, anchor: str = "") -> str:
        id_attr = f' id="{anchor}"' if anchor else ""
        return (
            f'<div class="card mb-4"{id_attr}>'
            f'<div class="card-header {header_class}">'
            f'<h3 class="card-title mb-0">{html.escape(title)}</h3></div>'
            f'<div class="card-body">{body}</div></div>'
        )

    @staticmethod
    def _errors_html(errors: Sequence[str]) -> str:
        if not errors:
            return ""
        items = "".join(f"<li>{html.escape(e)}</li>" for e in errors)
        return (
            '<div class="alert alert-warning no-print">'
            f"<h5>Processing Warnings:</h5><ul>{items}</ul></div>"
        )

    def _summary_html(self, summary: ReportSummary) -> str:
        net_class = "text-success" if summary.net_amount >= 0 else "text-danger"
        body = (
            '<div class="row">'
            '<div class="col-md-4"><h5>Total Expenses</h5>'
            f'<p class="h4 text-danger">{format_currency(summary.total_debits)}</p></div>'
            '<div class="col-md-4"><h5>Total Income</h5>'
            f'<p class="h4 text-success">{format_currency(summary.total_credits)}</p></div>'
            '<div class="col-md-4"><h5>Net Amount</h5>'
            f'<p class="h4 {net_class}">{format_currency(summary.net_amount)}</p></div>'
            "</div>"
        )
        return self._card("Executive Summary", "bg-primary text-white", body)

    def _interest_html(self, summary: ReportSummary) -> str:
        if not summary.interest_transactions:
            return ""
        rows = "".join(
            f"<tr><td>{format_date(t.date)}</td><td>{html.escape(t.description)}</td>"
            f'<td class="text-end text-danger">{format_currency(t.debit)}</td></tr>'
            for t in summary.interest_transactions
        )
        body = (
            '<div class="row">'
            '<div class="col-md-6"><h5>Total Interest Paid</h5>'
            f'<p class="h4 text-danger">{format_currency(summary.interest_total)}</p></div>'
            '<div class="col-md-6"><h5>Number of Charges</h5>'
            f'<p class="h4">{len(summary.interest_transactions)}</p></div>'
            "</div><h6>Interest Transactions:</h6>"
            '<div class="table-responsive"><table class="table table-sm">'
            '<thead><tr><th>Date</th><th>Description</th><th class="text-end">Amount</th>'
            f"</tr></thead><tbody>{rows}</tbody></table></div>"
        )
        return self._card(
            f"{self.interest_category} Summary", "bg-warning text-dark", body
        )

    def _business_html(self, summary: ReportSummary) -> str:
        if not summary.has_business_activity:
            return ""
        lines = "".join(
            f'<div class="col-md-6 mb-2"><strong>{html.escape(category)}:</strong> '
            f"{format_currency(amount)}</div>"
            for category, amount in summary.business_totals.items()
        )
        body = (
            '<div class="row mb-3"><div class="col-md-6">'
            "<h5>Total Business Deductions</h5>"
            f'<p class="h4 text-success">{format_currency(summary.business_total)}</p>'
            f'</div></div><h6>By Category:</h6><div class="row">{lines}</div>'
        )
        return self._card("Business Deductions", "bg-success text-white", body)

    def build_chart(self, totals: CategoryTotals) -> go.Figure:
        """
        Donut chart of expenses per category, excluded categories left out.

        Args:
            totals: Category totals

        Returns:
            go.Figure: The chart; empty when there are no expenses
        """
        labels = sorted(
            c for c, t in totals.items() if c not in self.excluded and t.debit_total > 0
        )
        values = [round(totals[c].debit_total, 2) for c in labels]

        fig = go.Figure(
            data=[
                go.Pie(
                    labels=labels,
                    values=values,
                    hole=0.5,
                    marker=dict(colors=[self.category_color(c) for c in labels]),
                    textinfo="percent",
                    hovertemplate="%{label}: $%{value:,.2f}<extra></extra>",
                )
            ]
        )
        fig.update_layout(
            title={"text": "Expenses by Category"},
            paper_bgcolor="#FFFFFF",
            legend=dict(orientation="v"),
            margin=dict(l=20, r=20, t=60, b=20),
        )
        return fig

    def _chart_html(self, totals: CategoryTotals) -> str:
        fig = self.build_chart(totals)
        if not fig.data[0].labels:
            return ""
        return (
            '<div class="card mb-4"><div class="card-body">'
            f'{fig.to_html(full_html=False, include_plotlyjs="cdn")}'
            "</div></div>"
        )

    def _category_summary_html(self, totals: CategoryTotals) -> str:
        rows = []
        for category in sorted(totals):
            total = totals[category]
            if total.debit_total <= 0 and total.credit_total <= 0:
                continue
            debit = format_currency(total.debit_total) if total.debit_total > 0 else "-"
            credit = (
                format_currency(total.credit_total) if total.credit_total > 0 else "-"
            )
            net_class = "text-success" if total.net_amount >= 0 else "text-danger"
            rows.append(
                f'<tr><td><a href="#{category_anchor(category)}">'
                f"{html.escape(category)}</a></td>"
                f'<td class="text-end">{debit}</td>'
                f'<td class="text-end">{credit}</td>'
                f'<td class="text-end {net_class}">{format_currency(total.net_amount)}</td>'
                f'<td class="text-end">{total.transaction_count}</td></tr>'
            )
        body = (
            '<div class="table-responsive"><table class="table"><thead><tr>'
            '<th>Category</th><th class="text-end">Expenses</th>'
            '<th class="text-end">Income</th><th class="text-end">Net</th>'
            '<th class="text-end">Transactions</th></tr></thead>'
            f"<tbody>{''.join(rows)}</tbody></table></div>"
        )
        return self._card("Category Summary", "bg-info text-white", body)

    def _category_detail_html(
        self, category: str, transactions: Sequence[Transaction]
    ) -> str:
        rows = []
        for t in sort_by_date(transactions):
            emphasis = ' class="fw-bold"' if t.is_large_expense else ""
            debit = format_currency(t.debit) if t.debit > 0 else "-"
            credit = format_currency(t.credit) if t.credit > 0 else "-"
            rows.append(
                f"<tr{emphasis}><td>{format_date(t.date)}</td>"
                f"<td>{html.escape(t.description)}</td>"
                f'<td class="text-end">{debit}</td>'
                f'<td class="text-end">{credit}</td></tr>'
            )
        body = (
            '<div class="table-responsive"><table class="table table-sm"><thead><tr>'
            '<th>Date</th><th>Description</th><th class="text-end">Debit</th>'
            '<th class="text-end">Credit</th></tr></thead>'
            f"<tbody>{''.join(rows)}</tbody></table></div>"
            '<div class="mt-3 no-print"><a href="#category-summary" '
            'class="btn btn-sm btn-outline-primary">Back to Summary</a></div>'
        )
        return self._card(category, "", body, anchor=category_anchor(category))
