"""CSV export of the sub ID report."""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from cpa_dashboard.models.report import SubIdReportRow

REPORT_HEADERS = ("Sub ID", "Clicks", "Leads", "Approved", "Revenue", "CR%")
DELIMITER = ","
CENTS = Decimal("0.01")


def format_row(row: SubIdReportRow, currency_symbol: str = "$") -> list[str]:
    return [
        row.sub_id,
        str(row.clicks),
        str(row.leads),
        str(row.approved),
        f"{currency_symbol}{row.revenue.quantize(CENTS, rounding=ROUND_HALF_UP)}",
        f"{row.conversion_rate:.2f}%",
    ]


def export_report_csv(rows: Iterable[SubIdReportRow], currency_symbol: str = "$") -> str:
    """Render the report as comma separated text.

    Fields are not quoted or escaped; sub IDs must not contain commas.
    """
    lines = [DELIMITER.join(REPORT_HEADERS)]
    lines.extend(DELIMITER.join(format_row(row, currency_symbol)) for row in rows)
    return "\n".join(lines)


def report_filename(day: date) -> str:
    return f"clickdealer-report-{day.isoformat()}.csv"
