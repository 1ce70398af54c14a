"""File exports of an inventory collection.

Every exporter is a pure function of the records it is given (plus the date
used in the filename) and returns an ``ExportFile`` the route streams back as
an attachment. Empty collections are rejected with ``ExportError``.
"""

import csv
import html
import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from io import StringIO
from typing import Any, Callable, Dict, Optional, Sequence

from .errors import ExportError
from .stats import InventoryStats, compute_stats, item_value

CSV_HEADERS = ["Name", "SKU", "Category", "Quantity", "Price", "Total Value", "Description", "Created At"]
HTML_COLUMNS = ["Name", "SKU", "Category", "Quantity", "Price", "Total Value"]
CENT = Decimal("0.01")


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    filename: str
    media_type: str


def _ensure_items(items: Sequence[Any]) -> None:
    if not items:
        raise ExportError("No data to export")


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def to_cents(value: Any) -> Decimal:
    return _decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Any) -> str:
    """Two-decimal string, e.g. ``90.00``."""
    return f"{to_cents(value):.2f}"


def format_locale_date(value: Optional[date]) -> str:
    """Short US-style date (``10/19/2026``), or ``N/A`` when missing."""
    if value is None:
        return "N/A"
    return f"{value.month}/{value.day}/{value.year}"


def _iso(value: Optional[datetime]) -> Optional[str]:
    """UTC timestamp with a ``Z`` suffix; stored values are naive UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


def export_csv(items: Sequence[Any], today: Optional[date] = None) -> ExportFile:
    _ensure_items(items)
    today = today or date.today()

    output = StringIO()
    csv.writer(output, lineterminator="\n").writerow(CSV_HEADERS)
    # Text cells are quoted, embedded quotes doubled; numbers stay bare
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for item in items:
        writer.writerow([
            item.name or "",
            item.sku or "",
            item.category or "",
            item.quantity or 0,
            _decimal(item.price),
            to_cents(item_value(item)),
            item.description or "",
            format_locale_date(getattr(item, "created_at", None)),
        ])

    return ExportFile(
        content=output.getvalue().encode("utf-8"),
        filename=f"inventory-{today.isoformat()}.csv",
        media_type="text/csv; charset=utf-8",
    )


def export_json(items: Sequence[Any], today: Optional[date] = None) -> ExportFile:
    _ensure_items(items)
    today = today or date.today()

    rows = [
        {
            "name": item.name,
            "sku": item.sku,
            "category": item.category,
            "quantity": item.quantity,
            "price": float(_decimal(item.price)),
            "totalValue": format_money(item_value(item)),
            "description": item.description or "",
            "createdAt": _iso(getattr(item, "created_at", None)),
            "updatedAt": _iso(getattr(item, "updated_at", None)),
        }
        for item in items
    ]
    return ExportFile(
        content=json.dumps(rows, indent=2, ensure_ascii=False).encode("utf-8"),
        filename=f"inventory-{today.isoformat()}.json",
        media_type="application/json",
    )


_REPORT_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; padding: 40px; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; background: white; padding: 40px; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        h1 { color: #2c3e50; margin-bottom: 10px; font-size: 32px; }
        .subtitle { color: #7f8c8d; margin-bottom: 30px; font-size: 14px; }
        .stats-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 40px; }
        .stat-card { background: #ecf0f1; padding: 20px; border-radius: 8px; text-align: center; }
        .stat-label { font-size: 12px; color: #7f8c8d; text-transform: uppercase; margin-bottom: 8px; }
        .stat-value { font-size: 28px; font-weight: bold; color: #2c3e50; }
        table { width: 100%; border-collapse: collapse; margin-top: 20px; }
        th { background: #34495e; color: white; padding: 12px; text-align: left; font-weight: 600; }
        td { padding: 12px; border-bottom: 1px solid #ecf0f1; }
        .footer { margin-top: 40px; padding-top: 20px; border-top: 2px solid #ecf0f1; text-align: center; color: #7f8c8d; font-size: 12px; }
        @media print { body { padding: 0; background: white; } .container { box-shadow: none; } }
"""


def _html_row(item: Any) -> str:
    cells = [
        html.escape(item.name or ""),
        html.escape(item.sku or ""),
        html.escape(item.category or ""),
        str(int(item.quantity or 0)),
        f"${format_money(item.price)}",
        f"${format_money(item_value(item))}",
    ]
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def export_html(
    items: Sequence[Any],
    stats: Optional[InventoryStats] = None,
    today: Optional[date] = None,
) -> ExportFile:
    """Printable HTML report: summary cards followed by the item table.

    All record text is HTML-escaped before it is embedded.
    """
    _ensure_items(items)
    today = today or date.today()
    stats = stats or compute_stats(items)

    report_date = format_locale_date(today)
    total_value = f"${to_cents(stats.total_value):,.2f}"
    header = "".join(f"<th>{column}</th>" for column in HTML_COLUMNS)
    body = "\n".join(_html_row(item) for item in items)

    document = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Inventory Report - {report_date}</title>
    <style>{_REPORT_STYLE}    </style>
</head>
<body>
    <div class="container">
        <h1>Inventory Report</h1>
        <p class="subtitle">Generated on {report_date}</p>
        <div class="stats-grid">
            <div class="stat-card">
                <div class="stat-label">Total Items</div>
                <div class="stat-value">{stats.total_items}</div>
            </div>
            <div class="stat-card">
                <div class="stat-label">Low Stock Items</div>
                <div class="stat-value">{stats.low_stock_count}</div>
            </div>
            <div class="stat-card">
                <div class="stat-label">Total Inventory Value</div>
                <div class="stat-value">{total_value}</div>
            </div>
        </div>
        <table>
            <thead>
                <tr>{header}</tr>
            </thead>
            <tbody>
{body}
            </tbody>
        </table>
        <div class="footer">
            <p>This report contains {stats.total_items} items with a total value of {total_value}</p>
            <p>&copy; {today.year} Inventory Management System</p>
        </div>
    </div>
</body>
</html>
"""
    return ExportFile(
        content=document.encode("utf-8"),
        filename=f"inventory-report-{report_date.replace('/', '-')}.html",
        media_type="text/html; charset=utf-8",
    )


EXPORTERS: Dict[str, Callable[..., ExportFile]] = {
    "csv": export_csv,
    "json": export_json,
    "html": export_html,
}
