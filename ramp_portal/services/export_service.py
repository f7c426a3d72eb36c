"""
CPA export — a flat spreadsheet of every approved time log and travel
request for the program's accountant.

Rows: one PAYROLL row per approved time log (newest first), then one TRAVEL
row per approved travel request (submission order). Amounts use the same
rules as approval, so the export total equals the ledger total as long as
no rate changed in between.
"""

import csv
import io
import logging
from datetime import datetime, timezone

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ramp_portal.models.timesheet import STATUS_APPROVED, TimeLog, TravelRequest
from ramp_portal.services import spend_service
from ramp_portal.services.permission_service import require_permission

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Type",
    "Week Ending",
    "Employee",
    "Role",
    "Category",
    "Labor Cost",
    "Equipment",
    "Supplies",
    "Travel",
    "Total",
    "Receipts",
]

# Columns holding currency amounts (zero-based)
_MONEY_COLUMNS = range(5, 10)

HEADER_FILL = PatternFill(start_color="354A5F", end_color="354A5F", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
_COLUMN_WIDTHS = [10, 13, 24, 18, 14, 13, 12, 12, 12, 13, 60]


def _employee_name(employee, snapshot=None) -> str:
    if employee is not None:
        return employee.full_name
    return snapshot or ""


def build_export_rows() -> list[list]:
    """Project approved records into export rows. Read-only."""
    rows = []

    logs = (
        TimeLog.query.filter_by(status=STATUS_APPROVED)
        .order_by(TimeLog.created_at.desc(), TimeLog.id.desc())
        .all()
    )
    for log in logs:
        employee = log.employee
        labor = spend_service.time_log_labor(log, employee)
        equipment = log.equipment_cost or 0.0
        supplies = log.supplies_cost or 0.0
        rows.append([
            "PAYROLL",
            log.week_ending.isoformat(),
            _employee_name(employee, log.employee_name),
            employee.role if employee else "",
            log.budget_category,
            labor,
            equipment,
            supplies,
            0.0,
            labor + equipment + supplies,
            " ".join(log.receipt_urls),
        ])

    trips = (
        TravelRequest.query.filter_by(status=STATUS_APPROVED)
        .order_by(TravelRequest.id.asc())
        .all()
    )
    for trip in trips:
        employee = trip.employee
        amount = spend_service.travel_amount(trip)
        rows.append([
            "TRAVEL",
            trip.week_ending.isoformat(),
            _employee_name(employee),
            employee.role if employee else "",
            "Travel",
            0.0,
            0.0,
            0.0,
            amount,
            amount,
            " ".join(trip.receipt_urls),
        ])

    return rows


def generate_cpa_csv(actor) -> str:
    """CSV text of the CPA export, header row first."""
    require_permission(actor, "export.run")
    rows = build_export_rows()

    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(rows)

    logger.info("CPA CSV export generated (%d rows)", len(rows), extra={"actor_id": actor.id})
    return buf.getvalue()


def generate_cpa_xlsx(actor) -> io.BytesIO:
    """
    Styled Excel workbook of the CPA export.
    Returns a BytesIO buffer ready for Flask send_file.
    """
    require_permission(actor, "export.run")
    rows = build_export_rows()

    wb = Workbook()
    ws = wb.active
    ws.title = "CPA Export"

    for col, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal="center")

    for r, row in enumerate(rows, 2):
        for c, value in enumerate(row):
            cell = ws.cell(row=r, column=c + 1, value=value)
            cell.border = THIN_BORDER
            if c in _MONEY_COLUMNS:
                cell.number_format = "#,##0.00"

    for col, width in enumerate(_COLUMN_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "A2"

    meta = wb.create_sheet("Info")
    meta["A1"] = "Generated"
    meta["B1"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    meta["A2"] = "Rows"
    meta["B2"] = len(rows)
    meta["A3"] = "Grand Total"
    meta["B3"] = sum(row[9] for row in rows)
    meta["B3"].number_format = "#,##0.00"

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)

    logger.info("CPA XLSX export generated (%d rows)", len(rows), extra={"actor_id": actor.id})
    return buf
