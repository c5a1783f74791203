"""Bill summary rendering: a text block for the console and an xlsx workbook export."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from .compliance_logger import ComplianceLogger
from .date_utils import FILE_STAMP_FORMAT, format_datetime
from .models import BillSummary

SHEET_TITLE = "Bill Summary"
BILL_COLUMNS = ["Bill ID", "Appointment ID", "Patient Name", "Amount", "Status", "Created Date"]
AMOUNT_FORMAT = '"$"#,##0.00'

HEADER_FONT = Font(bold=True, size=12)
HEADER_FILL = PatternFill(fill_type="solid", start_color="FFC0C0C0", end_color="FFC0C0C0")


def format_bill_summary(summary: BillSummary) -> str:
    rule = "=" * 40
    lines = [
        rule,
        "  Bill Summary",
        rule,
        f"Total Bills:     {summary.bill_count}",
        f"Total Amount:    ${summary.total_amount:.2f}",
        f"Paid Amount:     ${summary.paid_amount:.2f}",
        f"Pending Amount:  ${summary.pending_amount:.2f}",
        rule,
    ]
    return "\n".join(lines)


def _bill_rows(summary: BillSummary) -> List[list]:
    rows: List[list] = []
    for bill in summary.bills:
        appointment = bill.appointment
        patient = appointment.patient if appointment else None
        rows.append([
            bill.id,
            appointment.id if appointment else "N/A",
            (patient.name if patient else None) or "Unknown",
            bill.amount,
            bill.status.value,
            format_datetime(bill.created_at) or "N/A",
        ])
    return rows


def _style_header(cells) -> None:
    for cell in cells:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def build_bill_summary_workbook(summary: BillSummary) -> Workbook:
    """One sheet: title, summary block, two blank rows, then one row per bill."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(["BILL SUMMARY REPORT"])
    _style_header(ws[1])
    ws.append([])
    ws.append(["Total Bills:", summary.bill_count])
    for label, amount in (
        ("Total Amount:", summary.total_amount),
        ("Paid Amount:", summary.paid_amount),
        ("Pending Amount:", summary.pending_amount),
    ):
        ws.append([label, amount])
        ws.cell(row=ws.max_row, column=2).number_format = AMOUNT_FORMAT
    ws.append([])
    ws.append([])

    ws.append(BILL_COLUMNS)
    _style_header(ws[ws.max_row])
    amount_col = BILL_COLUMNS.index("Amount") + 1
    for row in _bill_rows(summary):
        ws.append(row)
        ws.cell(row=ws.max_row, column=amount_col).number_format = AMOUNT_FORMAT

    # openpyxl has no autosize; size columns from the longest rendered value
    for idx, column in enumerate(ws.iter_cols(min_row=3, max_col=len(BILL_COLUMNS)), start=1):
        width = max((len(str(c.value)) for c in column if c.value is not None), default=8)
        ws.column_dimensions[get_column_letter(idx)].width = width + 2
    return wb


def export_bill_summary_xlsx(
    summary: BillSummary,
    out_dir: str | Path,
    *,
    audit: Optional[ComplianceLogger] = None,
) -> Path:
    """Write BillSummary_<stamp>.xlsx into ``out_dir`` and return its path."""
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    stamp = (summary.generated_at or datetime.now()).strftime(FILE_STAMP_FORMAT)
    path = out_path / f"BillSummary_{stamp}.xlsx"

    build_bill_summary_workbook(summary).save(path)

    if audit is not None:
        audit.log_event(
            action="EXPORT_BILL_SUMMARY",
            category="REPORTS",
            resource_type="bill_summary",
            details=str(path),
        )
    return path
