# tests/test_seed_and_reports.py
from datetime import datetime

import pytest
from openpyxl import load_workbook
from structlog.testing import capture_logs

from meditrack import reports
from meditrack.exceptions import InvalidDataError
from meditrack.models import AppointmentStatus, BillStatus
from meditrack.seed import load_default_data, load_demo_data


def test_default_data_counts_and_links(ctx):
    counts = load_default_data(ctx)
    assert counts == {"doctors": 5, "patients": 5, "appointments": 3, "bills": 2}

    for patient in ctx.patients:
        assert patient.assigned_doctor is ctx.doctors.find_by_id(patient.id)
    assert all(a.status is AppointmentStatus.SCHEDULED for a in ctx.appointments)
    assert ctx.bills.is_paid(1) is True
    assert ctx.bills.find_by_id(2).status is BillStatus.PENDING
    assert ctx.bills.statistics()["total"] == 3500.0


def test_default_data_twice_hits_unique_ids(ctx):
    load_default_data(ctx)
    with pytest.raises(InvalidDataError, match="Doctor with ID 1 already exists"):
        load_default_data(ctx)


def test_demo_data_books_a_billable_visit(ctx):
    counts = load_demo_data(ctx)
    assert counts == {"doctors": 1, "patients": 1, "appointments": 1, "bills": 1}
    appointment = ctx.appointments.find_by_id(1)
    assert appointment.doctor.name == "Dr. Demo Smith"
    assert ctx.bills.find_by_id(1).amount == ctx.settings.default_bill_amount


def test_format_bill_summary(ctx):
    load_default_data(ctx)
    text = reports.format_bill_summary(ctx.bills.summarize())
    assert "Total Bills:     2" in text
    assert "Total Amount:    $3500.00" in text
    assert "Paid Amount:     $1500.00" in text
    assert "Pending Amount:  $2000.00" in text


def _rows(path):
    wb = load_workbook(path)
    ws = wb["Bill Summary"]
    return [list(r) for r in ws.iter_rows(values_only=True)]


def test_export_bill_summary_xlsx(ctx, tmp_path):
    load_default_data(ctx)
    summary = ctx.bills.summarize()
    summary.generated_at = datetime(2030, 1, 2, 3, 4, 5)

    path = reports.export_bill_summary_xlsx(summary, tmp_path / "out")
    assert path.name == "BillSummary_20300102_030405.xlsx"
    assert path.exists()

    rows = _rows(path)
    assert rows[0][0] == "BILL SUMMARY REPORT"
    assert rows[2][:2] == ["Total Bills:", 2]
    assert rows[3][:2] == ["Total Amount:", 3500.0]
    assert rows[4][:2] == ["Paid Amount:", 1500.0]
    assert rows[5][:2] == ["Pending Amount:", 2000.0]

    header_at = rows.index(reports.BILL_COLUMNS)
    bill_rows = rows[header_at + 1:]
    assert [r[0] for r in bill_rows] == [1, 2]
    assert bill_rows[0][2] == "John Smith"
    assert bill_rows[0][4] == "PAID"
    assert bill_rows[1][3] == 2000.0


def test_export_styles_headers_and_amounts(ctx, tmp_path):
    load_default_data(ctx)
    path = reports.export_bill_summary_xlsx(ctx.bills.summarize(), tmp_path)
    ws = load_workbook(path)["Bill Summary"]

    assert ws["A1"].font.bold
    assert ws["A9"].value == "Bill ID"
    assert ws["A9"].font.bold
    assert ws["B4"].number_format == reports.AMOUNT_FORMAT
    assert ws["D10"].number_format == reports.AMOUNT_FORMAT


def test_export_of_empty_summary_is_audited(ctx, tmp_path):
    with capture_logs() as logs:
        path = reports.export_bill_summary_xlsx(ctx.bills.summarize(), tmp_path, audit=ctx.audit)

    rows = _rows(path)
    assert rows[-1] == reports.BILL_COLUMNS
    assert rows[2][:2] == ["Total Bills:", 0]
    exports = [e for e in logs if e.get("raw_action") == "EXPORT_BILL_SUMMARY"]
    assert exports and exports[0]["action"] == "EXPORT"
