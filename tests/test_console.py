# tests/test_console.py
from datetime import datetime, timedelta
from pathlib import Path

import pytest

import meditrack.main as console
from meditrack.main import ConsoleApp, main
from meditrack.models import AppointmentStatus, BillStatus, Specialization, Weekday


def scripted(*answers):
    """input() stand-in that replays answers, then behaves like a closed stdin."""
    remaining = list(answers)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)
    return _input


def run_app(ctx, *answers):
    out = []
    ConsoleApp(ctx, input_func=scripted(*answers), output=out.append).run()
    return "\n".join(out)


@pytest.fixture
def when():
    return (datetime.now() + timedelta(days=2)).strftime("%Y-%m-%d %H:%M")


def test_full_menu_flow(ctx, when):
    text = run_app(
        ctx,
        "1", "1", "Dr. Heart", "12", "cardiology", "monday, FRIDAY", "09:00", "17:00",
        "2", "1", "John Smith", "45", "9876543210", "MRN001",
        "3", "1", "1",
        "4", "1", "1", when, "",
        "6", "1", "1",
        "7", "1",
        "7", "1",
        "0",
    )

    doctor = ctx.doctors.find_by_id(1)
    assert doctor.specialization is Specialization.CARDIOLOGY
    assert doctor.available_days == {Weekday.MONDAY, Weekday.FRIDAY}
    assert ctx.patients.find_by_id(1).assigned_doctor is doctor
    assert ctx.appointments.find_by_id(1).status is AppointmentStatus.SCHEDULED
    assert ctx.bills.find_by_id(1).status is BillStatus.PAID
    assert ctx.bills.find_by_id(1).amount == ctx.settings.default_bill_amount

    assert "Doctor added successfully!" in text
    assert "Payment processed successfully" in text
    assert "Bill #1 is already PAID" in text
    assert "Exiting MediTrack" in text


def test_errors_are_reported_and_the_loop_continues(ctx):
    text = run_app(ctx, "42", "4", "1", "9", "6", "abc", "5", "3", "0")

    assert "Invalid option. Please try again." in text
    assert "Error: Patient not found with ID: 9" in text
    assert "Error: Expected a whole number, got 'abc'" in text
    assert "Error: Appointment not found with ID: 3" in text
    assert "Exiting MediTrack" in text


def test_invalid_patient_is_reported(ctx):
    text = run_app(ctx, "2", "1", "Jane", "30", "12345", "MRN9")
    assert "Error: Invalid patient data" in text
    assert len(ctx.patients) == 0


def test_conflict_warning_on_booking(ctx, when):
    run_app(
        ctx,
        "1", "1", "Dr. Heart", "12", "CARDIOLOGY", "MONDAY", "09:00", "17:00",
        "2", "1", "John Smith", "45", "9876543210", "MRN001",
        "3", "1", "1",
        "4", "1", "1", when, "first",
    )
    text = run_app(ctx, "4", "2", "1", when, "")
    assert "already has an appointment around that time" in text
    assert len(ctx.appointments) == 2


def test_listings_and_bill_summary_export(ctx, settings):
    from meditrack.seed import load_default_data

    load_default_data(ctx)
    text = run_app(ctx, "8", "10", "11", "9")

    assert "Total: 3 appointment(s)" in text
    assert "Dr. Sarah Johnson" in text
    assert "09:00-17:00" in text
    assert "Robert Taylor" in text
    assert "Total Bills:     2" in text
    assert "Bill summary exported to:" in text
    exported = list(Path(settings.report_output_dir).glob("BillSummary_*.xlsx"))
    assert len(exported) == 1


def test_empty_listings(ctx):
    text = run_app(ctx, "8", "10", "11")
    assert "No appointments found." in text
    assert "No doctors found." in text
    assert "No patients found." in text


def test_main_version(monkeypatch, capsys):
    monkeypatch.setattr(console, "setup_logging", lambda settings=None: None)
    assert main(["--version"]) == 0
    out = capsys.readouterr().out
    assert "Version: 1.0.0" in out
    assert "Python Version:" in out


def test_main_demo(monkeypatch, capsys):
    monkeypatch.setattr(console, "setup_logging", lambda settings=None: None)
    assert main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert "Demo completed!" in out
    assert "Billed: $500.00" in out


@pytest.mark.parametrize("argv,expected_doctors", [([], 5), (["--no-defaults"], 0)])
def test_main_menu_loads_defaults_unless_told_not_to(monkeypatch, argv, expected_doctors):
    seen = []
    monkeypatch.setattr(console, "setup_logging", lambda settings=None: None)
    monkeypatch.setattr(ConsoleApp, "run", lambda self: seen.append(len(self.ctx.doctors)))
    assert main(argv) == 0
    assert seen == [expected_doctors]
