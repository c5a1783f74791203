# meditrack/main.py - console entry point
import argparse
import platform
import sys
from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from . import reports
from .config import Settings, get_settings
from .context import ClinicContext, create_context
from .core.logging import setup_logging
from .date_utils import DISPLAY_DATE_TIME_FORMAT, format_time, parse_datetime, parse_time
from .exceptions import AppointmentNotFoundError, DoctorNotFoundError, MediTrackError, PatientNotFoundError
from .models import Appointment, Bill, Doctor, Patient, Person, Specialization, Weekday
from .seed import load_default_data, load_demo_data

logger = structlog.get_logger(__name__)

MENU = [
    ("1", "Add Doctor"),
    ("2", "Add Patient"),
    ("3", "Assign Doctor to Patient"),
    ("4", "Book Appointment"),
    ("5", "Cancel Appointment"),
    ("6", "Generate Bill"),
    ("7", "Pay Bill"),
    ("8", "List All Appointments"),
    ("9", "Bill Summary (print and export to Excel)"),
    ("10", "List All Doctors"),
    ("11", "List All Patients"),
    ("0", "Exit"),
]


class ConsoleApp:
    """Interactive menu over a ClinicContext. Input and output are injectable for tests."""

    def __init__(
        self,
        ctx: ClinicContext,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.ctx = ctx
        self._input = input_func
        self._out = output
        self.actions: Dict[str, Callable[[], None]] = {
            "1": self.add_doctor,
            "2": self.add_patient,
            "3": self.assign_doctor,
            "4": self.book_appointment,
            "5": self.cancel_appointment,
            "6": self.generate_bill,
            "7": self.pay_bill,
            "8": self.list_appointments,
            "9": self.bill_summary,
            "10": self.list_doctors,
            "11": self.list_patients,
        }

    # --- prompt helpers ---

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def ask_int(self, prompt: str) -> int:
        raw = self.ask(prompt)
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Expected a whole number, got '{raw}'") from None

    # --- loop ---

    def print_menu(self) -> None:
        self._out("\n" + "=" * 40)
        self._out("  MediTrack Main Menu")
        self._out("=" * 40)
        for key, label in MENU:
            self._out(f"{key}. {label}")
        self._out("=" * 40)

    def run(self) -> None:
        while True:
            self.print_menu()
            try:
                choice = self.ask("Choose an option: ")
            except EOFError:
                break
            if choice == "0":
                self._out("\nExiting MediTrack. Thank you for using our system!")
                break
            action = self.actions.get(choice)
            if action is None:
                self._out("Invalid option. Please try again.")
                continue
            try:
                action()
            except (MediTrackError, ValueError) as e:
                logger.warning("menu_action_failed", choice=choice, error=str(e))
                self._out(f"Error: {e}")

    # --- actions ---

    def add_doctor(self) -> None:
        self._out("\n--- Add New Doctor ---")
        doctor_id = self.ask_int("Doctor ID: ")
        name = self.ask("Name: ")
        experience = self.ask_int("Experience (years): ")
        self._out("Available Specializations: " + ", ".join(s.value for s in Specialization))
        specialization = Specialization.parse(self.ask("Specialization: "))
        days_raw = self.ask("Available Days (comma-separated, e.g., MONDAY,WEDNESDAY,FRIDAY): ")
        days = {Weekday.parse(d) for d in days_raw.split(",") if d.strip()}
        available_from = parse_time(self.ask("Available From (HH:MM, e.g., 09:00): "))
        available_to = parse_time(self.ask("Available To (HH:MM, e.g., 17:00): "))

        self.ctx.doctors.add(Doctor(
            id=doctor_id, name=name, experience=experience, specialization=specialization,
            available_days=days, available_from=available_from, available_to=available_to,
        ))
        self._out("Doctor added successfully!")

    def add_patient(self) -> None:
        self._out("\n--- Add New Patient ---")
        patient_id = self.ask_int("Patient ID: ")
        name = self.ask("Name: ")
        age = self.ask_int("Age: ")
        mobile = self.ask("Mobile Number (10 digits): ")
        mrn = self.ask("Medical Record Number: ")

        person = Person(id=patient_id, name=name, age=age, mobile_no=mobile)
        self.ctx.patients.add(Patient(id=patient_id, person=person, medical_record_number=mrn))
        self._out("Patient registered successfully!")

    def assign_doctor(self) -> None:
        self._out("\n--- Assign Doctor ---")
        patient_id = self.ask_int("Patient ID: ")
        doctor_id = self.ask_int("Doctor ID: ")
        doctor = self.ctx.doctors.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(f"Doctor not found with ID: {doctor_id}")
        if not self.ctx.patients.assign_doctor(patient_id, doctor):
            raise PatientNotFoundError(f"Patient not found with ID: {patient_id}")
        self._out(f"Assigned {doctor.name} to patient {patient_id}.")

    def book_appointment(self) -> None:
        self._out("\n--- Book New Appointment ---")
        appointment_id = self.ask_int("Appointment ID: ")
        patient_id = self.ask_int("Patient ID: ")
        patient = self.ctx.patients.find_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(f"Patient not found with ID: {patient_id}")
        when = parse_datetime(self.ask("Appointment Date & Time (YYYY-MM-DD HH:MM): "))
        notes = self.ask("Notes (optional, press Enter to skip): ") or None

        doctor = patient.assigned_doctor
        duration = self.ctx.settings.default_appointment_duration_minutes
        if doctor is not None and self.ctx.appointments.has_conflicting_appointment(doctor, when, duration):
            self._out(f"Warning: {doctor.name} already has an appointment around that time.")

        self.ctx.appointments.book(Appointment(
            id=appointment_id, patient=patient, appointment_datetime=when, notes=notes,
        ))
        self._out("Appointment booked successfully!")

    def cancel_appointment(self) -> None:
        self._out("\n--- Cancel Appointment ---")
        self.ctx.appointments.cancel(self.ask_int("Appointment ID: "))
        self._out("Appointment canceled successfully")

    def generate_bill(self) -> None:
        self._out("\n--- Generate Bill ---")
        bill_id = self.ask_int("Bill ID: ")
        appointment_id = self.ask_int("Appointment ID: ")
        appointment = self.ctx.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(f"Appointment not found with ID: {appointment_id}")
        amount = self.ctx.settings.default_bill_amount
        self.ctx.bills.create(Bill(id=bill_id, appointment=appointment, amount=amount))
        self._out(f"Bill generated successfully. Amount: ${amount:.2f}")

    def pay_bill(self) -> None:
        self._out("\n--- Pay Bill ---")
        bill_id = self.ask_int("Bill ID: ")
        if self.ctx.bills.pay(bill_id):
            self._out("Payment processed successfully")
        else:
            self._out(f"Bill #{bill_id} is already {self.ctx.bills.find_by_id(bill_id).status.value}")

    def list_appointments(self) -> None:
        self._out("\n--- All Appointments ---")
        appointments = self.ctx.appointments.get_all()
        if not appointments:
            self._out("No appointments found.")
            return
        self._out(f"Total: {len(appointments)} appointment(s)\n")
        self._out(f"{'ID':<5} {'Patient':<20} {'Date/Time':<25} {'Status':<15}")
        self._out("-" * 70)
        for apt in appointments:
            when = apt.appointment_datetime.strftime(DISPLAY_DATE_TIME_FORMAT) if apt.appointment_datetime else "Not scheduled"
            name = (apt.patient.name if apt.patient else None) or "Unknown"
            self._out(f"{apt.id:<5} {name:<20} {when:<25} {apt.status.value:<15}")

    def bill_summary(self) -> None:
        self._out("\n--- Generating Bill Summary Report ---")
        summary = self.ctx.bills.summarize()
        self._out(reports.format_bill_summary(summary))
        path = reports.export_bill_summary_xlsx(summary, self.ctx.settings.report_output_dir, audit=self.ctx.audit)
        self._out(f"Bill summary exported to: {path}")

    def list_doctors(self) -> None:
        self._out("\n--- All Doctors ---")
        doctors = self.ctx.doctors.get_all()
        if not doctors:
            self._out("No doctors found.")
            return
        self._out(f"Total: {len(doctors)} doctor(s)\n")
        self._out(f"{'ID':<5} {'Name':<25} {'Specialization':<17} {'Experience':<12} {'Available Days':<20} {'Hours':<11}")
        self._out("-" * 92)
        week = list(Weekday)
        for doc in doctors:
            days = ", ".join(d.value[:3] for d in sorted(doc.available_days, key=week.index)) or "Not set"
            specialty = doc.specialization.value if doc.specialization else "-"
            hours = f"{format_time(doc.available_from)}-{format_time(doc.available_to)}"
            self._out(f"{doc.id:<5} {doc.name:<25} {specialty:<17} {str(doc.experience) + ' years':<12} {days:<20} {hours:<11}")

    def list_patients(self) -> None:
        self._out("\n--- All Patients ---")
        patients = self.ctx.patients.get_all()
        if not patients:
            self._out("No patients found.")
            return
        self._out(f"Total: {len(patients)} patient(s)\n")
        self._out(f"{'ID':<5} {'Name':<20} {'Age':<6} {'Phone':<15} {'Assigned Doctor':<25} {'Status':<10}")
        self._out("-" * 85)
        for p in patients:
            person = p.person
            doctor = p.assigned_doctor.name if p.assigned_doctor else "Not assigned"
            status = "Active" if p.is_active else "Inactive"
            self._out(
                f"{p.id:<5} {(person.name if person else 'Unknown'):<20} {(person.age if person else 0):<6} "
                f"{(person.mobile_no if person else 'N/A'):<15} {doctor:<25} {status:<10}"
            )


def version_text(settings: Settings) -> str:
    return "\n".join([
        settings.app_name,
        f"Version: {settings.app_version}",
        f"Python Version: {platform.python_version()}",
    ])


def run_demo(ctx: ClinicContext, output: Callable[[str], None] = print) -> Dict[str, int]:
    output("\nRunning MediTrack Demo...\n")
    counts = load_demo_data(ctx)
    for label, count in counts.items():
        output(f"  - {count} {label}")
    stats = ctx.bills.statistics()
    output(f"\nBilled: ${stats['total']:.2f} (pending ${stats['pending']:.2f})")
    output("Demo completed! Sample data has been loaded.")
    return counts


def _parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(
        prog="meditrack",
        description="MediTrack Healthcare Management System: doctors, patients, appointments and billing.",
    )
    ap.add_argument("-v", "--version", action="store_true", help="Display version information")
    ap.add_argument("--demo", action="store_true", help="Run a demonstration with sample data")
    ap.add_argument("--no-defaults", action="store_true", help="Start the menu without the default data set")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    if args.version:
        print(version_text(settings))
        return 0

    ctx = create_context(settings)
    if args.demo:
        run_demo(ctx)
        return 0

    if not args.no_defaults:
        load_default_data(ctx, now=datetime.now())
    print("\n" + "=" * 60)
    print(f"  {settings.app_name} v{settings.app_version}")
    print("=" * 60)
    ConsoleApp(ctx).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
