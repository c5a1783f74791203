# meditrack/seed.py
# Initial records for the console. Everything goes through the public
# registry operations, so seeded data passes the same validation as typed-in data.
from datetime import datetime, time, timedelta
from typing import Dict, Optional

import structlog

from .context import ClinicContext
from .models import Appointment, Bill, Doctor, Patient, Person, Specialization, Weekday

logger = structlog.get_logger(__name__)

W = Weekday

DEFAULT_DOCTORS = [
    (1, "Dr. Sarah Johnson", 15, Specialization.CARDIOLOGY, {W.MONDAY, W.WEDNESDAY, W.FRIDAY}, time(9, 0), time(17, 0)),
    (2, "Dr. Michael Chen", 12, Specialization.NEUROLOGY, {W.TUESDAY, W.THURSDAY}, time(10, 0), time(18, 0)),
    (3, "Dr. Emily Rodriguez", 8, Specialization.PEDIATRICS,
     {W.MONDAY, W.TUESDAY, W.WEDNESDAY, W.THURSDAY, W.FRIDAY}, time(8, 0), time(16, 0)),
    (4, "Dr. James Wilson", 20, Specialization.ORTHOPEDICS, {W.WEDNESDAY, W.FRIDAY}, time(9, 30), time(17, 30)),
    (5, "Dr. Priya Sharma", 10, Specialization.DERMATOLOGY, {W.MONDAY, W.THURSDAY, W.FRIDAY}, time(11, 0), time(19, 0)),
]

DEFAULT_PATIENTS = [
    (1, "John Smith", 45, "9876543210", "MRN001"),
    (2, "Maria Garcia", 32, "9876543211", "MRN002"),
    (3, "David Brown", 28, "9876543212", "MRN003"),
    (4, "Lisa Anderson", 55, "9876543213", "MRN004"),
    (5, "Robert Taylor", 38, "9876543214", "MRN005"),
]

# (appointment id, patient id, days ahead, hour, minute)
DEFAULT_APPOINTMENTS = [
    (1, 1, 2, 10, 0),
    (2, 2, 3, 14, 30),
    (3, 3, 5, 11, 0),
]

# (bill id, appointment id, amount, paid)
DEFAULT_BILLS = [
    (1, 1, 1500.0, True),
    (2, 2, 2000.0, False),
]


def _at(now: datetime, days: int, hour: int, minute: int) -> datetime:
    return (now + timedelta(days=days)).replace(hour=hour, minute=minute, second=0, microsecond=0)


def load_default_data(ctx: ClinicContext, now: Optional[datetime] = None) -> Dict[str, int]:
    """Five doctors, five patients (each with a doctor), three appointments, two bills (one paid)."""
    now = now or datetime.now()

    for doctor_id, name, experience, specialization, days, start, end in DEFAULT_DOCTORS:
        ctx.doctors.add(Doctor(
            id=doctor_id, name=name, experience=experience, specialization=specialization,
            available_days=days, available_from=start, available_to=end, created_at=now,
        ))

    for patient_id, name, age, mobile, mrn in DEFAULT_PATIENTS:
        person = Person(id=patient_id, name=name, age=age, mobile_no=mobile, created_at=now)
        ctx.patients.add(Patient(id=patient_id, person=person, medical_record_number=mrn, registration_date=now))
        ctx.patients.assign_doctor(patient_id, ctx.doctors.find_by_id(patient_id))

    for appointment_id, patient_id, days, hour, minute in DEFAULT_APPOINTMENTS:
        ctx.appointments.book(Appointment(
            id=appointment_id,
            patient=ctx.patients.find_by_id(patient_id),
            appointment_datetime=_at(now, days, hour, minute),
        ))

    for bill_id, appointment_id, amount, paid in DEFAULT_BILLS:
        ctx.bills.create(Bill(id=bill_id, appointment=ctx.appointments.find_by_id(appointment_id), amount=amount, created_at=now))
        if paid:
            ctx.bills.pay(bill_id)

    counts = {
        "doctors": len(ctx.doctors),
        "patients": len(ctx.patients),
        "appointments": len(ctx.appointments),
        "bills": len(ctx.bills),
    }
    logger.info("default_data_loaded", **counts)
    ctx.audit.log_event(action="SEED_DEFAULT_DATA", category="SYSTEM", details=str(counts))
    return counts


def load_demo_data(ctx: ClinicContext, now: Optional[datetime] = None) -> Dict[str, int]:
    """One doctor, one patient, an appointment for tomorrow and its pending bill."""
    now = now or datetime.now()

    doctor = Doctor(
        id=1, name="Dr. Demo Smith", experience=10, specialization=Specialization.CARDIOLOGY,
        available_days={W.MONDAY, W.WEDNESDAY, W.FRIDAY},
        available_from=time(9, 0), available_to=time(17, 0), created_at=now,
    )
    ctx.doctors.add(doctor)

    patient = Patient(
        id=1,
        person=Person(id=1, name="Demo Patient", age=35, mobile_no="1234567890", created_at=now),
        medical_record_number="MRN001",
        registration_date=now,
    )
    ctx.patients.add(patient)
    ctx.patients.assign_doctor(patient.id, doctor)

    appointment = Appointment(id=1, patient=patient, appointment_datetime=now + timedelta(days=1))
    ctx.appointments.book(appointment)
    ctx.bills.create(Bill(id=1, appointment=appointment, amount=ctx.settings.default_bill_amount, created_at=now))

    counts = {"doctors": 1, "patients": 1, "appointments": 1, "bills": 1}
    logger.info("demo_data_loaded", **counts)
    return counts
