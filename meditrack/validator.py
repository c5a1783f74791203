# meditrack/validator.py
"""Field predicates and the validation gates used by every registry.

The ``is_*`` functions are pure and never raise. The ``validate_*`` functions
wrap the composite predicates and raise :class:`InvalidDataError` when the
record is not acceptable; they return nothing on success.
"""
import re
from datetime import datetime
from typing import Any, Callable, Generic, List, Optional, TypeVar

from .exceptions import InvalidDataError
from .models import Appointment, Bill, Doctor, Patient

T = TypeVar("T")

MOBILE_PATTERN = re.compile(r"[0-9]{10}")
EMAIL_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+\.[a-zA-Z]{2,6}$", re.ASCII)


# --- Raw field checks ---

def is_not_empty(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def is_valid_mobile(mobile: Optional[str]) -> bool:
    return isinstance(mobile, str) and MOBILE_PATTERN.fullmatch(mobile) is not None


def is_valid_email(email: Optional[str]) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def is_future_date(value: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Strictly after ``now``. Aware values are compared against an aware clock."""
    if value is None:
        return False
    if now is None or (now.tzinfo is None) != (value.tzinfo is None):
        now = datetime.now(value.tzinfo)
    return value > now


# --- Composite entity checks ---

def is_valid_patient(patient: Optional[Patient]) -> bool:
    return (
        patient is not None
        and is_positive(patient.id)
        and patient.person is not None
        and is_not_empty(patient.person.name)
        and is_valid_mobile(patient.person.mobile_no)
        and is_not_empty(patient.medical_record_number)
    )


def is_valid_doctor(doctor: Optional[Doctor]) -> bool:
    return (
        doctor is not None
        and is_positive(doctor.id)
        and is_not_empty(doctor.name)
        and is_positive(doctor.experience)
        and doctor.specialization is not None
    )


def is_valid_appointment(appointment: Optional[Appointment], now: Optional[datetime] = None) -> bool:
    return (
        appointment is not None
        and is_positive(appointment.id)
        and appointment.patient is not None
        and appointment.patient.assigned_doctor is not None
        and is_future_date(appointment.appointment_datetime, now)
    )


def is_valid_bill(bill: Optional[Bill]) -> bool:
    return (
        bill is not None
        and is_positive(bill.id)
        and bill.appointment is not None
        and bill.appointment.patient is not None
        and bill.appointment.patient.assigned_doctor is not None
        and bill.appointment.status is not None
        and is_positive(bill.amount)
    )


# --- Gates ---

def validate_patient(patient: Optional[Patient]) -> None:
    if not is_valid_patient(patient):
        raise InvalidDataError("Invalid patient data")


def validate_doctor(doctor: Optional[Doctor]) -> None:
    if not is_valid_doctor(doctor):
        raise InvalidDataError("Invalid doctor data")


def validate_appointment(appointment: Optional[Appointment], now: Optional[datetime] = None) -> None:
    if not is_valid_appointment(appointment, now):
        raise InvalidDataError("Invalid appointment data")


def validate_bill(bill: Optional[Bill]) -> None:
    if not is_valid_bill(bill):
        raise InvalidDataError("Invalid bill data")


# --- Predicate composition ---

def negate(predicate: Callable[[T], bool]) -> Callable[[T], bool]:
    return lambda value: not predicate(value)


def validate_with_predicate(value: T, predicate: Callable[[T], bool], error_message: str) -> None:
    if not predicate(value):
        raise InvalidDataError(error_message)


class ValidationBuilder(Generic[T]):
    """Collects predicates for one value and checks them all at once.

    validate_that(mobile).must(is_not_empty).must(is_valid_mobile) \\
        .with_message("Mobile number must have 10 digits").validate()
    """

    def __init__(self, value: T):
        self.value = value
        self.predicates: List[Callable[[T], bool]] = []
        self.error_message = "Validation failed"

    def must(self, predicate: Callable[[T], bool]) -> "ValidationBuilder[T]":
        self.predicates.append(predicate)
        return self

    def with_message(self, message: str) -> "ValidationBuilder[T]":
        self.error_message = message
        return self

    def is_valid(self) -> bool:
        return all(predicate(self.value) for predicate in self.predicates)

    def validate(self) -> None:
        if not self.is_valid():
            raise InvalidDataError(self.error_message)


def validate_that(value: T) -> ValidationBuilder[T]:
    return ValidationBuilder(value)
