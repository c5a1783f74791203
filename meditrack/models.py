# meditrack/models.py
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Set
import enum

from pydantic import BaseModel, Field

from .exceptions import InvalidDataError


def _enum_key(value: str) -> str:
    return (value or "").strip().replace(" ", "_").upper()


# Closed value sets
class Specialization(str, enum.Enum):
    CARDIOLOGY = "CARDIOLOGY"
    NEUROLOGY = "NEUROLOGY"
    PEDIATRICS = "PEDIATRICS"
    ORTHOPEDICS = "ORTHOPEDICS"
    DERMATOLOGY = "DERMATOLOGY"
    GENERAL_MEDICINE = "GENERAL_MEDICINE"
    GYNECOLOGY = "GYNECOLOGY"
    PSYCHIATRY = "PSYCHIATRY"
    ONCOLOGY = "ONCOLOGY"
    ENT = "ENT"

    @classmethod
    def parse(cls, value: str) -> "Specialization":
        """Case-insensitive lookup; spaces are read as underscores."""
        try:
            return cls[_enum_key(value)]
        except KeyError:
            raise InvalidDataError(f"Invalid specialization: {value}") from None


class Weekday(str, enum.Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        try:
            return cls[_enum_key(value)]
        except KeyError:
            raise InvalidDataError(f"Invalid weekday: {value}") from None


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class BillStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    EXPORT = "EXPORT"
    PRINT = "PRINT"
    BULK_ACTION = "BULK_ACTION"


# --- Entities ---
# Field types are enforced on construction; domain rules (non-empty names,
# positive ids, mobile format, future dates) are checked by meditrack.validator
# when a record is handed to its registry.

class Person(BaseModel):
    id: int
    name: Optional[str] = None
    age: int = 0
    mobile_no: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class Doctor(BaseModel):
    id: int
    name: Optional[str] = None
    experience: int = 0
    specialization: Optional[Specialization] = None
    available_days: Set[Weekday] = Field(default_factory=set)
    available_from: Optional[time] = None
    available_to: Optional[time] = None
    created_at: datetime = Field(default_factory=datetime.now)

    def is_available_on(self, day: Weekday) -> bool:
        return day in (self.available_days or set())


class Patient(BaseModel):
    id: int
    person: Optional[Person] = None
    medical_record_number: Optional[str] = None
    assigned_doctor: Optional[Doctor] = None
    is_active: bool = True
    registration_date: datetime = Field(default_factory=datetime.now)

    @property
    def name(self) -> Optional[str]:
        return self.person.name if self.person else None


class Appointment(BaseModel):
    id: int
    patient: Optional[Patient] = None
    appointment_datetime: Optional[datetime] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None

    @property
    def doctor(self) -> Optional[Doctor]:
        """The doctor is whoever the patient is assigned to at the time of asking."""
        return self.patient.assigned_doctor if self.patient else None

    def end_time(self, duration_minutes: int) -> datetime:
        return self.appointment_datetime + timedelta(minutes=duration_minutes)


class Bill(BaseModel):
    id: int
    appointment: Optional[Appointment] = None
    amount: float = 0.0
    status: BillStatus = BillStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == BillStatus.PAID

    def pay(self, paid_at: Optional[datetime] = None) -> bool:
        """PENDING -> PAID. Returns False (state untouched) when already paid."""
        if self.status != BillStatus.PENDING:
            return False
        self.status = BillStatus.PAID
        self.payment_date = paid_at or datetime.now()
        return True

    def cancel_payment(self) -> bool:
        """PAID -> PENDING. Returns False (state untouched) when not paid."""
        if self.status != BillStatus.PAID:
            return False
        self.status = BillStatus.PENDING
        self.payment_date = None
        return True


class BillSummary(BaseModel):
    bills: List[Bill] = Field(default_factory=list)
    total_amount: float = 0.0
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    generated_at: datetime = Field(default_factory=datetime.now)

    def add_bill(self, bill: Bill) -> None:
        self.bills.append(bill)
        self.total_amount += bill.amount
        if bill.status == BillStatus.PAID:
            self.paid_amount += bill.amount
        elif bill.status == BillStatus.PENDING:
            self.pending_amount += bill.amount

    @property
    def bill_count(self) -> int:
        return len(self.bills)
