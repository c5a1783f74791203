# meditrack/services/appointment_service.py
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

import structlog

from .. import validator
from ..compliance_logger import ComplianceLogger
from ..exceptions import AppointmentNotFoundError, InvalidDataError
from ..models import Appointment, AppointmentStatus, Doctor, Patient
from .base import BaseRegistry

logger = structlog.get_logger(__name__)

DEFAULT_DURATION_MINUTES = 30


def _doctor_id(appointment: Appointment) -> Optional[int]:
    doctor = appointment.doctor
    return doctor.id if doctor is not None else None


class AppointmentLedger(BaseRegistry[Appointment]):
    """Appointments in booking order.

    Appointments are never deleted; cancellation is a status change.
    SCHEDULED is the initial state, COMPLETED and CANCELED are terminal.
    """

    entity_name = "appointment"
    audit_category = "APPOINTMENTS"

    def __init__(
        self,
        enforce_unique_ids: bool = True,
        audit: Optional[ComplianceLogger] = None,
        default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(enforce_unique_ids=enforce_unique_ids, audit=audit)
        self.default_duration_minutes = default_duration_minutes
        self._clock = clock

    def _require(self, appointment_id: int, message: str) -> Appointment:
        appointment = self.find_by_id(appointment_id)
        if appointment is None:
            logger.warning("appointment_not_found", appointment_id=appointment_id)
            raise AppointmentNotFoundError(message)
        return appointment

    def _set_status(self, appointment: Appointment, status: AppointmentStatus) -> None:
        previous = appointment.status
        appointment.status = status
        logger.info(
            "appointment_status_changed",
            appointment_id=appointment.id,
            previous=previous.value,
            status=status.value,
        )
        self.audit.log_event(
            action="UPDATE_APPOINTMENT",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=appointment.id,
            details=f"{previous.value} -> {status.value}",
        )

    # --- mutations ---

    def book(self, appointment: Appointment) -> None:
        self._admit(appointment, lambda a: validator.validate_appointment(a, now=self._clock()))

    def cancel(self, appointment_id: int) -> Appointment:
        """Unconditional: canceling twice (or a completed visit) just rewrites CANCELED."""
        appointment = self._require(appointment_id, f"Appointment not found with ID: {appointment_id}")
        self._set_status(appointment, AppointmentStatus.CANCELED)
        return appointment

    def complete(self, appointment_id: int) -> Appointment:
        appointment = self._require(appointment_id, f"Appointment not found with ID: {appointment_id}")
        if appointment.status == AppointmentStatus.CANCELED:
            raise InvalidDataError(f"Cannot complete canceled appointment {appointment_id}")
        self._set_status(appointment, AppointmentStatus.COMPLETED)
        return appointment

    def update(self, appointment_id: int, new_datetime: datetime, new_notes: Optional[str]) -> Appointment:
        """Overwrites date-time and notes whatever the current status."""
        appointment = self._require(
            appointment_id, f"Cannot update. Appointment not found with ID: {appointment_id}"
        )
        if new_datetime is None:
            raise InvalidDataError(f"Appointment {appointment_id} needs a date and time")
        appointment.appointment_datetime = new_datetime
        appointment.notes = new_notes
        logger.info("appointment_updated", appointment_id=appointment_id, appointment_datetime=str(new_datetime))
        self.audit.log_event(
            action="UPDATE_APPOINTMENT",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=appointment_id,
            details="Rescheduled",
        )
        return appointment

    # --- queries ---

    def find_by_name(self, patient_name: str) -> List[Appointment]:
        key = (patient_name or "").casefold()
        return [
            a for a in self._records
            if a.patient is not None and (a.patient.name or "").casefold() == key
        ]

    def find_by_patient(self, patient: Patient) -> List[Appointment]:
        return [a for a in self._records if a.patient is not None and a.patient.id == patient.id]

    def find_by_doctor(self, doctor: Doctor) -> List[Appointment]:
        return [a for a in self._records if _doctor_id(a) == doctor.id]

    def find_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        return [a for a in self._records if a.status == status]

    def find_by_date(self, day: date) -> List[Appointment]:
        return [
            a for a in self._records
            if a.appointment_datetime is not None and a.appointment_datetime.date() == day
        ]

    def upcoming(self) -> List[Appointment]:
        """Scheduled appointments still ahead of the clock, soonest first."""
        now = self._clock()
        pending = [
            a for a in self._records
            if a.status == AppointmentStatus.SCHEDULED and validator.is_future_date(a.appointment_datetime, now)
        ]
        return sorted(pending, key=lambda a: a.appointment_datetime)

    def count_by_status(self) -> Dict[AppointmentStatus, int]:
        return dict(Counter(a.status for a in self._records))

    def group_by_date(self) -> Dict[date, List[Appointment]]:
        groups: Dict[date, List[Appointment]] = {}
        for appointment in self._records:
            groups.setdefault(appointment.appointment_datetime.date(), []).append(appointment)
        return groups

    def statistics(self) -> Dict[str, int]:
        counts = Counter(a.status for a in self._records)
        return {
            "total": len(self._records),
            "scheduled": counts[AppointmentStatus.SCHEDULED],
            "completed": counts[AppointmentStatus.COMPLETED],
            "canceled": counts[AppointmentStatus.CANCELED],
        }

    def has_conflicting_appointment(
        self, doctor: Doctor, start: datetime, duration_minutes: Optional[int] = None
    ) -> bool:
        """Whether ``doctor`` already has a scheduled visit overlapping [start, start + duration).

        Existing visits are assumed to last the same ``duration_minutes``;
        back-to-back visits do not conflict.
        """
        if duration_minutes is None:
            duration_minutes = self.default_duration_minutes
        end = start + timedelta(minutes=duration_minutes)
        for appointment in self._records:
            if appointment.status != AppointmentStatus.SCHEDULED or _doctor_id(appointment) != doctor.id:
                continue
            existing_start = appointment.appointment_datetime
            existing_end = appointment.end_time(duration_minutes)
            # Overlap: (StartA < EndB) AND (EndA > StartB)
            if start < existing_end and end > existing_start:
                return True
        return False
