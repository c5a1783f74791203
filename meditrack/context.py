# meditrack/context.py
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .compliance_logger import ComplianceLogger
from .config import Settings, get_settings
from .services.appointment_service import AppointmentLedger
from .services.billing_service import BillingLedger
from .services.doctor_service import DoctorRegistry
from .services.patient_service import PatientRegistry


@dataclass
class ClinicContext:
    """Everything one running MediTrack process owns. Pass it to whatever needs records."""

    settings: Settings
    doctors: DoctorRegistry
    patients: PatientRegistry
    appointments: AppointmentLedger
    bills: BillingLedger
    audit: ComplianceLogger


def create_context(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ClinicContext:
    settings = settings or get_settings()
    audit = ComplianceLogger(institution_id=settings.institution_id or "MEDITRACK-CLINIC")
    unique = settings.enforce_unique_ids
    return ClinicContext(
        settings=settings,
        doctors=DoctorRegistry(enforce_unique_ids=unique, audit=audit),
        patients=PatientRegistry(enforce_unique_ids=unique, audit=audit),
        appointments=AppointmentLedger(
            enforce_unique_ids=unique,
            audit=audit,
            default_duration_minutes=settings.default_appointment_duration_minutes,
            clock=clock,
        ),
        bills=BillingLedger(enforce_unique_ids=unique, audit=audit, clock=clock),
        audit=audit,
    )
