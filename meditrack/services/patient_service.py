# meditrack/services/patient_service.py
from typing import Dict, List

import structlog

from .. import validator
from ..models import Doctor, Patient
from .base import BaseRegistry

logger = structlog.get_logger(__name__)


class PatientRegistry(BaseRegistry[Patient]):
    entity_name = "patient"
    audit_category = "PATIENTS"

    def add(self, patient: Patient) -> None:
        self._admit(patient, validator.validate_patient)

    def remove(self, patient_id: int) -> bool:
        return self._remove(patient_id)

    def update(self, patient_id: int, updated_patient: Patient) -> bool:
        return self._replace(patient_id, updated_patient)

    def find_by_name(self, name: str) -> List[Patient]:
        key = (name or "").casefold()
        return [p for p in self._records if (p.name or "").casefold() == key]

    def assign_doctor(self, patient_id: int, doctor: Doctor) -> bool:
        """Point the patient at ``doctor``. False when the patient is unknown.

        The doctor is not looked up in any registry.
        """
        patient = self.find_by_id(patient_id)
        if patient is None:
            logger.info("patient_assign_skipped", patient_id=patient_id, reason="not found")
            return False
        patient.assigned_doctor = doctor
        logger.info("patient_doctor_assigned", patient_id=patient_id, doctor_id=getattr(doctor, "id", None))
        self.audit.log_event(
            action="ASSIGN_DOCTOR",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=patient_id,
            details=f"Assigned doctor {getattr(doctor, 'id', None)}",
        )
        return True

    def _set_active(self, patient_id: int, active: bool) -> bool:
        patient = self.find_by_id(patient_id)
        if patient is None:
            return False
        patient.is_active = active
        self.audit.log_event(
            action="UPDATE_PATIENT",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=patient_id,
            details="Activated" if active else "Deactivated",
        )
        return True

    def activate(self, patient_id: int) -> bool:
        return self._set_active(patient_id, True)

    def deactivate(self, patient_id: int) -> bool:
        return self._set_active(patient_id, False)

    def find_active(self) -> List[Patient]:
        return [p for p in self._records if p.is_active]

    def statistics(self) -> Dict[str, int]:
        total = len(self._records)
        active = sum(1 for p in self._records if p.is_active)
        return {"total": total, "active": active, "inactive": total - active}

    def find_by_age_range(self, min_age: int, max_age: int) -> List[Patient]:
        """Inclusive on both ends."""
        return [
            p for p in self._records
            if p.person is not None and min_age <= p.person.age <= max_age
        ]
