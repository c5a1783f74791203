# meditrack/services/doctor_service.py
from collections import Counter
from typing import Dict, List, Optional

from .. import validator
from ..models import Doctor, Specialization, Weekday
from .base import BaseRegistry


class DoctorRegistry(BaseRegistry[Doctor]):
    entity_name = "doctor"
    audit_category = "DOCTORS"

    def add(self, doctor: Doctor) -> None:
        self._admit(doctor, validator.validate_doctor)

    def remove(self, doctor_id: int) -> bool:
        return self._remove(doctor_id)

    def update(self, doctor_id: int, updated_doctor: Doctor) -> bool:
        return self._replace(doctor_id, updated_doctor)

    def find_by_name(self, name: str) -> List[Doctor]:
        key = (name or "").casefold()
        return [d for d in self._records if (d.name or "").casefold() == key]

    def find_by_specialization(self, specialization: Specialization) -> List[Doctor]:
        return [d for d in self._records if d.specialization == specialization]

    def find_by_available_day(self, day: Weekday) -> List[Doctor]:
        return [d for d in self._records if d.is_available_on(day)]

    def average_experience(self) -> Optional[float]:
        """Mean years of experience, or None for an empty registry."""
        if not self._records:
            return None
        return sum(d.experience for d in self._records) / len(self._records)

    def group_by_specialization(self) -> Dict[Specialization, List[Doctor]]:
        groups: Dict[Specialization, List[Doctor]] = {}
        for doctor in self._records:
            groups.setdefault(doctor.specialization, []).append(doctor)
        return groups

    def count_by_specialization(self) -> Dict[Specialization, int]:
        return dict(Counter(d.specialization for d in self._records))

    def top_n_by_experience(self, n: int) -> List[Doctor]:
        # sorted() is stable, so equal experience keeps insertion order
        if n <= 0:
            return []
        return sorted(self._records, key=lambda d: d.experience, reverse=True)[:n]
