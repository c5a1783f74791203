# tests/test_doctor_service.py
import pytest

from meditrack.exceptions import InvalidDataError
from meditrack.models import Specialization, Weekday
from meditrack.services.doctor_service import DoctorRegistry

from factories import make_doctor


@pytest.fixture
def registry():
    reg = DoctorRegistry()
    reg.add(make_doctor(1, "Dr. Heart", 15, Specialization.CARDIOLOGY, {Weekday.MONDAY}))
    reg.add(make_doctor(2, "Dr. Brain", 12, Specialization.NEUROLOGY, {Weekday.TUESDAY}))
    reg.add(make_doctor(3, "Dr. Kids", 8, Specialization.PEDIATRICS, {Weekday.MONDAY, Weekday.FRIDAY}))
    reg.add(make_doctor(4, "Dr. Valve", 12, Specialization.CARDIOLOGY, {Weekday.FRIDAY}))
    return reg


def test_add_keeps_insertion_order(registry):
    assert [d.id for d in registry.get_all()] == [1, 2, 3, 4]
    assert len(registry) == 4


def test_get_all_is_a_snapshot(registry):
    snapshot = registry.get_all()
    snapshot.clear()
    assert len(registry.get_all()) == 4


def test_invalid_doctor_is_rejected_and_not_stored():
    reg = DoctorRegistry()
    with pytest.raises(InvalidDataError, match="Invalid doctor data"):
        reg.add(make_doctor(experience=0))
    assert reg.get_all() == []


def test_duplicate_id_rejected_by_default(registry):
    with pytest.raises(InvalidDataError, match="Doctor with ID 1 already exists"):
        registry.add(make_doctor(1, "Dr. Twin"))
    assert len(registry) == 4


def test_duplicate_id_allowed_when_uniqueness_is_off():
    reg = DoctorRegistry(enforce_unique_ids=False)
    first = make_doctor(1, "Dr. First")
    reg.add(first)
    reg.add(make_doctor(1, "Dr. Second"))
    assert len(reg) == 2
    assert reg.find_by_id(1) is first


def test_find_by_id_and_exists(registry):
    assert registry.find_by_id(3).name == "Dr. Kids"
    assert registry.find_by_id(99) is None
    assert registry.exists(2)
    assert not registry.exists(99)


def test_find_by_name_ignores_case(registry):
    assert [d.id for d in registry.find_by_name("dr. HEART")] == [1]
    assert registry.find_by_name("Dr. Nobody") == []


def test_find_by_specialization_and_day(registry):
    assert [d.id for d in registry.find_by_specialization(Specialization.CARDIOLOGY)] == [1, 4]
    assert [d.id for d in registry.find_by_available_day(Weekday.FRIDAY)] == [3, 4]
    assert registry.find_by_available_day(Weekday.SUNDAY) == []


def test_remove_and_update(registry):
    assert registry.remove(2) is True
    assert registry.remove(2) is False
    assert [d.id for d in registry.get_all()] == [1, 3, 4]

    replacement = make_doctor(3, "Dr. Kids Senior", 9, Specialization.PEDIATRICS)
    assert registry.update(3, replacement) is True
    assert registry.get_all()[1] is replacement
    assert registry.update(42, replacement) is False


def test_update_cannot_take_an_existing_id(registry):
    with pytest.raises(InvalidDataError, match="already exists"):
        registry.update(3, make_doctor(1, "Dr. Clash"))


def test_average_experience(registry):
    assert registry.average_experience() == pytest.approx((15 + 12 + 8 + 12) / 4)
    assert DoctorRegistry().average_experience() is None


def test_group_and_count_by_specialization(registry):
    groups = registry.group_by_specialization()
    assert [d.id for d in groups[Specialization.CARDIOLOGY]] == [1, 4]
    assert list(groups) == [Specialization.CARDIOLOGY, Specialization.NEUROLOGY, Specialization.PEDIATRICS]
    assert registry.count_by_specialization() == {
        Specialization.CARDIOLOGY: 2,
        Specialization.NEUROLOGY: 1,
        Specialization.PEDIATRICS: 1,
    }


def test_top_n_by_experience_is_stable(registry):
    assert [d.id for d in registry.top_n_by_experience(3)] == [1, 2, 4]
    assert [d.id for d in registry.top_n_by_experience(10)] == [1, 2, 4, 3]
    assert registry.top_n_by_experience(0) == []
    assert registry.top_n_by_experience(-1) == []
