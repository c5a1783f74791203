# tests/conftest.py
from datetime import datetime, timedelta

import pytest

from meditrack.config import Settings
from meditrack.context import create_context

from factories import make_doctor, make_patient


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="testing",
        enforce_unique_ids=True,
        default_appointment_duration_minutes=30,
        default_bill_amount=500.0,
        report_output_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def ctx(settings):
    return create_context(settings)


@pytest.fixture
def doctor():
    return make_doctor()


@pytest.fixture
def patient(doctor):
    return make_patient(doctor=doctor)


@pytest.fixture
def tomorrow():
    return (datetime.now() + timedelta(days=1)).replace(second=0, microsecond=0)
