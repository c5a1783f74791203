# meditrack/exceptions.py


class MediTrackError(Exception):
    """Base class for every error raised by the record layer."""


class InvalidDataError(MediTrackError):
    """A record failed validation and was not stored."""


class RecordNotFoundError(MediTrackError):
    """An operation required a record id that is not registered."""


class AppointmentNotFoundError(RecordNotFoundError):
    pass


class BillNotFoundError(RecordNotFoundError):
    pass


class PatientNotFoundError(RecordNotFoundError):
    pass


class DoctorNotFoundError(RecordNotFoundError):
    pass
