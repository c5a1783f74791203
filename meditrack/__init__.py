"""MediTrack: in-memory records for doctors, patients, appointments and bills."""

__version__ = "1.0.0"
