from typing import List, Optional

from ..config import Settings
from .codec import APPOINTMENT_CODEC, DOCTOR_CODEC, PATIENT_CODEC
from .logic import AppointmentScheduler
from .models import Appointment, AppointmentView, Doctor, Patient
from .registry import DoctorRegistry, PatientRegistry
from .store import CollectionStore


class ClinicService:
    """The operations the console driver calls into.

    Arguments arrive already typed; parsing raw input is the caller's job.
    """

    def __init__(self, patient_store: CollectionStore[Patient],
                 doctor_store: CollectionStore[Doctor],
                 appointment_store: CollectionStore[Appointment]):
        self.patients = PatientRegistry(patient_store)
        self.doctors = DoctorRegistry(doctor_store)
        self.scheduler = AppointmentScheduler(appointment_store, self.patients, self.doctors)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClinicService":
        """Wire the three stores from settings, creating empty files if absent."""
        settings = settings or Settings.from_env()
        stores = [
            CollectionStore(path, codec,
                            malformed_policy=settings.malformed_lines,
                            lock_timeout=settings.lock_timeout)
            for path, codec in (
                (settings.patients_path, PATIENT_CODEC),
                (settings.doctors_path, DOCTOR_CODEC),
                (settings.appointments_path, APPOINTMENT_CODEC),
            )
        ]
        for store in stores:
            store.ensure_exists()
        return cls(*stores)

    def add_patient(self, name: str, age: int, gender: str, phone: str) -> int:
        return self.patients.add(name, age, gender, phone)

    def list_patients(self) -> List[Patient]:
        return self.patients.list_all()

    def find_patient(self, patient_id: int) -> Optional[Patient]:
        return self.patients.find_by_id(patient_id)

    def add_doctor(self, name: str, specialization: str) -> int:
        return self.doctors.add(name, specialization)

    def list_doctors(self) -> List[Doctor]:
        return self.doctors.list_all()

    def find_doctor(self, doctor_id: int) -> Optional[Doctor]:
        return self.doctors.find_by_id(doctor_id)

    def book_appointment(self, patient_id: int, doctor_id: int, date: str, time_slot: str) -> int:
        return self.scheduler.book(patient_id, doctor_id, date, time_slot)

    def list_appointments(self) -> List[AppointmentView]:
        return self.scheduler.list_appointments()

    def cancel_appointment(self, appointment_id: int) -> Appointment:
        return self.scheduler.cancel(appointment_id)
