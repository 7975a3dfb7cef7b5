import logging
from typing import Dict, Iterable, List, Optional

from .exceptions import (
    AlreadyCancelledError, AppointmentNotFoundError, SlotConflictError,
    UnknownDoctorError, UnknownPatientError,
)
from .models import Appointment, AppointmentStatus, AppointmentView, Doctor, Patient
from .registry import DoctorRegistry, PatientRegistry
from .store import CollectionStore

logger = logging.getLogger(__name__)


def find_conflict(appointments: Iterable[Appointment], doctor_id: int,
                  date: str, time_slot: str) -> Optional[Appointment]:
    """Return the BOOKED appointment holding this doctor/date/slot, if any.

    Date and slot are compared as case-insensitive text; partially
    overlapping slots such as "10:00-10:20" and "10:10-10:30" do not clash.
    """
    for appt in appointments:
        if appt.occupies(doctor_id, date, time_slot):
            return appt
    return None


class AppointmentScheduler:
    """Books, cancels and lists appointments.

    Holds no state of its own: every call reloads the collections it needs.
    """

    def __init__(self, store: CollectionStore[Appointment],
                 patients: PatientRegistry, doctors: DoctorRegistry):
        self.store = store
        self.patients = patients
        self.doctors = doctors

    def book(self, patient_id: int, doctor_id: int, date: str, time_slot: str) -> int:
        """Book a slot with a doctor and return the new appointment id.

        Raises UnknownPatientError, UnknownDoctorError or SlotConflictError;
        nothing is written when the booking is rejected.
        """
        if self.patients.find_by_id(patient_id) is None:
            raise UnknownPatientError(patient_id)
        if self.doctors.find_by_id(doctor_id) is None:
            raise UnknownDoctorError(doctor_id)

        appointments = self.store.load_all()
        conflict = find_conflict(appointments, doctor_id, date, time_slot)
        if conflict is not None:
            logger.info("Rejected booking for doctor %d on %s %s; held by appointment %d",
                        doctor_id, date, time_slot, conflict.id)
            raise SlotConflictError(doctor_id, date, time_slot)

        appointment = Appointment(
            id=max((a.id for a in appointments), default=0) + 1,
            patient_id=patient_id,
            doctor_id=doctor_id,
            date=date,
            time_slot=time_slot,
            status=AppointmentStatus.BOOKED,
        )
        appointments.append(appointment)
        if not self.store.save_all(appointments):
            logger.warning("Appointment %d was booked but may not be persisted", appointment.id)
        return appointment.id

    def cancel(self, appointment_id: int) -> Appointment:
        """Move a BOOKED appointment to CANCELLED and return it."""
        appointments = self.store.load_all()
        target = next((a for a in appointments if a.id == appointment_id), None)
        if target is None:
            raise AppointmentNotFoundError(appointment_id)
        if target.status == AppointmentStatus.CANCELLED:
            raise AlreadyCancelledError(appointment_id)

        target.status = AppointmentStatus.CANCELLED
        if not self.store.save_all(appointments):
            logger.warning("Appointment %d was cancelled but may not be persisted", appointment_id)
        return target

    def list_appointments(self) -> List[AppointmentView]:
        appointments = self.store.load_all()
        patients: Dict[int, Patient] = {p.id: p for p in self.patients.list_all()}
        doctors: Dict[int, Doctor] = {d.id: d for d in self.doctors.list_all()}

        views = []
        for appt in appointments:
            patient = patients.get(appt.patient_id)
            doctor = doctors.get(appt.doctor_id)
            views.append(AppointmentView(
                appointment_id=appt.id,
                patient_id=appt.patient_id,
                patient_name=patient.name if patient else f"UnknownPatient({appt.patient_id})",
                doctor_id=appt.doctor_id,
                doctor_name=doctor.name if doctor else f"UnknownDoctor({appt.doctor_id})",
                date=appt.date,
                time_slot=appt.time_slot,
                status=appt.status,
            ))
        return views
