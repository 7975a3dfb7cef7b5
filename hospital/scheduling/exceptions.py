"""Error kinds raised by the clinic core and the console driver."""

from typing import Optional


class ClinicError(Exception):
    """Base class for all user-facing clinic failures."""


class UnknownPatientError(ClinicError):
    def __init__(self, patient_id: int):
        self.patient_id = patient_id
        super().__init__(f"Patient {patient_id} does not exist")


class UnknownDoctorError(ClinicError):
    def __init__(self, doctor_id: int):
        self.doctor_id = doctor_id
        super().__init__(f"Doctor {doctor_id} does not exist")


class SlotConflictError(ClinicError):
    def __init__(self, doctor_id: int, date: str, time_slot: str):
        self.doctor_id = doctor_id
        self.date = date
        self.time_slot = time_slot
        super().__init__(
            f"Doctor {doctor_id} is already booked on {date} at {time_slot}"
        )


class AppointmentNotFoundError(ClinicError):
    def __init__(self, appointment_id: int):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} not found")


class AlreadyCancelledError(ClinicError):
    def __init__(self, appointment_id: int):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} is already cancelled")


class InvalidInputError(ClinicError):
    """Raised by the console driver when typed input cannot be parsed."""

    def __init__(self, field: str, raw_value: str):
        self.field = field
        self.raw_value = raw_value
        super().__init__(f"Invalid value for {field}: {raw_value!r}")


class StorageUnavailableError(ClinicError):
    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"Storage {path} is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedRecordError(ClinicError):
    def __init__(self, path: str, line_number: int, line: str):
        self.path = path
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed record in {path} at line {line_number}")
