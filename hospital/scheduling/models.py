from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class AppointmentStatus(str, Enum):
    BOOKED = "BOOKED"
    CANCELLED = "CANCELLED"


class Patient(BaseModel):
    id: int = Field(..., gt=0)
    name: str
    age: int
    gender: str
    phone: str


class Doctor(BaseModel):
    id: int = Field(..., gt=0)
    name: str
    specialization: str


class Appointment(BaseModel):
    id: int = Field(..., gt=0)
    patient_id: int
    doctor_id: int
    date: str = Field(..., description="Opaque date text, e.g. 2025-11-24")
    time_slot: str = Field(..., description="Opaque slot text, e.g. 10:00-10:15")
    status: AppointmentStatus = AppointmentStatus.BOOKED

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        # Status text on disk is matched case-insensitively
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def is_booked(self) -> bool:
        return self.status == AppointmentStatus.BOOKED

    def occupies(self, doctor_id: int, date: str, time_slot: str) -> bool:
        """Return True if this appointment holds the doctor's slot on that date."""
        return (
            self.is_booked()
            and self.doctor_id == doctor_id
            and self.date.lower() == date.lower()
            and self.time_slot.lower() == time_slot.lower()
        )


class AppointmentView(BaseModel):
    """An appointment joined with the names of the people it references."""
    appointment_id: int
    patient_id: int
    patient_name: str
    doctor_id: int
    doctor_name: str
    date: str
    time_slot: str
    status: AppointmentStatus
