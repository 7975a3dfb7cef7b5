"""Console menu for the hospital appointment system."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .config import Settings
from .logging_config import setup_logging
from .scheduling.exceptions import (
    AlreadyCancelledError, AppointmentNotFoundError, ClinicError, InvalidInputError,
    SlotConflictError, UnknownDoctorError, UnknownPatientError,
)
from .scheduling.models import AppointmentView, Doctor, Patient
from .scheduling.service import ClinicService

logger = logging.getLogger(__name__)

MENU = """========================================
   HOSPITAL APPOINTMENT MANAGEMENT
========================================
1. Add Patient
2. List Patients
3. Add Doctor
4. List Doctors
5. Book Appointment
6. List Appointments
7. Cancel Appointment
0. Exit
========================================"""


class EndOfInput(Exception):
    """Raised when the input stream is exhausted mid-session."""


def format_patient(patient: Patient) -> str:
    return (f"ID: {patient.id} | Name: {patient.name} | Age: {patient.age} | "
            f"Gender: {patient.gender} | Phone: {patient.phone}")


def format_doctor(doctor: Doctor) -> str:
    return f"ID: {doctor.id} | Name: {doctor.name} | Specialization: {doctor.specialization}"


def format_appointment(view: AppointmentView) -> str:
    return (f"ApptID: {view.appointment_id} | Patient: {view.patient_name} (ID:{view.patient_id}) | "
            f"Doctor: {view.doctor_name} (ID:{view.doctor_id}) | Date: {view.date} | "
            f"Time: {view.time_slot} | Status: {view.status.value}")


class ConsoleApp:
    """Blocking read-eval-print loop over a ClinicService."""

    def __init__(self, service: ClinicService,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.service = service
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.actions = {
            "1": self.add_patient,
            "2": self.list_patients,
            "3": self.add_doctor,
            "4": self.list_doctors,
            "5": self.book_appointment,
            "6": self.list_appointments,
            "7": self.cancel_appointment,
        }

    def say(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def prompt(self, label: str) -> str:
        self.stdout.write(label)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EndOfInput()
        return line.strip()

    def prompt_int(self, label: str, field: str) -> int:
        raw = self.prompt(label)
        try:
            return int(raw)
        except ValueError:
            raise InvalidInputError(field, raw) from None

    def run(self) -> None:
        while True:
            self.say(MENU)
            try:
                choice = self.prompt("Enter choice: ")
                if choice == "0":
                    self.say("Exiting system. Goodbye.")
                    return
                action = self.actions.get(choice)
                if action is None:
                    self.say("Invalid choice. Please enter a valid option (0-7).")
                else:
                    action()
            except EndOfInput:
                self.say()
                self.say("Exiting system. Goodbye.")
                return
            except ClinicError as e:
                logger.error("Menu action %s failed: %s", choice, e)
                self.say(f"Error: {e}. Please check the data files.")
            self.say()

    def add_patient(self) -> None:
        name = self.prompt("Enter patient name: ")
        try:
            age = self.prompt_int("Enter age: ", "age")
        except InvalidInputError:
            self.say("Invalid age. Patient not added.")
            return
        gender = self.prompt("Enter gender: ")
        phone = self.prompt("Enter phone number: ")

        patient_id = self.service.add_patient(name, age, gender, phone)
        self.say(f"Patient added successfully with ID: {patient_id}")

    def list_patients(self) -> None:
        patients = self.service.list_patients()
        if not patients:
            self.say("No patients found.")
            return
        self.say("---- Patient List ----")
        for patient in patients:
            self.say(format_patient(patient))

    def add_doctor(self) -> None:
        name = self.prompt("Enter doctor name: ")
        specialization = self.prompt("Enter specialization: ")

        doctor_id = self.service.add_doctor(name, specialization)
        self.say(f"Doctor added successfully with ID: {doctor_id}")

    def list_doctors(self) -> None:
        doctors = self.service.list_doctors()
        if not doctors:
            self.say("No doctors found.")
            return
        self.say("---- Doctor List ----")
        for doctor in doctors:
            self.say(format_doctor(doctor))

    def book_appointment(self) -> None:
        try:
            patient_id = self.prompt_int("Enter patient ID: ", "patient_id")
            # Reject an unknown patient before asking for anything else
            if self.service.find_patient(patient_id) is None:
                raise UnknownPatientError(patient_id)
            doctor_id = self.prompt_int("Enter doctor ID: ", "doctor_id")
            if self.service.find_doctor(doctor_id) is None:
                raise UnknownDoctorError(doctor_id)
            date = self.prompt("Enter appointment date (e.g., 2025-11-24): ")
            time_slot = self.prompt("Enter time slot (e.g., 10:00-10:15): ")

            appointment_id = self.service.book_appointment(patient_id, doctor_id, date, time_slot)
        except InvalidInputError:
            self.say("Invalid numeric input. Appointment not booked.")
        except UnknownPatientError:
            self.say("Invalid patient ID.")
        except UnknownDoctorError:
            self.say("Invalid doctor ID.")
        except SlotConflictError:
            self.say("Error: This time slot is already booked for the selected doctor.")
        else:
            self.say(f"Appointment booked successfully with ID: {appointment_id}")

    def list_appointments(self) -> None:
        views = self.service.list_appointments()
        if not views:
            self.say("No appointments found.")
            return
        self.say("---- Appointment List ----")
        for view in views:
            self.say(format_appointment(view))

    def cancel_appointment(self) -> None:
        try:
            appointment_id = self.prompt_int("Enter appointment ID to cancel: ", "appointment_id")
            self.service.cancel_appointment(appointment_id)
        except InvalidInputError:
            self.say("Invalid appointment ID.")
        except AppointmentNotFoundError:
            self.say("Appointment not found.")
        except AlreadyCancelledError:
            self.say("Appointment is already cancelled.")
        else:
            self.say("Appointment cancelled successfully.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hospital-appointments",
        description="Console appointment book for patients, doctors and appointments.",
    )
    parser.add_argument("--data-dir", help="Directory holding patients.txt, doctors.txt and appointments.txt")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.data_dir:
        settings = settings.model_copy(update={"data_dir": Path(args.data_dir)})
    setup_logging(settings.log_level)
    logger.debug("Using data directory %s", settings.data_dir)

    service = ClinicService.from_settings(settings)
    ConsoleApp(service).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
