"""Tests for the pipe-delimited record codec."""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent))

from hospital.scheduling.codec import (
    APPOINTMENT_CODEC, DOCTOR_CODEC, PATIENT_CODEC, escape, unescape,
)
from hospital.scheduling.models import Appointment, AppointmentStatus, Doctor, Patient


class TestEscaping:

    def test_escape_special_characters(self):
        assert escape("a|b\\c\nd\re") == "a\\pb\\\\c\\nd\\re"

    def test_plain_text_untouched(self):
        assert escape("Dr. Jane Smith") == "Dr. Jane Smith"
        assert unescape("Dr. Jane Smith") == "Dr. Jane Smith"

    def test_escaped_backslash_before_letter_is_not_a_newline(self):
        # A literal backslash followed by "n" must survive the trip
        original = "C:\\new"
        assert unescape(escape(original)) == original
        assert "\n" not in unescape(escape(original))

    def test_unknown_sequence_kept(self):
        assert unescape("a\\xb") == "a\\xb"
        assert unescape("trailing\\") == "trailing\\"


class TestPatientCodec:

    def test_encode(self):
        patient = Patient(id=1, name="Ann Lee", age=34, gender="F", phone="555-0100")
        assert PATIENT_CODEC.encode(patient) == "1|Ann Lee|34|F|555-0100"

    def test_round_trip_with_awkward_characters(self):
        patient = Patient(id=7, name="Ann | Lee \\ Jr.\nline two\r", age=34,
                          gender="F", phone="+1|555")
        line = PATIENT_CODEC.encode(patient)
        assert "\n" not in line
        assert line.count("|") == 4
        assert PATIENT_CODEC.decode(line) == patient

    def test_empty_string_fields(self):
        patient = Patient(id=3, name="", age=0, gender="", phone="")
        assert PATIENT_CODEC.decode(PATIENT_CODEC.encode(patient)) == patient

    @pytest.mark.parametrize("line", [
        "1|Ann|34|F",
        "x|Ann|34|F|555",
        "1|Ann|thirty|F|555",
        "0|Ann|34|F|555",
        "-2|Ann|34|F|555",
        "",
    ])
    def test_malformed_lines(self, line):
        assert PATIENT_CODEC.decode(line) is None

    def test_extra_fields_ignored(self):
        patient = PATIENT_CODEC.decode("1|Ann|34|F|555|unexpected")
        assert patient == Patient(id=1, name="Ann", age=34, gender="F", phone="555")


class TestDoctorCodec:

    def test_round_trip(self):
        doctor = Doctor(id=2, name="Dr. Grey", specialization="Surgery | General")
        assert DOCTOR_CODEC.encode(doctor) == "2|Dr. Grey|Surgery \\p General"
        assert DOCTOR_CODEC.decode(DOCTOR_CODEC.encode(doctor)) == doctor

    def test_missing_specialization(self):
        assert DOCTOR_CODEC.decode("2|Dr. Grey") is None


class TestAppointmentCodec:

    def test_encode(self):
        appt = Appointment(id=1, patient_id=2, doctor_id=3, date="2025-11-24",
                           time_slot="10:00-10:15", status=AppointmentStatus.BOOKED)
        assert APPOINTMENT_CODEC.encode(appt) == "1|2|3|2025-11-24|10:00-10:15|BOOKED"

    def test_status_is_case_insensitive(self):
        appt = APPOINTMENT_CODEC.decode("4|1|1|2025-11-24|10:00-10:15|cancelled")
        assert appt is not None
        assert appt.status == AppointmentStatus.CANCELLED

    def test_unknown_status_is_malformed(self):
        assert APPOINTMENT_CODEC.decode("4|1|1|2025-11-24|10:00-10:15|PENDING") is None

    def test_non_numeric_reference_is_malformed(self):
        assert APPOINTMENT_CODEC.decode("4|one|1|2025-11-24|10:00-10:15|BOOKED") is None
