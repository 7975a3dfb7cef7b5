import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from .scheduling.store import DEFAULT_LOCK_TIMEOUT_SECONDS, MalformedLinePolicy

PATIENTS_FILE = "patients.txt"
DOCTORS_FILE = "doctors.txt"
APPOINTMENTS_FILE = "appointments.txt"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    data_dir: Path = Path(".")
    log_level: str = "WARNING"
    malformed_lines: MalformedLinePolicy = MalformedLinePolicy.SKIP
    lock_timeout: float = Field(DEFAULT_LOCK_TIMEOUT_SECONDS, gt=0)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}")
        return level

    @field_validator('malformed_lines', mode='before')
    @classmethod
    def normalize_policy(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def patients_path(self) -> Path:
        return self.data_dir / PATIENTS_FILE

    @property
    def doctors_path(self) -> Path:
        return self.data_dir / DOCTORS_FILE

    @property
    def appointments_path(self) -> Path:
        return self.data_dir / APPOINTMENTS_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 dotenv: bool = True) -> "Settings":
        """Build settings from HOSPITAL_* variables, reading .env first."""
        if environ is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        values = {}
        if environ.get("HOSPITAL_DATA_DIR"):
            values["data_dir"] = environ["HOSPITAL_DATA_DIR"]
        if environ.get("HOSPITAL_LOG_LEVEL"):
            values["log_level"] = environ["HOSPITAL_LOG_LEVEL"]
        if environ.get("HOSPITAL_MALFORMED_LINES"):
            values["malformed_lines"] = environ["HOSPITAL_MALFORMED_LINES"]
        if environ.get("HOSPITAL_LOCK_TIMEOUT"):
            values["lock_timeout"] = environ["HOSPITAL_LOCK_TIMEOUT"]
        return cls(**values)
