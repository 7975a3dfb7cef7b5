"""Pipe-delimited line codec for clinic records.

Each record is one line of fields joined by ``|``. String fields are escaped
so they can never contain a raw delimiter or line break::

    \\  ->  \\\\
    |   ->  \\p
    LF  ->  \\n
    CR  ->  \\r

Integer fields are written as plain decimal digits.
"""

import re
from enum import Enum
from typing import Generic, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .models import Appointment, Doctor, Patient

DELIMITER = "|"

_ESCAPES = {
    "\\": "\\\\",
    DELIMITER: "\\p",
    "\n": "\\n",
    "\r": "\\r",
}
_UNESCAPES = {"\\": "\\", "p": DELIMITER, "n": "\n", "r": "\r"}
_ESCAPE_PATTERN = re.compile(r"[\\|\n\r]")
_UNESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

T = TypeVar("T", bound=BaseModel)


def escape(text: str) -> str:
    """Escape backslashes, delimiters and line breaks in a string field."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape(text: str) -> str:
    """Reverse :func:`escape`.

    Works in a single left-to-right pass so ``\\\\n`` decodes to a backslash
    followed by ``n``, not to a backslash and a newline. Unknown sequences
    are left untouched.
    """
    def _replace(match: "re.Match[str]") -> str:
        return _UNESCAPES.get(match.group(1), match.group(0))

    return _UNESCAPE_PATTERN.sub(_replace, text)


class RecordCodec(Generic[T]):
    """Encodes one model type to and from a single delimited line."""

    def __init__(self, model: Type[T], fields: Sequence[str]):
        self.model = model
        self.fields = tuple(fields)
        self._integer_fields = {
            name for name in self.fields
            if model.model_fields[name].annotation is int
        }

    @property
    def arity(self) -> int:
        return len(self.fields)

    def encode(self, entity: T) -> str:
        parts = []
        for name in self.fields:
            value = getattr(entity, name)
            if name in self._integer_fields:
                parts.append(str(int(value)))
            elif isinstance(value, Enum):
                parts.append(escape(value.value))
            else:
                parts.append(escape(value))
        return DELIMITER.join(parts)

    def decode(self, line: str) -> Optional[T]:
        """Decode a line, returning None if it is malformed."""
        parts = line.split(DELIMITER)
        if len(parts) < self.arity:
            return None

        data = {}
        for name, raw in zip(self.fields, parts):
            if name in self._integer_fields:
                raw = raw.strip()
                if not _INTEGER_PATTERN.fullmatch(raw):
                    return None
                data[name] = int(raw)
            else:
                data[name] = unescape(raw)

        try:
            return self.model(**data)
        except ValidationError:
            return None


PATIENT_CODEC = RecordCodec(Patient, ["id", "name", "age", "gender", "phone"])
DOCTOR_CODEC = RecordCodec(Doctor, ["id", "name", "specialization"])
APPOINTMENT_CODEC = RecordCodec(
    Appointment, ["id", "patient_id", "doctor_id", "date", "time_slot", "status"]
)
