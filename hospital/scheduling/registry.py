import logging
from typing import Generic, List, Optional, TypeVar

from .models import Doctor, Patient
from .store import CollectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """Create-only record keeping on top of a collection store."""

    def __init__(self, store: CollectionStore[T]):
        self.store = store

    def _append(self, entity: T) -> bool:
        records = self.store.load_all()
        records.append(entity)
        return self.store.save_all(records)

    def list_all(self) -> List[T]:
        return self.store.load_all()

    def find_by_id(self, entity_id: int) -> Optional[T]:
        return self.store.find_by_id(entity_id)


class PatientRegistry(Registry[Patient]):

    def add(self, name: str, age: int, gender: str, phone: str) -> int:
        """Register a patient and return the id assigned to them."""
        patient = Patient(
            id=self.store.next_id(),
            name=name,
            age=age,
            gender=gender,
            phone=phone,
        )
        if not self._append(patient):
            logger.warning("Patient %d was assigned but may not be persisted", patient.id)
        return patient.id


class DoctorRegistry(Registry[Doctor]):

    def add(self, name: str, specialization: str) -> int:
        """Register a doctor and return the id assigned to them."""
        doctor = Doctor(
            id=self.store.next_id(),
            name=name,
            specialization=specialization,
        )
        if not self._append(doctor):
            logger.warning("Doctor %d was assigned but may not be persisted", doctor.id)
        return doctor.id
