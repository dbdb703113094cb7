"""
Equipment service — CRUD and search over equipment metadata.
"""

from __future__ import annotations

from datetime import date

from backend_equipment.core.exceptions import ResourceNotFoundError
from backend_equipment.database.models import EquipmentRecord
from backend_equipment.database.repositories import EquipmentRepository


def _not_found(equipment_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError(f"Equipment not found with id: {equipment_id}")


class EquipmentService:
    def __init__(self, repository: EquipmentRepository | None = None) -> None:
        self._repo = repository or EquipmentRepository()

    def list_equipment(self) -> list[EquipmentRecord]:
        return self._repo.list_all()

    def get_equipment(self, equipment_id: int) -> EquipmentRecord:
        record = self._repo.get(equipment_id)
        if record is None:
            raise _not_found(equipment_id)
        return record

    def create_equipment(
        self,
        name: str,
        type: str,
        *,
        location: str | None = None,
        install_date: date | None = None,
        notes: str | None = None,
    ) -> EquipmentRecord:
        return self._repo.create(
            name, type, location=location, install_date=install_date, notes=notes
        )

    def update_equipment(
        self,
        equipment_id: int,
        name: str,
        type: str,
        *,
        location: str | None = None,
        install_date: date | None = None,
        notes: str | None = None,
    ) -> EquipmentRecord:
        record = self._repo.update(
            equipment_id, name, type, location=location, install_date=install_date, notes=notes
        )
        if record is None:
            raise _not_found(equipment_id)
        return record

    def delete_equipment(self, equipment_id: int) -> None:
        if not self._repo.delete(equipment_id):
            raise _not_found(equipment_id)

    def search_by_name(self, name: str) -> list[EquipmentRecord]:
        return self._repo.search_by_name(name)
