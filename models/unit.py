"""Datenmodell für eine Unterrichtseinheit (Unit)."""

from pydantic import field_validator

from models.assignment import Assignment
from models.base import GradebookModel, RawValue


class Unit(GradebookModel):
    """Eine Unit des Terms oder die Abschlussprüfung (is_final=True)."""

    id: str
    title: str = ""
    subtitle: str = ""
    order: int = 0
    weight: RawValue = 0      # Anteil am Term in Prozent (nur für Term-Units)
    is_final: bool = False
    assignments: dict[str, Assignment] = {}

    @field_validator("assignments", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return {} if v is None else v

    def sorted_assignments(self) -> list[Assignment]:
        """Aufgaben in Anzeigereihenfolge (order, dann id)."""
        return sorted(self.assignments.values(), key=lambda a: (a.order, a.id))
