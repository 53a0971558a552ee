"""Datenmodell für eine Schülerin / einen Schüler."""

from typing import Optional

from pydantic import field_validator

from models.base import GradebookModel, RawValue


class Student(GradebookModel):
    """Repräsentiert einen Schüler mit allen erfassten Noten."""

    id: str
    first_name: str = ""
    last_name: str = ""
    # Aufgaben-ID → {"k": 8, "t": "M", ...} bzw. {"grade": 42} für die Abschlussprüfung
    grades: dict[str, dict[str, RawValue]] = {}
    # Wird gespeichert, fließt aber (noch) nicht in die Berechnung ein
    starting_overall_mark: Optional[float] = None
    iep: bool = False

    @field_validator("grades", mode="before")
    @classmethod
    def _drop_empty_entries(cls, v):
        if v is None:
            return {}
        return {aid: (entry or {}) for aid, entry in dict(v).items()}

    @property
    def display_name(self) -> str:
        """"Nachname, Vorname" – oder die ID, wenn kein Name erfasst ist."""
        if self.last_name and self.first_name:
            return f"{self.last_name}, {self.first_name}"
        return self.last_name or self.first_name or self.id

    def grade_entry(self, assignment_id: str) -> dict[str, RawValue]:
        """Erfasste Werte für eine Aufgabe (leer, wenn nichts eingetragen ist)."""
        return self.grades.get(assignment_id) or {}
