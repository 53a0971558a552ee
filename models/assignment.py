"""Datenmodell für eine Aufgabe / Leistungsüberprüfung (Pydantic v2)."""

from pydantic import field_validator

from models.base import GradebookModel, RawValue


class Assignment(GradebookModel):
    """Eine einzelne Aufgabe innerhalb einer Unit."""

    id: str
    name: str = ""
    order: int = 0
    weight: RawValue = 1                     # Relativer Faktor (kein Prozentwert)
    is_submitted: bool = False               # True → aus allen Durchschnitten ausgeschlossen
    category_totals: dict[str, RawValue] = {}  # k/t/c/a → Maximalpunkte (nur Term-Units)
    total: RawValue = None                   # Maximalpunkte (nur Final-Unit)

    @field_validator("category_totals", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return {} if v is None else v
