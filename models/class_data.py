"""ClassData: Vollständiger Datensatz einer Klasse (Gewichte, Units, Schüler)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import field_validator, model_validator

from models.base import GradebookModel, RawValue
from models.student import Student
from models.unit import Unit

DEFAULT_CATEGORY_WEIGHT = 25.0


def _fmt_weight(value: RawValue) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:g}%"
    return repr(value)


class ClassData(GradebookModel):
    """Eine Klasse mit Kategorie-Gewichten, Units, Abschlussgewicht und Schülern."""

    id: str
    name: str = ""
    category_weights: dict[str, RawValue] = {
        "k": DEFAULT_CATEGORY_WEIGHT,
        "t": DEFAULT_CATEGORY_WEIGHT,
        "c": DEFAULT_CATEGORY_WEIGHT,
        "a": DEFAULT_CATEGORY_WEIGHT,
    }
    units: dict[str, Unit] = {}
    final_weight: RawValue = 30.0   # Anteil der Abschlussprüfung an der Gesamtnote
    has_final: bool = False
    students: dict[str, Student] = {}
    modified_at: Optional[datetime] = None

    @field_validator("units", "students", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return {} if v is None else v

    @field_validator("category_weights", mode="before")
    @classmethod
    def _fill_category_defaults(cls, v):
        # Fehlende Kategorien bekommen den Standardwert, wie in der Gewichts-Ansicht
        weights = {cat: DEFAULT_CATEGORY_WEIGHT for cat in ("k", "t", "c", "a")}
        if v:
            weights.update({k: w for k, w in dict(v).items() if w is not None})
        return weights

    @model_validator(mode="after")
    def _check_single_final(self):
        finals = [u.id for u in self.units.values() if u.is_final]
        if len(finals) > 1:
            raise ValueError(
                f"Höchstens eine Abschluss-Unit erlaubt, gefunden: {sorted(finals)}"
            )
        return self

    # ─── Units ───

    def sorted_units(self) -> list[Unit]:
        """Alle Units in Anzeigereihenfolge (order, dann id)."""
        return sorted(self.units.values(), key=lambda u: (u.order, u.id))

    def term_units(self) -> list[Unit]:
        """Alle Units außer der Abschlussprüfung."""
        return [u for u in self.sorted_units() if not u.is_final]

    def final_unit(self) -> Optional[Unit]:
        """Die Abschluss-Unit oder None."""
        for unit in self.sorted_units():
            if unit.is_final:
                return unit
        return None

    def sorted_students(self) -> list[Student]:
        """Schüler alphabetisch nach Nachname, Vorname."""
        return sorted(
            self.students.values(),
            key=lambda s: (s.last_name.lower(), s.first_name.lower(), s.id),
        )

    def summary(self) -> str:
        """Kurze Übersicht über die Klasse."""
        n_assignments = sum(len(u.assignments) for u in self.units.values())
        final = self.final_unit()
        lines = [
            f"Klasse: {self.name or self.id}",
            f"Schüler: {len(self.students)}",
            f"Units: {len(self.term_units())} (+ Abschlussprüfung)" if final
            else f"Units: {len(self.term_units())}",
            f"Aufgaben: {n_assignments}",
            "Kategorie-Gewichte: " + ", ".join(
                f"{k.upper()} {_fmt_weight(w)}" for k, w in self.category_weights.items()
            ),
        ]
        if final:
            lines.append(f"Abschlussgewicht: {_fmt_weight(self.final_weight)}")
        return "\n".join(lines)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert die Klasse als JSON-Datei (camelCase-Felder)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated = self.model_copy(update={"modified_at": datetime.now(timezone.utc)})
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2, by_alias=True))

    @classmethod
    def load_json(cls, path: Path) -> "ClassData":
        """Lädt eine Klasse aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())

