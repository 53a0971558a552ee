"""Testdaten-Generator für das Notenbuch.

Erzeugt eine realistische Klasse mit absichtlichen Sonderfällen:

  1. "M"-Einträge: einzelne fehlende Abgaben (zählen als 0)
  2. Leere Einträge: noch nicht bewertete Aufgaben (zählen nicht)
  3. Abgegeben/unbewertet: eine Aufgabe pro Unit mit is_submitted=True
  4. Kategorien mit Maximum 0: nicht jede Aufgabe prüft alle vier Kategorien
  5. Ein Schüler ganz ohne Noten (Gesamtnote bleibt leer)
"""

import random
from typing import Optional

from config.defaults import default_class_data
from config.schema import ClassDefaults
from grading.calculations import DEFAULT_FINAL_WEIGHT
from grading.scores import CATEGORIES, coerce_number
from models.assignment import Assignment
from models.class_data import ClassData
from models.student import Student

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Aiden", "Amelia", "Benjamin", "Chloe", "Daniel", "Emma", "Ethan",
    "Grace", "Hannah", "Isaac", "Jacob", "Layla", "Liam", "Maya", "Noah",
    "Olivia", "Priya", "Ryan", "Sofia", "Zoe", "Omar", "Lucas", "Mia",
]

_LAST_NAMES = [
    "Anderson", "Brown", "Chen", "Campbell", "Gagnon", "Khan", "Lee",
    "Martin", "Nguyen", "Patel", "Roy", "Singh", "Smith", "Tremblay",
    "Wilson", "Wong", "Young", "Taylor", "MacDonald", "Kowalski",
]

_ASSIGNMENT_NAMES = ["Quiz", "Test", "Project", "Lab", "Presentation", "Worksheet"]

# Wahrscheinlichkeiten für Sonderfälle
_P_MISSING = 0.05
_P_UNGRADED = 0.08
_P_UNUSED_CATEGORY = 0.25


class FakeClassGenerator:
    """Generiert eine vollständige Klasse auf Basis der Klassen-Vorgaben."""

    def __init__(self, defaults: Optional[ClassDefaults] = None, seed: Optional[int] = None) -> None:
        self.defaults = defaults or ClassDefaults()
        self.rng = random.Random(seed)

    # ─── Aufgaben ─────────────────────────────────────────────────────────────

    def _generate_assignments(self, unit_order: int, count: int) -> dict[str, Assignment]:
        """Erzeugt Aufgaben einer Term-Unit; die letzte ist noch unbewertet."""
        assignments: dict[str, Assignment] = {}
        for i in range(count):
            asg_id = f"u{unit_order}_a{i + 1}"
            totals = {}
            for cat in CATEGORIES:
                unused = self.rng.random() < _P_UNUSED_CATEGORY
                totals[cat] = 0 if unused else self.rng.choice([5, 10, 10, 20])
            if not any(totals.values()):
                totals["k"] = 10
            assignments[asg_id] = Assignment(
                id=asg_id,
                name=f"{self.rng.choice(_ASSIGNMENT_NAMES)} {unit_order}.{i + 1}",
                order=i,
                weight=self.rng.choice([1, 1, 1, 2]),
                category_totals=totals,
                is_submitted=(i == count - 1 and count > 2),
            )
        return assignments

    # ─── Schüler ──────────────────────────────────────────────────────────────

    def _score(self, ability: float, max_score: float) -> object:
        roll = self.rng.random()
        if roll < _P_MISSING:
            return "M"
        if roll < _P_MISSING + _P_UNGRADED:
            return ""
        pct = min(1.0, max(0.0, self.rng.gauss(ability, 0.12)))
        return round(pct * max_score, 1)

    def _generate_students(self, class_data: ClassData, count: int) -> dict[str, Student]:
        students: dict[str, Student] = {}
        used: set[tuple[str, str]] = set()
        for i in range(count):
            first, last = self.rng.choice(_FIRST_NAMES), self.rng.choice(_LAST_NAMES)
            while (first, last) in used and len(used) < len(_FIRST_NAMES) * len(_LAST_NAMES):
                first, last = self.rng.choice(_FIRST_NAMES), self.rng.choice(_LAST_NAMES)
            used.add((first, last))

            student_id = f"s{i + 1:02d}"
            grades: dict[str, dict[str, object]] = {}
            # Letzter Schüler: neu in der Klasse, noch keine Noten
            if i < count - 1:
                ability = self.rng.uniform(0.45, 0.95)
                for unit in class_data.sorted_units():
                    for asg in unit.sorted_assignments():
                        if unit.is_final:
                            grades[asg.id] = {"grade": self._score(ability, float(asg.total or 0))}
                        else:
                            grades[asg.id] = {
                                cat: self._score(ability, float(total or 0))
                                for cat, total in asg.category_totals.items()
                                if total
                            }
            students[student_id] = Student(
                id=student_id,
                first_name=first,
                last_name=last,
                grades=grades,
                iep=self.rng.random() < 0.1,
            )
        return students

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(
        self,
        name: str = "Demo Class",
        num_students: int = 24,
        with_final: bool = True,
        assignments_per_unit: int = 4,
    ) -> ClassData:
        """Erzeugt eine komplette Klasse (Units, Aufgaben, Schüler, Noten)."""
        defaults = self.defaults.model_copy(update={"has_final": with_final})
        class_data = default_class_data(name, class_id="demo", defaults=defaults)
        for unit in class_data.term_units():
            unit.title = f"Unit {unit.order}"
            unit.assignments = self._generate_assignments(unit.order, assignments_per_unit)
        final_unit = class_data.final_unit()
        if final_unit is not None:
            final_unit.assignments = {
                "final_exam": Assignment(id="final_exam", name="Final Exam", order=0,
                                         weight=2, total=80),
                "final_project": Assignment(id="final_project", name="Culminating Task",
                                            order=1, weight=1, total=50),
            }

        class_data.students = self._generate_students(class_data, num_students)
        return class_data

    def print_summary(self, class_data: ClassData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        term_units = class_data.term_units()
        final_unit = class_data.final_unit()
        n_submitted = sum(
            1 for u in class_data.units.values()
            for a in u.assignments.values() if a.is_submitted
        )
        n_missing = sum(
            1 for s in class_data.students.values()
            for entry in s.grades.values()
            for v in entry.values() if v == "M"
        )

        final_pct = coerce_number(class_data.final_weight, DEFAULT_FINAL_WEIGHT)

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        table.add_row("Schüler", str(len(class_data.students)),
                      f"{sum(1 for s in class_data.students.values() if s.iep)} mit IEP")
        table.add_row("Term-Units", str(len(term_units)),
                      f"je {100 / len(term_units):.1f}%" if term_units else "")
        table.add_row("Aufgaben", str(sum(len(u.assignments) for u in term_units)),
                      f"{n_submitted} abgegeben/unbewertet")
        table.add_row("Abschlussprüfung", "ja" if final_unit else "nein",
                      f"{final_pct:g}% der Gesamtnote" if final_unit else "")
        table.add_row("\"M\"-Einträge", str(n_missing), "zählen als 0")
        console.print(table)
