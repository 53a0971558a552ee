"""Plausibilitäts-Check für eine Klasse.

Markiert Auffälligkeiten in Konfiguration und Noten, korrigiert aber nichts:
die Notenberechnung rechnet mit den Werten, wie sie eingetragen sind.
"""

from pydantic import BaseModel

from grading.calculations import DEFAULT_FINAL_WEIGHT
from grading.scores import CATEGORIES, coerce_number, normalize_score, parse_number
from grading.weights import is_valid_weight_distribution, term_weight_total
from models.class_data import DEFAULT_CATEGORY_WEIGHT, ClassData

WEIGHT_TOLERANCE = 0.1


def _is_filled(value: object) -> bool:
    return value is not None and str(value).strip() != ""


class GradebookCheckReport(BaseModel):
    """Ergebnis des Plausibilitäts-Checks."""

    class_id: str
    errors: list[str]      # Konfiguration so nicht speicherbar
    warnings: list[str]    # Hinweise (Berechnung läuft trotzdem)

    @property
    def is_consistent(self) -> bool:
        return not self.errors

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_consistent:
            status = "[bold green]✓ KONSISTENT[/bold green]"
        else:
            status = "[bold red]✗ FEHLERHAFT[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Notenbuch-Check", border_style="cyan"))


class GradebookChecker:
    """Prüft Gewichte, Struktur und eingetragene Noten einer Klasse."""

    def check(self, class_data: ClassData) -> GradebookCheckReport:
        errors: list[str] = []
        warnings: list[str] = []

        self._check_weights(class_data, errors, warnings)
        self._check_structure(class_data, warnings)
        self._check_scores(class_data, warnings)

        return GradebookCheckReport(
            class_id=class_data.id, errors=errors, warnings=warnings,
        )

    # ── Gewichte ─────────────────────────────────────────────────────────

    def _check_weights(self, class_data: ClassData, errors: list[str], warnings: list[str]) -> None:
        term_units = class_data.term_units()
        if term_units and not is_valid_weight_distribution(u.weight for u in term_units):
            errors.append(
                f"Term-Units ergeben {term_weight_total(term_units):.2f}% statt 100%."
            )

        cat_total = 0.0
        for cat in CATEGORIES:
            raw = class_data.category_weights.get(cat)
            weight = parse_number(raw)
            if weight is None:
                weight = DEFAULT_CATEGORY_WEIGHT
                if _is_filled(raw):
                    warnings.append(
                        f"Gewicht {cat.upper()} '{raw}' ist keine Zahl "
                        f"(es gilt {weight:g}%)."
                    )
            cat_total += weight
        if abs(cat_total - 100) >= WEIGHT_TOLERANCE:
            warnings.append(
                f"Kategorie-Gewichte ergeben {cat_total:.1f}% statt 100% "
                f"(Term-Note wird trotzdem normiert)."
            )

        final_weight = parse_number(class_data.final_weight)
        if final_weight is None and _is_filled(class_data.final_weight):
            warnings.append(
                f"Abschlussgewicht '{class_data.final_weight}' ist keine Zahl "
                f"(es gilt {DEFAULT_FINAL_WEIGHT:g}%)."
            )
        elif final_weight is not None and not 0 <= final_weight <= 100:
            warnings.append(f"Abschlussgewicht {final_weight:g}% liegt außerhalb 0–100%.")

    # ── Struktur ─────────────────────────────────────────────────────────

    def _check_structure(self, class_data: ClassData, warnings: list[str]) -> None:
        for unit in class_data.term_units():
            if not unit.assignments:
                warnings.append(f"Unit '{unit.title or unit.id}' hat keine Aufgaben.")

        final_unit = class_data.final_unit()
        if final_unit is not None and not final_unit.assignments:
            warnings.append("Abschlussprüfung ist aktiviert, enthält aber keine Aufgaben.")
        if class_data.has_final and final_unit is None:
            warnings.append("has_final ist gesetzt, es gibt aber keine Abschluss-Unit.")

    # ── Noten ────────────────────────────────────────────────────────────

    def _check_scores(self, class_data: ClassData, warnings: list[str]) -> None:
        assignments = {
            a.id: (unit, a)
            for unit in class_data.sorted_units()
            for a in unit.sorted_assignments()
        }

        for student in class_data.sorted_students():
            who = student.display_name
            for assignment_id, entry in student.grades.items():
                if assignment_id not in assignments:
                    warnings.append(f"{who}: Note für unbekannte Aufgabe '{assignment_id}'.")
                    continue
                unit, assignment = assignments[assignment_id]
                label = assignment.name or assignment.id

                if unit.is_final:
                    fields = {"grade": coerce_number(assignment.total, 0.0)}
                else:
                    fields = {
                        cat: coerce_number(assignment.category_totals.get(cat), 0.0)
                        for cat in CATEGORIES
                    }

                for field, max_score in fields.items():
                    score = normalize_score(entry.get(field))
                    if score is None:
                        continue
                    tag = field.upper() if field != "grade" else "Note"
                    if score < 0:
                        warnings.append(f"{who}: {label} ({tag}) ist negativ ({score:g}).")
                    if max_score <= 0:
                        if score != 0:
                            warnings.append(
                                f"{who}: {label} ({tag}) hat eine Note, aber kein Maximum."
                            )
                    elif score > max_score:
                        warnings.append(
                            f"{who}: {label} ({tag}) {score:g} > Maximum {max_score:g}."
                        )
