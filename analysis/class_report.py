"""Notenübersicht einer Klasse als Rich-Tabellen.

Zeigt je Schüler Term-, Abschluss- und Gesamtnote sowie die K/T/C/A-Werte,
darunter die Klassenmittel, und die Stufenverteilung der Klasse.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.defaults import BAND_STYLES, CATEGORY_LABELS
from config.schema import DisplayConfig
from grading.class_stats import (
    compute_all_student_averages,
    compute_class_averages,
    compute_class_stats,
)
from grading.calculations import compute_student_averages
from grading.scores import CATEGORIES, grade_band, parse_number, score_band
from models.base import RawValue
from models.class_data import ClassData
from models.student import Student


class ClassReport:
    """Gibt Schülernoten und Klassenstatistik formatiert aus."""

    def __init__(self, display: Optional[DisplayConfig] = None, console: Optional[Console] = None):
        self.display = display or DisplayConfig()
        self.console = console or Console()

    def fmt(self, value: Optional[float]) -> str:
        """Prozentwert mit konfigurierten Nachkommastellen oder Platzhalter."""
        if value is None:
            return self.display.empty_placeholder
        return f"{value:.{self.display.decimals}f}%"

    def _cell(self, value: Optional[float], colored: bool = True) -> Text:
        style = BAND_STYLES.get(grade_band(value) or "", "") if colored else ""
        return Text(self.fmt(value), style=style)

    # ─── Schülertabelle ───

    def build_averages_table(self, class_data: ClassData) -> Table:
        """Tabelle: eine Zeile pro Schüler, Fußzeile mit Klassenmitteln."""
        has_final = class_data.final_unit() is not None

        table = Table(
            title=f"Noten – {class_data.name or class_data.id}",
            box=box.ROUNDED,
            show_footer=True,
        )
        averages = compute_class_averages(class_data)

        table.add_column("Schüler", style="bold", footer="Klassenmittel")
        table.add_column("Gesamt", justify="right", footer=self.fmt(averages.overall))
        table.add_column("Term", justify="right", footer=self.fmt(averages.term))
        if has_final:
            table.add_column("Abschluss", justify="right", footer=self.fmt(averages.final))
        for cat in CATEGORIES:
            table.add_column(cat.upper(), justify="right")

        for student, avgs in compute_all_student_averages(class_data):
            row = [
                Text(student.display_name + (" (IEP)" if student.iep else "")),
                self._cell(avgs.overall_grade),
                self._cell(avgs.term_mark, colored=False),
            ]
            if has_final:
                row.append(self._cell(avgs.final_mark, colored=False))
            row.extend(self._cell(avgs.categories.get(cat)) for cat in CATEGORIES)
            table.add_row(*row)

        return table

    def print_averages(self, class_data: ClassData) -> None:
        self.console.print(self.build_averages_table(class_data))

    # ─── Einzelnoten ───

    def _score_cell(self, value: RawValue, max_score: RawValue) -> Text:
        """Eingetragener Wert mit Maximum, gefärbt nach Stufe des Eintrags."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return Text("")
        number = parse_number(value)
        text = f"{number:g}" if number is not None else str(value).strip().upper()
        maximum = parse_number(max_score)
        if maximum:
            text += f"/{maximum:g}"
        return Text(text, style=BAND_STYLES.get(score_band(value, max_score) or "", ""))

    def build_student_table(self, class_data: ClassData, student: Student) -> Table:
        """Tabelle: eine Zeile pro Aufgabe mit den eingetragenen K/T/C/A-Werten."""
        has_final = class_data.final_unit() is not None

        table = Table(
            title=f"{student.display_name} – {class_data.name or class_data.id}",
            box=box.ROUNDED,
        )
        table.add_column("Unit", style="dim")
        table.add_column("Aufgabe", style="bold")
        for cat in CATEGORIES:
            table.add_column(cat.upper(), justify="right")
        if has_final:
            table.add_column("Abschluss", justify="right")

        for unit in class_data.sorted_units():
            for assignment in unit.sorted_assignments():
                entry = student.grade_entry(assignment.id)
                if unit.is_final:
                    cells = [Text("") for _ in CATEGORIES]
                    cells.append(self._score_cell(entry.get("grade"), assignment.total))
                else:
                    cells = [
                        self._score_cell(entry.get(cat), assignment.category_totals.get(cat))
                        for cat in CATEGORIES
                    ]
                    if has_final:
                        cells.append(Text(""))
                label = assignment.name or assignment.id
                if assignment.is_submitted:
                    label += " (abgegeben)"
                table.add_row(unit.title or unit.id, label, *cells)

        return table

    def print_student(self, class_data: ClassData, student: Student) -> None:
        avgs = compute_student_averages(student, class_data)
        self.console.print(self.build_student_table(class_data, student))
        self.console.print(
            f"Gesamt [bold]{self.fmt(avgs.overall_grade)}[/bold]  |  "
            f"Term {self.fmt(avgs.term_mark)}  |  Abschluss {self.fmt(avgs.final_mark)}"
        )

    # ─── Klassenstatistik ───

    def print_stats(self, class_data: ClassData) -> None:
        """Stufenverteilung und klassenweite Kategorie-Durchschnitte."""
        stats = compute_class_stats(class_data)
        if stats is None:
            self.console.print("[dim]Keine Schüler in dieser Klasse.[/dim]")
            return

        dist = Table(title="Stufenverteilung", box=box.SIMPLE)
        dist.add_column("Stufe")
        dist.add_column("Schüler", justify="right")
        for label, count in stats.distribution.items():
            dist.add_row(Text(label, style=BAND_STYLES.get(label, "")), str(count))

        cats = Table(title="Kategorie-Durchschnitte", box=box.SIMPLE)
        cats.add_column("Kategorie")
        cats.add_column("Ø", justify="right")
        for cat in CATEGORIES:
            cats.add_row(
                f"{CATEGORY_LABELS[cat]} ({cat.upper()})",
                self._cell(stats.cat_averages[cat]),
            )

        graded = sum(stats.distribution.values())
        self.console.print(Panel(
            f"[bold]{class_data.name or class_data.id}[/bold]  |  "
            f"{len(class_data.students)} Schüler, {graded} mit Gesamtnote",
            title="Klassenstatistik",
            border_style="cyan",
        ))
        self.console.print(dist)
        self.console.print(cats)
