"""Klassenstatistik: Stufenverteilung, Kategorie-Durchschnitte, Klassenmittel."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel

from grading.calculations import StudentAverages, compute_student_averages
from grading.scores import BAND_LABELS, CATEGORIES, grade_band
from models.class_data import ClassData
from models.student import Student

logger = logging.getLogger(__name__)


class ClassStats(BaseModel):
    """Verteilung der Gesamtnoten und klassenweite K/T/C/A-Durchschnitte."""

    distribution: dict[str, int]
    cat_averages: dict[str, float]   # 0.0 wenn kein Schüler Daten hat


class ClassAverages(BaseModel):
    """Klassenmittel von Gesamt-, Term- und Abschlussnote (Fußzeile der Notentabelle)."""

    overall: Optional[float] = None
    term: Optional[float] = None
    final: Optional[float] = None
    student_count: int = 0


def compute_all_student_averages(
    class_data: ClassData,
) -> list[tuple[Student, StudentAverages]]:
    """Noten aller Schüler in alphabetischer Reihenfolge (für Tabellen)."""
    return [
        (student, compute_student_averages(student, class_data))
        for student in class_data.sorted_students()
    ]


def compute_class_stats(class_data: ClassData) -> Optional[ClassStats]:
    """Stufenverteilung und Kategorie-Durchschnitte einer Klasse.

    Gibt None zurück, wenn die Klasse keine Schüler hat ("keine Daten" ist
    etwas anderes als "alles 0"). Schüler ohne Gesamtnote werden in keiner
    Stufe gezählt.
    """
    if not class_data.students:
        return None

    distribution = {label: 0 for label in BAND_LABELS}
    cat_sums = {cat: 0.0 for cat in CATEGORIES}
    cat_counts = {cat: 0 for cat in CATEGORIES}

    for student in class_data.sorted_students():
        avgs = compute_student_averages(student, class_data)
        band = grade_band(avgs.overall_grade)
        if band is not None:
            distribution[band] += 1
        for cat in CATEGORIES:
            value = avgs.categories.get(cat)
            if value is not None:
                cat_sums[cat] += value
                cat_counts[cat] += 1

    cat_averages = {
        cat: (cat_sums[cat] / cat_counts[cat] if cat_counts[cat] else 0.0)
        for cat in CATEGORIES
    }
    logger.debug(f"Klasse {class_data.id}: Verteilung {distribution}")
    return ClassStats(distribution=distribution, cat_averages=cat_averages)


def compute_class_averages(class_data: ClassData) -> ClassAverages:
    """Mittelwerte über alle Schüler, die für die jeweilige Note Daten haben."""
    results = [avgs for _, avgs in compute_all_student_averages(class_data)]

    def _mean(values: list[Optional[float]]) -> Optional[float]:
        present = [v for v in values if v is not None]
        return sum(present) / len(present) if present else None

    return ClassAverages(
        overall=_mean([r.overall_grade for r in results]),
        term=_mean([r.term_mark for r in results]),
        final=_mean([r.final_mark for r in results]),
        student_count=len(results),
    )
