"""Notenberechnung für einen einzelnen Schüler.

Hierarchischer gewichteter Durchschnitt:
Aufgabe → Kategorie (K/T/C/A) → Unit → Term → Gesamtnote.

Alle Funktionen sind rein: sie lesen ``Student`` und ``ClassData`` und geben
ein neues ``StudentAverages`` zurück. Fehlende oder unbrauchbare Daten führen
nie zu einer Ausnahme, sondern zu ``None`` für die betroffene Größe.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from pydantic import BaseModel

from grading.scores import CATEGORIES, coerce_number, normalize_score, parse_number
from models.assignment import Assignment
from models.class_data import DEFAULT_CATEGORY_WEIGHT, ClassData
from models.student import Student
from models.unit import Unit

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNMENT_WEIGHT = 1.0
DEFAULT_FINAL_WEIGHT = 30.0


class StudentAverages(BaseModel):
    """Abgeleitete Noten eines Schülers (werden nie gespeichert)."""

    term_mark: Optional[float] = None
    final_mark: Optional[float] = None
    overall_grade: Optional[float] = None
    categories: dict[str, Optional[float]] = {cat: None for cat in CATEGORIES}


# ─── Einträge ─────────────────────────────────────────────────────────────────

def _gradable(unit: Unit) -> Iterator[Assignment]:
    """Aufgaben einer Unit, die in Durchschnitte einfließen dürfen."""
    for assignment in unit.sorted_assignments():
        if not assignment.is_submitted:
            yield assignment


def _category_entries(
    student: Student, unit: Unit
) -> Iterator[tuple[str, float, float, float]]:
    """Liefert (Kategorie, Punkte, Maximum, Aufgabengewicht) je gültigem Eintrag.

    Eine Kategorie wird übersprungen, wenn ihr Maximum ≤ 0 ist oder der
    Eintrag keine Zahl ergibt.
    """
    for assignment in _gradable(unit):
        entry = student.grade_entry(assignment.id)
        weight = coerce_number(assignment.weight, DEFAULT_ASSIGNMENT_WEIGHT)
        for cat in CATEGORIES:
            max_score = coerce_number(assignment.category_totals.get(cat), 0.0)
            if max_score <= 0:
                continue
            score = normalize_score(entry.get(cat))
            if score is None:
                continue
            yield cat, score, max_score, weight


def _category_weight(class_data: ClassData, cat: str) -> float:
    weight = parse_number(class_data.category_weights.get(cat))
    return DEFAULT_CATEGORY_WEIGHT if weight is None else weight


# ─── Term ─────────────────────────────────────────────────────────────────────

def unit_average(student: Student, unit: Unit, class_data: ClassData) -> Optional[float]:
    """Gewichteter Prozent-Durchschnitt einer Term-Unit oder None ohne Daten."""
    weighted_sum = 0.0
    weight_total = 0.0
    for cat, score, max_score, weight in _category_entries(student, unit):
        cat_factor = _category_weight(class_data, cat) / 100
        pct = score / max_score * 100
        weighted_sum += pct * weight * cat_factor
        weight_total += weight * cat_factor
    if weight_total > 0:
        return weighted_sum / weight_total
    return None


def compute_term_mark(student: Student, class_data: ClassData) -> Optional[float]:
    """Term-Note: Unit-Durchschnitte gewichtet mit dem Unit-Anteil.

    Units ohne bewertbare Einträge tragen gar nichts bei (auch keine 0).
    """
    term_sum = 0.0
    term_weight = 0.0
    for unit in class_data.term_units():
        avg = unit_average(student, unit, class_data)
        if avg is None:
            continue
        unit_weight = coerce_number(unit.weight, 0.0)
        term_sum += avg * unit_weight
        term_weight += unit_weight
    if term_weight > 0:
        return term_sum / term_weight
    return None


def compute_category_averages(
    student: Student, class_data: ClassData
) -> dict[str, Optional[float]]:
    """Einfache Quoten-Durchschnitte je Kategorie über alle Term-Units.

    Unabhängig von den Kategorie-Gewichten: die beeinflussen nur die Term-Note.
    """
    sums = {cat: 0.0 for cat in CATEGORIES}
    maxes = {cat: 0.0 for cat in CATEGORIES}
    for unit in class_data.term_units():
        for cat, score, max_score, weight in _category_entries(student, unit):
            sums[cat] += score * weight
            maxes[cat] += max_score * weight
    return {
        cat: (sums[cat] / maxes[cat] * 100 if maxes[cat] > 0 else None)
        for cat in CATEGORIES
    }


# ─── Abschlussprüfung ─────────────────────────────────────────────────────────

def compute_final_mark(student: Student, class_data: ClassData) -> Optional[float]:
    """Note der Abschluss-Unit (eindimensional, ohne Kategorien)."""
    final_unit = class_data.final_unit()
    if final_unit is None:
        return None

    weighted_sum = 0.0
    weight_total = 0.0
    for assignment in _gradable(final_unit):
        total = coerce_number(assignment.total, 0.0)
        if total <= 0:
            continue
        score = normalize_score(student.grade_entry(assignment.id).get("grade"))
        if score is None:
            continue
        weight = coerce_number(assignment.weight, DEFAULT_ASSIGNMENT_WEIGHT)
        weighted_sum += score / total * 100 * weight
        weight_total += weight
    if weight_total > 0:
        return weighted_sum / weight_total
    return None


# ─── Gesamtnote ───────────────────────────────────────────────────────────────

def blend_overall(
    term_mark: Optional[float], final_mark: Optional[float], final_weight: object
) -> Optional[float]:
    """Gesamtnote aus Term- und Abschlussnote.

    Fehlt eine der beiden, zählt die vorhandene allein.
    """
    if term_mark is not None and final_mark is not None:
        final_pct = coerce_number(final_weight, DEFAULT_FINAL_WEIGHT)
        return term_mark * ((100 - final_pct) / 100) + final_mark * (final_pct / 100)
    if term_mark is not None:
        return term_mark
    return final_mark


def compute_student_averages(student: Student, class_data: ClassData) -> StudentAverages:
    """Berechnet Term-, Abschluss- und Gesamtnote sowie K/T/C/A-Durchschnitte."""
    term_mark = compute_term_mark(student, class_data)
    final_mark = compute_final_mark(student, class_data)
    overall = blend_overall(term_mark, final_mark, class_data.final_weight)
    logger.debug(
        f"Schüler {student.id}: Term={term_mark}, Abschluss={final_mark}, Gesamt={overall}"
    )
    return StudentAverages(
        term_mark=term_mark,
        final_mark=final_mark,
        overall_grade=overall,
        categories=compute_category_averages(student, class_data),
    )
