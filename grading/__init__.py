"""Notenberechnung: Schülerdurchschnitte, Gewichtsprüfung, Klassenstatistik."""

from .calculations import StudentAverages, compute_student_averages
from .weights import is_valid_weight_distribution, term_weight_total
from .class_stats import ClassAverages, ClassStats, compute_class_averages, compute_class_stats
from .scores import grade_band, normalize_score, score_band
from .units import (
    UnitWeightError,
    add_term_unit,
    apply_unit_weights,
    remove_term_unit,
    renumber_units,
    set_final_assessment,
)

__all__ = [
    "StudentAverages",
    "compute_student_averages",
    "is_valid_weight_distribution",
    "term_weight_total",
    "ClassAverages",
    "ClassStats",
    "compute_class_averages",
    "compute_class_stats",
    "grade_band",
    "normalize_score",
    "score_band",
    "UnitWeightError",
    "add_term_unit",
    "apply_unit_weights",
    "remove_term_unit",
    "renumber_units",
    "set_final_assessment",
]
