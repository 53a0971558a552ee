"""Prüfung von Unit-Gewichten: Die Term-Units müssen zusammen 100 % ergeben."""

from __future__ import annotations

import math
from typing import Iterable

from grading.scores import coerce_number
from models.unit import Unit

REQUIRED_TERM_TOTAL = 100


def weight_sum(unit_weights: Iterable[object]) -> float:
    """Summe der Gewichte; nicht lesbare Werte zählen als 0."""
    return sum(coerce_number(w, 0.0) for w in unit_weights)


def round_half_up(value: float) -> int:
    """Kaufmännisch runden (…,5 immer nach oben), nicht Banker's Rounding."""
    return math.floor(value + 0.5)


def is_valid_weight_distribution(unit_weights: Iterable[object]) -> bool:
    """True, wenn die ungerundete Summe gerundet genau 100 ergibt.

    Es wird die Summe gerundet, nicht jedes einzelne Gewicht:
    99,6 → gültig, 99,4 → ungültig. Das Abschlussgewicht spielt hier
    keine Rolle.
    """
    return round_half_up(weight_sum(unit_weights)) == REQUIRED_TERM_TOTAL


def term_weight_total(units: Iterable[Unit]) -> float:
    """Summe der Gewichte aller Term-Units (Abschluss-Unit ausgenommen)."""
    return weight_sum(u.weight for u in units if not u.is_final)
