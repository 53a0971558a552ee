"""Umwandlung von Rohwerten (Punkte, Gewichte) und Einordnung in Leistungsstufen."""

from __future__ import annotations

import math
from typing import Optional

CATEGORIES = ("k", "t", "c", "a")
MISSING_MARKER = "M"
MISSING_BAND = "missing"

# Untere Grenze (inklusive) → Stufe; absteigend sortiert
LEVEL_BANDS: tuple[tuple[float, str], ...] = (
    (80.0, "Level 4"),
    (70.0, "Level 3"),
    (60.0, "Level 2"),
    (50.0, "Level 1"),
)
BELOW_LEVEL_BAND = "R"
BAND_LABELS = tuple(label for _, label in LEVEL_BANDS) + (BELOW_LEVEL_BAND,)


def parse_number(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def is_missing_marker(value: object) -> bool:
    """True für das "M"-Kennzeichen (Groß-/Kleinschreibung und Leerraum egal)."""
    return isinstance(value, str) and value.strip().upper() == MISSING_MARKER


def normalize_score(value: object) -> Optional[float]:
    """Rohwert einer Note → Zahl, oder ``None`` wenn der Eintrag nicht zählt.

    "M" zählt als 0. Leere oder nicht lesbare Einträge gelten als nicht
    bewertet und werden ausgelassen, nicht als 0 gewertet.
    """
    if is_missing_marker(value):
        return 0.0
    return parse_number(value)


def coerce_number(value: object, default: float) -> float:
    """Rohwert eines Gewichts oder Maximums → Zahl mit Ersatzwert.

    Null zählt wie ein fehlender Wert (ein Gewicht von 0 wird also zum
    Ersatzwert); das entspricht dem Verhalten der Eingabemasken.
    """
    number = parse_number(value)
    if not number:
        return default
    return number


def grade_band(percentage: Optional[float]) -> Optional[str]:
    """Ordnet einen Prozentwert einer der fünf Leistungsstufen zu."""
    if percentage is None:
        return None
    for lower, label in LEVEL_BANDS:
        if percentage >= lower:
            return label
    return BELOW_LEVEL_BAND


def score_band(value: object, max_score: object = 100) -> Optional[str]:
    """Leistungsstufe eines einzelnen Eintrags relativ zu seinem Maximum.

    "M" und eine eingetragene 0 werden als ``"missing"`` markiert.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if is_missing_marker(value):
        return MISSING_BAND
    number = parse_number(value)
    if number is None:
        return None
    if number == 0:
        return MISSING_BAND
    max_number = parse_number(max_score)
    if not max_number or max_number <= 0:
        return None
    return grade_band(number / max_number * 100)


__all__ = [
    "BAND_LABELS",
    "BELOW_LEVEL_BAND",
    "CATEGORIES",
    "LEVEL_BANDS",
    "MISSING_BAND",
    "MISSING_MARKER",
    "coerce_number",
    "grade_band",
    "is_missing_marker",
    "normalize_score",
    "parse_number",
    "score_band",
]
