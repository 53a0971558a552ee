"""Bearbeitung der Unit-Struktur einer Klasse.

Alle Operationen liefern eine neue ``ClassData`` zurück und lassen die
Eingabe unverändert. Gewichte werden beim Hinzufügen/Entfernen gleichmäßig
auf die übrigen Term-Units umverteilt.
"""

from __future__ import annotations

import logging
import uuid
from typing import Mapping, Optional

from grading.calculations import DEFAULT_FINAL_WEIGHT
from grading.scores import coerce_number
from grading.weights import is_valid_weight_distribution, weight_sum
from models.class_data import ClassData
from models.unit import Unit

logger = logging.getLogger(__name__)

FINAL_UNIT_ORDER = 999
FINAL_UNIT_TITLE = "Final Assessment"


class UnitWeightError(ValueError):
    """Vorgeschlagene Unit-Gewichte ergeben nicht 100 %."""

    def __init__(self, message: str, total: Optional[float] = None):
        super().__init__(message)
        self.total = total


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


def add_term_unit(
    class_data: ClassData, title: str = "", unit_id: Optional[str] = None
) -> ClassData:
    """Fügt eine Term-Unit hinzu und nimmt ihr Gewicht gleichmäßig den anderen ab.

    Bei n bestehenden Units bekommt die neue 100/(n+1) %, jede bestehende
    verliert davon 1/n (nie unter 0).
    """
    updated = class_data.model_copy(deep=True)
    term_units = updated.term_units()
    count = len(term_units)
    new_weight = 100 / (count + 1)

    if count:
        subtract = new_weight / count
        for unit in term_units:
            unit.weight = max(0.0, coerce_number(unit.weight, 0.0) - subtract)

    new_id = unit_id or _new_id("unit")
    if new_id in updated.units:
        raise ValueError(f"Unit-ID '{new_id}' existiert bereits.")
    updated.units[new_id] = Unit(id=new_id, title=title, order=count + 1, weight=new_weight)
    logger.debug(f"Unit {new_id} hinzugefügt ({new_weight:.2f}%)")
    return updated


def remove_term_unit(class_data: ClassData, unit_id: str) -> ClassData:
    """Entfernt eine Term-Unit und verteilt ihr Gewicht auf die übrigen."""
    if unit_id not in class_data.units:
        raise KeyError(unit_id)
    if class_data.units[unit_id].is_final:
        raise ValueError(
            "Die Abschluss-Unit wird über set_final_assessment() entfernt."
        )

    updated = class_data.model_copy(deep=True)
    removed = updated.units.pop(unit_id)
    remaining = updated.term_units()
    if remaining:
        add = coerce_number(removed.weight, 0.0) / len(remaining)
        for unit in remaining:
            unit.weight = coerce_number(unit.weight, 0.0) + add
    logger.debug(f"Unit {unit_id} entfernt, {len(remaining)} Units übrig")
    return updated


def renumber_units(class_data: ClassData) -> ClassData:
    """Vergibt fortlaufende order-Werte 1..n an die Term-Units."""
    updated = class_data.model_copy(deep=True)
    for index, unit in enumerate(updated.term_units(), start=1):
        unit.order = index
    return updated


def set_final_assessment(
    class_data: ClassData, enabled: bool, final_weight: object = None
) -> ClassData:
    """Schaltet die Abschlussprüfung ein oder aus.

    Beim Einschalten bleiben die Aufgaben einer vorhandenen Abschluss-Unit
    erhalten; beim Ausschalten wird die Unit samt Aufgaben entfernt.
    """
    updated = class_data.model_copy(deep=True)
    existing = updated.final_unit()
    weight = coerce_number(
        final_weight if final_weight is not None else updated.final_weight,
        DEFAULT_FINAL_WEIGHT,
    )

    if enabled:
        if existing is not None:
            final_id = existing.id
        else:
            final_id = "final" if "final" not in updated.units else _new_id("final")
        updated.units[final_id] = Unit(
            id=final_id,
            title=FINAL_UNIT_TITLE,
            subtitle=existing.subtitle if existing else "",
            is_final=True,
            order=FINAL_UNIT_ORDER,
            assignments=existing.assignments if existing else {},
        )
    elif existing is not None:
        del updated.units[existing.id]

    updated.has_final = enabled
    updated.final_weight = weight
    return updated


def apply_unit_weights(class_data: ClassData, weights: Mapping[str, object]) -> ClassData:
    """Übernimmt neue Unit-Gewichte, sofern die Term-Units danach 100 % ergeben.

    Nicht genannte Units behalten ihr Gewicht. Unbekannte IDs und die
    Abschluss-Unit werden abgelehnt.
    """
    for unit_id in weights:
        unit = class_data.units.get(unit_id)
        if unit is None:
            raise UnitWeightError(f"Unbekannte Unit: '{unit_id}'")
        if unit.is_final:
            raise UnitWeightError(
                "Das Gewicht der Abschluss-Unit wird über final_weight gesetzt."
            )

    proposal = {
        unit.id: coerce_number(weights.get(unit.id, unit.weight), 0.0)
        for unit in class_data.term_units()
    }
    if not is_valid_weight_distribution(proposal.values()):
        total = weight_sum(proposal.values())
        raise UnitWeightError(
            f"Die Term-Units ergeben zusammen {total:.2f}% – erforderlich sind 100%.",
            total=total,
        )

    updated = class_data.model_copy(deep=True)
    for unit_id, weight in proposal.items():
        updated.units[unit_id].weight = weight
    return updated
